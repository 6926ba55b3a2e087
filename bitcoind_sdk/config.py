from __future__ import annotations

from dataclasses import dataclass, fields
import os
from typing import Any, Callable, Mapping

import httpx

from .exceptions import BitcoindConfigurationError
from .responses import BitcoindResponse

_URL_PARTS = ("scheme", "host", "port", "user", "pass")


@dataclass(frozen=True)
class BitcoindClientConfig:
    scheme: str = "http"
    host: str = "127.0.0.1"
    port: int = 8332
    user: str | None = None
    password: str | None = None
    ca: str | None = None
    preserve_case: bool = False
    timeout_seconds: float | None = None
    response_class: type[BitcoindResponse] = BitcoindResponse
    response_middleware: tuple[Callable[[BitcoindResponse], BitcoindResponse], ...] = ()

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "BitcoindClientConfig":
        """Build a config from loose keys.

        ``password`` wins over legacy ``pass`` and ``timeout_seconds`` wins
        over ``timeout``.
        """
        known = {field.name for field in fields(cls)}
        kwargs = {key: value for key, value in values.items() if key in known}
        password = values.get("password")
        if password is None:
            password = values.get("pass")
        kwargs["password"] = password
        if kwargs.get("timeout_seconds") is None and values.get("timeout") is not None:
            kwargs["timeout_seconds"] = float(values["timeout"])
        if "port" in kwargs and kwargs["port"] is not None:
            kwargs["port"] = int(kwargs["port"])
        if "response_middleware" in kwargs:
            kwargs["response_middleware"] = tuple(kwargs["response_middleware"])
        return cls(**kwargs)

    @classmethod
    def from_url(cls, url: str, **overrides: Any) -> "BitcoindClientConfig":
        return cls.from_dict({**split_url(url), **overrides})

    def dsn(self) -> str:
        return f"{self.scheme or 'http'}://{self.host}:{self.port}"

    def auth(self) -> tuple[str, str] | None:
        if self.user is None and self.password is None:
            return None
        return (self.user or "", self.password or "")

    def ca_file(self) -> str | None:
        if self.ca and os.path.isfile(self.ca):
            return self.ca
        return None


def split_url(url: str) -> dict[str, Any]:
    """Split a connection URL into scheme/host/port/user/pass parts.

    Only parts present in the URL are returned.
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError):
        raise BitcoindConfigurationError({"url": url}, "Invalid url") from None

    parts: dict[str, Any] = {
        "scheme": parsed.scheme,
        "host": parsed.host,
        "port": parsed.port,
        "user": parsed.username,
        "pass": parsed.password,
    }
    parts = {key: parts[key] for key in _URL_PARTS if parts[key] not in (None, "")}
    if "scheme" not in parts or "host" not in parts:
        raise BitcoindConfigurationError({"url": url}, "Invalid url")
    return parts
