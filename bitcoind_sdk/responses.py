from __future__ import annotations

import json
import random as _random
from typing import Any, Iterator

import httpx

from . import paths
from .paths import Key

# Encoding headers describe the wire body; copies always hold decoded bytes.
_BODY_HEADERS = ("content-encoding", "content-length", "transfer-encoding")


def decode_container(response: httpx.Response) -> dict[str, Any] | None:
    """Decode a JSON-RPC body, or return None when it is not a JSON object."""
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    return payload


class BitcoindResponse:
    """Read-only view over one JSON-RPC response.

    The transport body is decoded once. Path queries run against ``result``
    and honour the key selected with :meth:`key` (or by calling the response,
    ``response("tx")``). Every ``with_*`` method returns a new instance and
    leaves both this object and the wrapped ``httpx.Response`` untouched.
    """

    def __init__(self, response: httpx.Response) -> None:
        self._response: httpx.Response | None = response
        self._container: dict[str, Any] = decode_container(response) or {}
        self._current: str | None = None

    @classmethod
    def from_container(cls, container: dict[str, Any]) -> "BitcoindResponse":
        """Build a response that has a decoded body but no HTTP message."""
        new = cls.__new__(cls)
        new._response = None
        new._container = dict(container)
        new._current = None
        return new

    def response(self) -> httpx.Response | None:
        return self._response

    def to_container(self) -> dict[str, Any]:
        return self._container

    def to_json(self) -> str:
        return json.dumps(self._container)

    def has_error(self) -> bool:
        return self._container.get("error") is not None

    def error(self) -> dict[str, Any] | None:
        if self.has_error():
            return self._container["error"]
        return None

    def has_result(self) -> bool:
        return self._container.get("result") is not None

    def result(self) -> Any:
        if self.has_result():
            return self._container["result"]
        return None

    @property
    def current_key(self) -> str | None:
        return self._current

    def key(self, key: Key = None) -> "BitcoindResponse":
        new = self._clone()
        new._current = paths.join_key(self._current, key)
        return new

    def __call__(self, key: Key = None) -> "BitcoindResponse":
        return self.key(key)

    def get(self, key: Key = None) -> Any:
        return paths.get(self.result(), self._full_key(key))

    def has(self, key: Key = None) -> bool:
        return paths.has(self.result(), self._full_key(key))

    def exists(self, key: Key = None) -> bool:
        return paths.exists(self.result(), self._full_key(key))

    def count(self, key: Key = None) -> int:
        full_key = self._full_key(key)
        if full_key is None:
            result = self.result()
            if result is None:
                return 0
            if not isinstance(result, (dict, list)):
                return 1
        return paths.count(self.result(), full_key)

    def first(self, key: Key = None) -> Any:
        return paths.first(self.result(), self._full_key(key))

    def last(self, key: Key = None) -> Any:
        return paths.last(self.result(), self._full_key(key))

    def contains(self, needle: Any, key: Key = None) -> bool:
        return paths.contains(self.result(), needle, self._full_key(key))

    def keys(self, key: Key = None) -> list[Any]:
        return paths.keys(self.result(), self._full_key(key))

    def values(self, key: Key = None) -> list[Any]:
        return paths.values(self.result(), self._full_key(key))

    def random(self, number: int = 1, key: Key = None, *, rng: _random.Random | None = None) -> Any:
        return paths.random(self.result(), number, self._full_key(key), rng=rng)

    def flatten(self, key: Key = None) -> list[Any]:
        return paths.flatten(self.result(), self._full_key(key))

    def sum(self, key: Key = None) -> int | float:
        return paths.sum_values(self.result(), self._full_key(key))

    def __getitem__(self, key: Key) -> Any:
        return self.get(key)

    def __setitem__(self, key: Key, value: Any) -> None:
        raise TypeError("cannot modify immutable response")

    def __delitem__(self, key: Key) -> None:
        raise TypeError("cannot modify immutable response")

    def __contains__(self, key: Key) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        return self.count()

    def __bool__(self) -> bool:
        return True

    def __iter__(self) -> Iterator[Any]:
        return iter(self.keys())

    def __str__(self) -> str:
        value = self.get()
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        if isinstance(value, bool):
            return "true" if value else "false"
        if value is None:
            return ""
        return str(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(result={self.result()!r}, error={self.error()!r})"

    def __copy__(self) -> "BitcoindResponse":
        return self._clone()

    def __getstate__(self) -> dict[str, Any]:
        return {"container": self._container, "current": self._current}

    def __setstate__(self, state: dict[str, Any]) -> None:
        self._response = None
        self._container = state["container"]
        self._current = state["current"]

    # HTTP message accessors, forwarded to the wrapped httpx.Response.

    @property
    def status_code(self) -> int:
        return self._raw().status_code

    @property
    def reason_phrase(self) -> str:
        return self._raw().reason_phrase

    @property
    def protocol_version(self) -> str:
        return self._raw().http_version.removeprefix("HTTP/")

    @property
    def headers(self) -> httpx.Headers:
        return self._raw().headers

    @property
    def content(self) -> bytes:
        return self._raw().content

    def has_header(self, name: str) -> bool:
        return name in self._raw().headers

    def get_header(self, name: str) -> list[str]:
        return self._raw().headers.get_list(name)

    def get_header_line(self, name: str) -> str:
        return ", ".join(self.get_header(name))

    def with_status(self, status_code: int) -> "BitcoindResponse":
        return self._replace(status_code=status_code)

    def with_protocol_version(self, version: str) -> "BitcoindResponse":
        extensions = dict(self._raw().extensions)
        extensions["http_version"] = f"HTTP/{version}".encode("ascii")
        return self._replace(extensions=extensions)

    def with_header(self, name: str, value: str) -> "BitcoindResponse":
        headers = self._copy_headers()
        headers[name] = value
        return self._replace(headers=headers)

    def with_added_header(self, name: str, value: str) -> "BitcoindResponse":
        headers = httpx.Headers([*self._raw().headers.multi_items(), (name, value)])
        return self._replace(headers=headers)

    def without_header(self, name: str) -> "BitcoindResponse":
        headers = self._copy_headers()
        if name in headers:
            del headers[name]
        return self._replace(headers=headers)

    def with_body(self, content: bytes) -> "BitcoindResponse":
        new = self._replace(content=content)
        new._container = decode_container(new._raw()) or {}
        return new

    def _clone(self) -> "BitcoindResponse":
        new = type(self).__new__(type(self))
        new.__dict__.update(self.__dict__)
        return new

    def _full_key(self, key: Key) -> str | None:
        return paths.join_key(self._current, key)

    def _raw(self) -> httpx.Response:
        if self._response is None:
            raise RuntimeError("response is detached from its HTTP message")
        return self._response

    def _copy_headers(self) -> httpx.Headers:
        return httpx.Headers(self._raw().headers.multi_items())

    def _replace(
        self,
        *,
        status_code: int | None = None,
        headers: httpx.Headers | None = None,
        content: bytes | None = None,
        extensions: dict[str, Any] | None = None,
    ) -> "BitcoindResponse":
        raw = self._raw()
        new_headers = httpx.Headers(headers if headers is not None else raw.headers.multi_items())
        for name in _BODY_HEADERS:
            if name in new_headers:
                del new_headers[name]
        new_raw = httpx.Response(
            status_code if status_code is not None else raw.status_code,
            headers=new_headers,
            content=content if content is not None else raw.content,
            extensions=extensions if extensions is not None else raw.extensions,
        )
        try:
            new_raw.request = raw.request
        except RuntimeError:
            pass
        new = self._clone()
        new._response = new_raw
        return new
