from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx

    from .responses import BitcoindResponse


class BitcoindError(Exception):
    """Base SDK exception."""

    def constructor_args(self) -> tuple[Any, ...]:
        return self.args

    def rebind(self, cls: type["BitcoindError"]) -> "BitcoindError":
        """Re-create this error as ``cls`` carrying the same data."""
        return cls(*self.constructor_args())


class BitcoindConnectionError(BitcoindError):
    """Raised when the daemon could not be reached or sent no usable body."""

    def __init__(self, request: "httpx.Request | None", message: str, code: int = 0) -> None:
        super().__init__(message)
        self.request = request
        self.message = message
        self.code = code

    def constructor_args(self) -> tuple[Any, ...]:
        return (self.request, self.message, self.code)


class BitcoindRemoteCallError(BitcoindError):
    """Raised when the daemon answered with a JSON-RPC error object."""

    def __init__(self, response: "BitcoindResponse") -> None:
        error = response.error()
        if not isinstance(error, dict):
            error = {}
        code = error.get("code")
        message = error.get("message")
        if not isinstance(code, int):
            code = -32603
        if not isinstance(message, str) or not message:
            message = "Unknown error"
        super().__init__(message)
        self.response = response
        self.code = code
        self.message = message
        self.data = error.get("data")

    def __str__(self) -> str:
        return f"RPC {self.code}: {self.message}"

    def constructor_args(self) -> tuple[Any, ...]:
        return (self.response,)


class BitcoindConfigurationError(BitcoindError):
    """Raised for structurally invalid client configuration."""

    def __init__(self, config: dict[str, Any], message: str) -> None:
        super().__init__(message)
        self.config = dict(config)
        self.message = message

    def constructor_args(self) -> tuple[Any, ...]:
        return (self.config, self.message)
