"""Error reclassification chain.

Every failure raised by a client passes through an :class:`ExceptionHandler`
before it reaches the caller. Handlers run in registration order and may
replace the error, suppress it with :data:`SUPPRESS`, or return ``None`` to
leave it unchanged.
"""

from __future__ import annotations

import threading
from typing import Callable, Union

import httpx

from .exceptions import BitcoindConnectionError, BitcoindError, BitcoindRemoteCallError
from .responses import BitcoindResponse, decode_container


class _Suppress:
    def __repr__(self) -> str:
        return "SUPPRESS"


SUPPRESS = _Suppress()

HandlerResult = Union[BaseException, _Suppress, None]
HandlerFn = Callable[[BaseException], HandlerResult]


def classify_transport_error(exc: BaseException) -> HandlerResult:
    if isinstance(exc, httpx.HTTPStatusError):
        container = decode_container(exc.response)
        if container is not None and container.get("error") is not None:
            return BitcoindRemoteCallError(BitcoindResponse(exc.response))
        return BitcoindConnectionError(exc.request, str(exc), exc.response.status_code)
    if isinstance(exc, httpx.RequestError):
        try:
            request = exc.request
        except RuntimeError:
            request = None
        return BitcoindConnectionError(request, str(exc))
    return None


class ExceptionHandler:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: list[HandlerFn] = []
        self._overrides: dict[type[BitcoindError], type[BitcoindError]] = {}
        self.register_handler(classify_transport_error)
        self.register_handler(self.override_handler)

    def register_handler(self, handler: HandlerFn) -> "ExceptionHandler":
        with self._lock:
            self._handlers.append(handler)
        return self

    def set_override(self, kind: type[BitcoindError], override: type[BitcoindError]) -> "ExceptionHandler":
        """Raise ``override`` instead of ``kind`` from now on.

        ``override`` is built from the original error's constructor arguments,
        so it should accept the same signature (subclassing ``kind`` does).
        """
        with self._lock:
            self._overrides[kind] = override
        return self

    def clear_overrides(self) -> "ExceptionHandler":
        with self._lock:
            self._overrides.clear()
        return self

    def override_handler(self, exc: BaseException) -> HandlerResult:
        if not isinstance(exc, BitcoindError):
            return None
        override = self._overrides.get(type(exc))
        if override is None:
            return None
        return exc.rebind(override)

    def classify(self, exc: BaseException) -> BaseException | None:
        """Run the chain and return the final error, or None if suppressed."""
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            result = handler(exc)
            if result is SUPPRESS:
                return None
            if isinstance(result, BaseException):
                exc = result
        return exc

    def handle(self, exc: BaseException) -> None:
        classified = self.classify(exc)
        if classified is None:
            return
        if classified is exc:
            raise exc
        raise classified from exc


_shared_handler: ExceptionHandler | None = None
_shared_lock = threading.Lock()


def exception_handler() -> ExceptionHandler:
    """Return the process-wide handler used by clients built without one."""
    global _shared_handler
    with _shared_lock:
        if _shared_handler is None:
            _shared_handler = ExceptionHandler()
        return _shared_handler


def reset_exception_handler() -> None:
    global _shared_handler
    with _shared_lock:
        _shared_handler = None
