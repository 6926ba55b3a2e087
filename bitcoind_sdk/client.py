from __future__ import annotations

from concurrent.futures import Future, wait as wait_futures
from dataclasses import dataclass
import functools
import logging
import threading
from typing import Any, Callable, Mapping

import httpx

from .config import BitcoindClientConfig
from .exceptions import BitcoindConnectionError, BitcoindError, BitcoindRemoteCallError
from .handler import ExceptionHandler, exception_handler
from .middleware import apply_middleware, wrap_response
from .request import build_request
from .responses import BitcoindResponse, decode_container
from .transport import HttpTransport

logger = logging.getLogger(__name__)

SuccessCallback = Callable[[BitcoindResponse], Any]
FailureCallback = Callable[[BaseException], Any]


@dataclass
class _PendingCall:
    future: "Future[BitcoindResponse | None]"
    on_failure: FailureCallback | None
    unhandled: BaseException | None = None


class BitcoindClient:
    """JSON-RPC client for bitcoind and compatible daemons.

    Any public attribute that is not defined here is treated as an RPC method
    name, so ``client.getblock(block_hash)`` sends ``getblock``. Names ending
    in ``async`` (``client.getblock_async(...)``, ``client.getBlockAsync(...)``)
    dispatch through :meth:`call_async` instead.

    A client owns its request ids, its wallet path and its list of pending
    async calls. These are guarded by a lock, but ``wallet()`` changes the
    path for every later call, so use one client per wallet when several
    threads talk to different wallets.
    """

    def __init__(
        self,
        config: BitcoindClientConfig | Mapping[str, Any] | str | None = None,
        *,
        transport: HttpTransport | None = None,
        http_client: httpx.Client | None = None,
        handler: ExceptionHandler | None = None,
    ) -> None:
        if config is None:
            config = BitcoindClientConfig()
        elif isinstance(config, str):
            config = BitcoindClientConfig.from_url(config)
        elif not isinstance(config, BitcoindClientConfig):
            config = BitcoindClientConfig.from_dict(config)
        self._config = config
        self._owns_transport = transport is None
        self._transport = transport or HttpTransport(config, http_client=http_client)
        self._handler = handler
        self._lock = threading.Lock()
        self._path = "/"
        self._rpc_id = 0
        self._pending: list[_PendingCall] = []
        self._unhandled: list[BaseException] = []
        self._closed = False

    def close(self) -> None:
        try:
            self.wait()
        finally:
            self._closed = True
            if self._owns_transport:
                self._transport.close()

    def __enter__(self) -> "BitcoindClient":
        return self

    def __exit__(self, exc_type: Any, exc: Any, traceback: Any) -> None:
        self.close()

    @property
    def config(self) -> BitcoindClientConfig:
        return self._config

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    @property
    def handler(self) -> ExceptionHandler:
        return self._handler or exception_handler()

    @property
    def path(self) -> str:
        return self._path

    def wallet(self, name: str) -> "BitcoindClient":
        """Send every following request to ``/wallet/<name>``."""
        with self._lock:
            self._path = f"/wallet/{name}"
        return self

    def next_id(self) -> int:
        with self._lock:
            rpc_id = self._rpc_id
            self._rpc_id += 1
        return rpc_id

    def call(self, method: str, *params: Any) -> BitcoindResponse | None:
        """Call ``method`` and wait for the response.

        Returns None only when a registered handler suppressed the failure.
        """
        if self._closed:
            self.handler.handle(_closed_error())
            return None
        path, payload = self._prepare(method, params)
        outcome = self._resolve(functools.partial(self._transport.send, path, payload))
        if isinstance(outcome, BaseException):
            self.handler.handle(outcome)
            return None
        return outcome

    def call_async(
        self,
        method: str,
        params: Any = None,
        on_success: SuccessCallback | None = None,
        on_failure: FailureCallback | None = None,
    ) -> "Future[BitcoindResponse | None]":
        """Send ``method`` without waiting and return a future.

        The future settles after the matching callback ran. A JSON-RPC error
        in a delivered response goes to ``on_failure``, never ``on_success``.
        Failures nobody handled are raised again by the next :meth:`wait`.
        """
        handle: Future[BitcoindResponse | None] = Future()
        handle.set_running_or_notify_cancel()
        entry = _PendingCall(future=handle, on_failure=on_failure)
        if self._closed:
            sent = _failed_future(_closed_error())
        else:
            path, payload = self._prepare(method, params)
            try:
                sent = self._transport.send_async(path, payload)
            except Exception as exc:
                sent = _failed_future(exc)
        with self._lock:
            self._pending.append(entry)
        sent.add_done_callback(functools.partial(self._settle, entry=entry, on_success=on_success))
        return handle

    def wait(self) -> None:
        """Block until every pending async call settled, then clear the ledger.

        Raises the oldest failure nobody handled. Further unhandled failures
        stay queued and are raised by the following calls.
        """
        unhandled: list[BaseException] = []
        while True:
            with self._lock:
                pending, self._pending = self._pending, []
            if not pending:
                break
            logger.debug("waiting for %d pending calls", len(pending))
            wait_futures([entry.future for entry in pending])
            unhandled.extend(entry.unhandled for entry in pending if entry.unhandled is not None)
        with self._lock:
            self._unhandled.extend(unhandled)
            if not self._unhandled:
                return
            first = self._unhandled.pop(0)
        raise first

    def invoke(
        self,
        name: str,
        *params: Any,
        on_success: SuccessCallback | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Any:
        method, is_async = _split_async_suffix(name)
        if is_async:
            return self.call_async(method, list(params), on_success, on_failure)
        if on_success is not None or on_failure is not None:
            raise ValueError(f"callbacks are only accepted by async calls, got {name!r}")
        return self.call(method, *params)

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)
        return functools.partial(self.invoke, name)

    def _prepare(self, method: str, params: Any) -> tuple[str, dict[str, Any]]:
        with self._lock:
            payload = build_request(method, params, self._rpc_id, preserve_case=self._config.preserve_case)
            self._rpc_id += 1
            return self._path, payload

    def _resolve(self, send: Callable[[], httpx.Response]) -> BitcoindResponse | BaseException:
        try:
            return self._classify_response(send())
        except httpx.HTTPStatusError as exc:
            # Rejected requests that still carry a JSON-RPC error go through
            # the same response pipeline as delivered ones.
            try:
                outcome = self._classify_response(exc.response)
            except Exception as inner:
                return inner
            if isinstance(outcome, BitcoindRemoteCallError):
                outcome.__cause__ = exc
                return outcome
            return exc
        except Exception as exc:
            return exc

    def _classify_response(self, raw: httpx.Response) -> BitcoindResponse | BitcoindError:
        if decode_container(raw) is None:
            return BitcoindConnectionError(_request_of(raw), "invalid JSON-RPC response body", raw.status_code)
        response = apply_middleware(
            wrap_response(self._config.response_class, raw),
            self._config.response_middleware,
        )
        if response.has_error():
            return BitcoindRemoteCallError(response)
        return response

    def _settle(self, sent: "Future[httpx.Response]", *, entry: _PendingCall, on_success: SuccessCallback | None) -> None:
        outcome: BaseException | BitcoindResponse | None = self._resolve(sent.result)
        if isinstance(outcome, BaseException):
            outcome = self.handler.classify(outcome)

        try:
            if isinstance(outcome, BaseException):
                if entry.on_failure is None:
                    entry.unhandled = outcome
                else:
                    entry.on_failure(outcome)
                entry.future.set_exception(outcome)
                return
            if outcome is not None and on_success is not None:
                on_success(outcome)
            entry.future.set_result(outcome)
        except Exception as exc:
            entry.unhandled = exc
            entry.future.set_exception(exc)


def _closed_error() -> BitcoindConnectionError:
    return BitcoindConnectionError(None, "client is closed")


def _failed_future(exc: BaseException) -> "Future[httpx.Response]":
    future: Future[httpx.Response] = Future()
    future.set_exception(exc)
    return future


def _split_async_suffix(name: str) -> tuple[str, bool]:
    if name.lower().endswith("async"):
        method = name[:-5].rstrip("_")
        if method:
            return method, True
    return name, False


def _request_of(response: httpx.Response) -> httpx.Request | None:
    try:
        return response.request
    except RuntimeError:
        return None
