from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import logging
import ssl
from typing import Any

import httpx

from .config import BitcoindClientConfig

logger = logging.getLogger(__name__)


class HttpTransport:
    """POSTs JSON-RPC bodies to the daemon.

    ``send`` blocks for the round trip; ``send_async`` runs the same request
    on a worker thread and returns a ``concurrent.futures.Future``. Non-2xx
    answers raise ``httpx.HTTPStatusError`` carrying the response, so the
    caller can still inspect the body.
    """

    def __init__(
        self,
        config: BitcoindClientConfig,
        *,
        http_client: httpx.Client | None = None,
        max_workers: int = 4,
    ) -> None:
        self._config = config
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.Client(
            base_url=config.dsn(),
            auth=config.auth(),
            verify=_verify(config),
            timeout=config.timeout_seconds,
            headers={"Content-Type": "application/json"},
        )
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="bitcoind-rpc")

    @property
    def http_client(self) -> httpx.Client:
        return self._http

    def send(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        logger.debug("POST %s method=%s id=%s", path, payload.get("method"), payload.get("id"))
        response = self._http.post(path, json=payload)
        logger.debug("POST %s -> %d (%d bytes)", path, response.status_code, len(response.content))
        response.raise_for_status()
        return response

    def send_async(self, path: str, payload: dict[str, Any]) -> "Future[httpx.Response]":
        return self._executor.submit(self.send, path, payload)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        if self._owns_http_client:
            self._http.close()


def _verify(config: BitcoindClientConfig) -> ssl.SSLContext | bool:
    ca_file = config.ca_file()
    if ca_file is None:
        return True
    return ssl.create_default_context(cafile=ca_file)
