"""Response pipeline: wrap the raw httpx response, then apply middleware."""

from __future__ import annotations

from typing import Callable, Iterable

import httpx

from .responses import BitcoindResponse

ResponseMiddleware = Callable[[BitcoindResponse], BitcoindResponse]


def wrap_response(response_class: type[BitcoindResponse], response: httpx.Response) -> BitcoindResponse:
    return response_class(response)


def apply_middleware(response: BitcoindResponse, middleware: Iterable[ResponseMiddleware]) -> BitcoindResponse:
    for step in middleware:
        response = step(response)
        if not isinstance(response, BitcoindResponse):
            raise TypeError(f"response middleware {step!r} must return BitcoindResponse")
    return response
