from __future__ import annotations

from typing import Any


def coerce_params(params: Any) -> list[Any]:
    if params is None:
        return []
    if isinstance(params, (list, tuple)):
        return list(params)
    return [params]


def build_request(method: str, params: Any, request_id: int, *, preserve_case: bool = False) -> dict[str, Any]:
    """Build a JSON-RPC request body.

    The id is supplied by the caller so that ordering stays with whoever
    allocates ids.
    """
    if not isinstance(method, str) or not method.strip():
        raise ValueError("method must be non-empty string")
    return {
        "method": method if preserve_case else method.lower(),
        "params": coerce_params(params),
        "id": request_id,
    }
