"""Dotted-path queries over decoded JSON data.

Paths look like ``"tx.0"`` or ``"test1.*.*.amount"``. Segments index dicts by
key and lists by position; a ``*`` segment fans out over every element of the
current container and collects the leaves it reaches.
"""

from __future__ import annotations

import random as _random
from numbers import Number
from typing import Any, Iterator

WILDCARD = "*"

Key = str | int | None


def join_key(current: Key, key: Key) -> str | None:
    if current is None and key is None:
        return None
    if current is None:
        return str(key)
    if key is None:
        return str(current)
    return f"{current}.{key}"


def get(data: Any, path: Key = None) -> Any:
    parts = _split(path)
    if parts is None:
        return data
    if WILDCARD not in parts:
        _, value = next(_walk(data, parts))
        return value

    leaves = [value for found, value in _walk(data, parts) if found]
    if not leaves:
        return None
    if len(leaves) == 1:
        return leaves[0]
    return leaves


def has(data: Any, path: Key = None) -> bool:
    """True when the selected value is present and not null."""
    parts = _split(path)
    if parts is None:
        return data is not None
    outcomes = list(_walk(data, parts))
    return bool(outcomes) and all(found and value is not None for found, value in outcomes)


def exists(data: Any, path: Key = None) -> bool:
    """True when the selected key is present, even if its value is null."""
    parts = _split(path)
    if parts is None:
        return data is not None
    outcomes = list(_walk(data, parts))
    return bool(outcomes) and all(found for found, _ in outcomes)


def count(data: Any, path: Key = None) -> int:
    return len(_container("count", get(data, path)))


def keys(data: Any, path: Key = None) -> list[Any]:
    value = _container("keys", get(data, path))
    if isinstance(value, dict):
        return list(value.keys())
    return list(range(len(value)))


def values(data: Any, path: Key = None) -> list[Any]:
    value = _container("values", get(data, path))
    if isinstance(value, dict):
        return list(value.values())
    return list(value)


def contains(data: Any, needle: Any, path: Key = None) -> bool:
    value = _container("contains", get(data, path))
    if isinstance(value, dict):
        return needle in value.values()
    return needle in value


def first(data: Any, path: Key = None) -> Any:
    value = get(data, path)
    if isinstance(value, (dict, list)):
        items = list(value.values()) if isinstance(value, dict) else value
        return items[0] if items else None
    return value


def last(data: Any, path: Key = None) -> Any:
    value = get(data, path)
    if isinstance(value, (dict, list)):
        items = list(value.values()) if isinstance(value, dict) else value
        return items[-1] if items else None
    return value


def random(data: Any, number: int = 1, path: Key = None, *, rng: _random.Random | None = None) -> Any:
    """Pick up to ``number`` distinct elements of the selected container.

    A single pick is returned as the bare value. Several picks keep the shape
    of the source: a dict of the sampled keys, or a list of the sampled items,
    both in their original order. Scalars are returned unchanged.
    """
    if number < 1:
        raise ValueError("number must be >= 1")
    value = get(data, path)
    if not isinstance(value, (dict, list)):
        return value

    indexes = list(value.keys()) if isinstance(value, dict) else list(range(len(value)))
    if not indexes:
        return None
    picked = set((rng or _random).sample(indexes, min(number, len(indexes))))
    chosen = [index for index in indexes if index in picked]
    if len(chosen) == 1:
        return value[chosen[0]]
    if isinstance(value, dict):
        return {index: value[index] for index in chosen}
    return [value[index] for index in chosen]


def flatten(data: Any, path: Key = None) -> list[Any]:
    value = get(data, path)
    if value is None:
        return []
    return list(_leaves(value))


def sum_values(data: Any, path: Key = None) -> int | float:
    return sum(
        leaf
        for leaf in flatten(data, path)
        if isinstance(leaf, Number) and not isinstance(leaf, bool)
    )


def _split(path: Key) -> list[str] | None:
    if path is None:
        return None
    text = str(path).strip(".")
    if not text:
        return None
    return text.split(".")


def _step(node: Any, part: str) -> tuple[bool, Any]:
    if isinstance(node, dict):
        if part in node:
            return True, node[part]
        return False, None
    if isinstance(node, list) and part.isdigit():
        index = int(part)
        if index < len(node):
            return True, node[index]
    return False, None


def _walk(node: Any, parts: list[str]) -> Iterator[tuple[bool, Any]]:
    for position, part in enumerate(parts):
        if part == WILDCARD:
            rest = parts[position + 1 :]
            children = node.values() if isinstance(node, dict) else node if isinstance(node, list) else ()
            for child in children:
                yield from _walk(child, rest)
            return
        found, node = _step(node, part)
        if not found:
            yield False, None
            return
    yield True, node


def _leaves(value: Any) -> Iterator[Any]:
    if isinstance(value, dict):
        value = value.values()
    elif not isinstance(value, list):
        yield value
        return
    for item in value:
        yield from _leaves(item)


def _container(operation: str, value: Any) -> dict[Any, Any] | list[Any]:
    if not isinstance(value, (dict, list)):
        raise ValueError(f"{operation}() should be called on a list or dict")
    return value
