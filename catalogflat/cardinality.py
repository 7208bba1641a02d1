"""
Cardinality resolution for decoded catalog trees.

The XML decoder cannot tell a one-to-many relationship with exactly one
child from a one-to-one relationship: a single <section> comes back as a
dict, two of them as a list of dicts. Every projector goes through
as_list() at each nesting boundary so this ambiguity is handled in one
place only.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from catalogflat.errors import ShapeError


def as_list(value: Any) -> List[Any]:
    """
    Normalize a "zero, one, or many" value to a list.

    - None          -> []
    - list / tuple  -> list with the same order
    - anything else -> [value]
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def child(node: Any, *path: str) -> Optional[Any]:
    """
    Follow `path` through nested mappings, returning None as soon as a step
    is missing.

    Raises ShapeError if a step that has to be a mapping is something else
    (a list here means the caller forgot to resolve cardinality first).
    """
    current = node
    walked: List[str] = []
    for key in path:
        if current is None:
            return None
        if not isinstance(current, Mapping):
            where = "/".join(walked) or "<root>"
            raise ShapeError(f"expected a tree at {where!r}, got {type(current).__name__}")
        current = current.get(key)
        walked.append(key)
    return current


def children(node: Any, *path: str) -> List[Any]:
    """
    Shorthand for as_list(child(node, *path)).
    """
    return as_list(child(node, *path))
