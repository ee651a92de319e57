"""
Fallback chains: "try this source, else the next".

A resolver is a zero-argument callable returning a value or ``None``.
``first_resolved`` evaluates resolvers lazily in order and returns the first
non-``None`` result together with the resolver's name, so callers can log or
display where a figure came from.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

T = TypeVar("T")

Resolver = tuple[str, Callable[[], T | None]]


def first_resolved(resolvers: Sequence[Resolver[T]]) -> tuple[T | None, str | None]:
    """Return ``(value, source_name)`` from the first resolver yielding a value.

    Returns ``(None, None)`` when every resolver yields ``None``.
    """
    for name, resolve in resolvers:
        value = resolve()
        if value is not None:
            return value, name
    return None, None
