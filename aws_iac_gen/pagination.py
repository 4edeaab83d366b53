"""Drain cursor-paginated listings into memory."""
from __future__ import annotations

from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def collect_pages(
    pages: Iterable[Iterable[T]], on_progress: Optional[Callable[[int], None]] = None
) -> List[T]:
    """Concatenate ``pages`` in arrival order, reporting the running count."""

    items: List[T] = []
    for page in pages:
        items.extend(page)
        if on_progress is not None:
            on_progress(len(items))
    return items


__all__ = ["collect_pages"]
