"""Plan item id factories. Components take one as an argument instead of sharing a counter."""

from __future__ import annotations

import itertools
from typing import Callable
from uuid import uuid4

ItemIdFactory = Callable[[], str]


def random_item_ids(prefix: str = "ci") -> ItemIdFactory:
    def _next() -> str:
        return f"{prefix}_{uuid4().hex[:12]}"

    return _next


def sequential_item_ids(prefix: str = "ci", start: int = 1) -> ItemIdFactory:
    """Deterministic ids (``ci_1``, ``ci_2``, ...) for tests and previews."""
    counter = itertools.count(start)

    def _next() -> str:
        return f"{prefix}_{next(counter)}"

    return _next


__all__ = ["ItemIdFactory", "random_item_ids", "sequential_item_ids"]
