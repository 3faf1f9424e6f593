"""Bookkeeping containers for one Kahn pass.

``Queue`` holds the frontier of nodes whose predecessors have all been
placed.  ``Multiset`` tracks, for every other node, how many of its incoming
edges are still unresolved.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from .errors import AbsentMemberError, EmptyQueueError


class Queue:
    """FIFO queue of node identifiers backed by ``collections.deque``."""

    def __init__(self):
        self._items: deque[str] = deque()

    def enqueue(self, node: str) -> None:
        self._items.append(node)

    def dequeue(self) -> str:
        if not self._items:
            raise EmptyQueueError("queue is empty")
        return self._items.popleft()

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)


class Multiset:
    """Counting container; a node is a member while its count is positive."""

    def __init__(self):
        self._counts: dict[str, int] = {}

    def add(self, node: str, count: int = 1) -> None:
        if count <= 0:
            return
        self._counts[node] = self._counts.get(node, 0) + count

    def remove_one(self, node: str) -> None:
        """Decrement the count of *node*, dropping it once it reaches zero."""
        remaining = self._counts.get(node)
        if remaining is None:
            raise AbsentMemberError(f"multiset does not hold {node!r}")
        if remaining == 1:
            del self._counts[node]
        else:
            self._counts[node] = remaining - 1

    def has(self, node: str) -> bool:
        return node in self._counts

    def count(self, node: str) -> int:
        return self._counts.get(node, 0)

    def is_empty(self) -> bool:
        return not self._counts

    def all_unique(self) -> Iterator[str]:
        """Yield each node with a positive count once, in seeding order."""
        # Snapshot: callers may mutate the graph between items.
        yield from list(self._counts)

    def __len__(self) -> int:
        return len(self._counts)
