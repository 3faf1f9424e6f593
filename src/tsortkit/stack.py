from __future__ import annotations

from .errors import EmptyStackError


class Stack:
    """LIFO container of strings."""

    def __init__(self):
        self._items: list[str] = []

    def push(self, value: str) -> None:
        self._items.append(value)

    def peek(self) -> str:
        if not self._items:
            raise EmptyStackError("stack is empty")
        return self._items[-1]

    def pop(self) -> str:
        if not self._items:
            raise EmptyStackError("stack is empty")
        return self._items.pop()

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Stack({self._items!r})"
