from __future__ import annotations

from collections.abc import Iterator, KeysView

from .errors import AbsentMemberError


class StringSet:
    """Unordered, duplicate-free container of string identifiers.

    Members are kept as keys of a dict so iteration follows insertion order,
    which keeps graph traversals reproducible between runs.
    """

    def __init__(self, values: list[str] | None = None):
        self._members: dict[str, None] = {}
        for value in values or []:
            self.add(value)

    def add(self, value: str) -> None:
        self._members[value] = None

    def has(self, value: str) -> bool:
        return value in self._members

    def remove(self, value: str) -> None:
        """Delete *value*; raise AbsentMemberError if it is not a member."""
        if value not in self._members:
            raise AbsentMemberError("set is empty")
        del self._members[value]

    def all(self) -> KeysView[str]:
        """Return a live, read-only view over the members."""
        return self._members.keys()

    def __contains__(self, value: object) -> bool:
        return value in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __repr__(self) -> str:
        return f"StringSet({list(self._members)!r})"
