from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, KeysView
from dataclasses import dataclass, field

from .errors import NodeNotFoundError
from .stringset import StringSet


@dataclass
class NodeData:
    """Per-node bookkeeping: incoming edge count and direct successors.

    ``successors`` is a ``StringSet`` when the owning graph deduplicates
    edges and a plain list (one entry per inserted edge) otherwise.
    """

    in_degree: int = 0
    successors: StringSet | list[str] = field(default_factory=StringSet)


class Graph:
    """Mutable directed graph keyed by opaque string node identifiers.

    Nodes are created by any call that mentions them and are never removed.
    With ``dedupe_edges=True`` (the default) inserting the same edge twice is
    a no-op; with ``dedupe_edges=False`` every insertion is kept and counted
    toward the target's in-degree.
    """

    def __init__(self, dedupe_edges: bool = True):
        self.dedupe_edges = dedupe_edges
        self._node_data: dict[str, NodeData] = {}

    def _new_data(self) -> NodeData:
        if self.dedupe_edges:
            return NodeData(successors=StringSet())
        return NodeData(successors=[])

    def _ensure(self, node: str) -> NodeData:
        data = self._node_data.get(node)
        if data is None:
            data = self._new_data()
            self._node_data[node] = data
        return data

    def add_node(self, node: str) -> None:
        self._ensure(node)

    def put_edge(self, source: str, target: str) -> None:
        """Record the edge source -> target, creating both nodes if needed."""
        source_data = self._ensure(source)
        target_data = self._ensure(target)

        successors = source_data.successors
        if isinstance(successors, StringSet):
            if successors.has(target):
                return
            successors.add(target)
        else:
            successors.append(target)
        target_data.in_degree += 1

    def successors(self, node: str) -> Iterable[str]:
        """Return a restartable, read-only iterable over the successors of *node*."""
        data = self._node_data.get(node)
        if data is None:
            raise NodeNotFoundError("node is not in graph")
        if isinstance(data.successors, StringSet):
            return data.successors.all()
        return tuple(data.successors)

    def remove_edge(self, source: str, target: str) -> None:
        """Remove one source -> target edge.

        Both endpoints must be known.  Removing an edge that does not exist
        leaves the graph untouched.
        """
        if source not in self._node_data:
            raise NodeNotFoundError("source node is not in graph")
        if target not in self._node_data:
            raise NodeNotFoundError("target node is not in graph")

        successors = self._node_data[source].successors
        if target not in successors:
            logging.debug(f"remove_edge: no edge {source!r} -> {target!r}, ignoring")
            return
        successors.remove(target)

        self._node_data[target].in_degree -= 1

    def nodes(self) -> KeysView[str]:
        """Return a live view over every known node, in insertion order."""
        return self._node_data.keys()

    def in_degree(self, node: str) -> int:
        data = self._node_data.get(node)
        if data is None:
            return 0
        return data.in_degree

    def has_node(self, node: str) -> bool:
        return node in self._node_data

    def has_edge(self, source: str, target: str) -> bool:
        data = self._node_data.get(source)
        if data is None:
            return False
        return target in data.successors

    def edges(self) -> Iterator[tuple[str, str]]:
        for source, data in self._node_data.items():
            for target in data.successors:
                yield source, target

    def __len__(self) -> int:
        return len(self._node_data)

    def __contains__(self, node: object) -> bool:
        return node in self._node_data

    def __repr__(self) -> str:
        edge_count = sum(1 for _ in self.edges())
        return f"Graph(nodes={len(self)}, edges={edge_count}, dedupe_edges={self.dedupe_edges})"
