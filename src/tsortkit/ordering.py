"""Cycle-tolerant topological ordering.

``topological_ordering`` runs Kahn's algorithm over a ``Graph``.  When a
pass stalls with unresolved nodes left, a depth-first search finds one
concrete cycle among them, the cycle's closing edge is removed from the
graph and a fresh pass starts.  Every removal deletes one edge, so a graph
with E edges is ordered after at most E restarts.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .errors import OrderingError
from .frontier import Multiset, Queue
from .graph import Graph
from .stack import Stack
from .stringset import StringSet


@dataclass(frozen=True)
class OrderingResult:
    """One item of the ordering sequence.

    Either ``nodes`` holds a complete cycle-free ordering and ``cycle`` is
    ``None``, or ``nodes`` is empty and ``cycle`` holds the cycle that was
    broken.
    """

    nodes: tuple[str, ...] = ()
    cycle: tuple[str, ...] | None = None

    @property
    def has_cycle(self) -> bool:
        return self.cycle is not None


def roots_of(graph: Graph) -> Queue:
    """Queue every node with no incoming edges, in node order."""
    roots = Queue()
    for node in graph.nodes():
        if graph.in_degree(node) == 0:
            roots.enqueue(node)
    return roots


def non_roots_of(graph: Graph) -> Multiset:
    """Count the unresolved incoming edges of every non-root node."""
    non_roots = Multiset()
    for node in graph.nodes():
        degree = graph.in_degree(node)
        if degree > 0:
            non_roots.add(node, degree)
    return non_roots


def _kahn_pass(graph: Graph) -> tuple[list[str], Multiset]:
    roots = roots_of(graph)
    non_roots = non_roots_of(graph)
    order: list[str] = []
    while not roots.is_empty():
        node = roots.dequeue()
        order.append(node)
        for succ in graph.successors(node):
            non_roots.remove_one(succ)
            if not non_roots.has(succ):
                roots.enqueue(succ)
    return order, non_roots


def find_cycle(graph: Graph, start: str, explored: StringSet | None = None) -> list[str]:
    """Return one simple cycle reachable from *start*, or an empty list.

    The returned list is in edge order: each entry has an edge to the next
    and the last entry has an edge back to the first.

    Depth-first search keeps the current path on a ``Stack`` and its members
    in a ``StringSet``; only an edge back into the current path closes a
    cycle.  Each path entry owns an iterator over its successors, so the
    search needs no interpreter recursion.  Nodes whose successors were
    exhausted without closing a cycle are added to *explored* and not entered
    again; pass the same set to successive searches over an unchanged graph
    so that together they stay linear.
    """
    path = Stack()
    on_path = StringSet()
    if explored is None:
        explored = StringSet()
    if explored.has(start):
        return []
    frames: list[Iterator[str]] = []

    def enter(node: str) -> None:
        path.push(node)
        on_path.add(node)
        frames.append(iter(graph.successors(node)))

    enter(start)
    while frames:
        for succ in frames[-1]:
            if on_path.has(succ):
                cycle = [path.pop()]
                while cycle[-1] != succ:
                    cycle.append(path.pop())
                cycle.reverse()
                return cycle
            if explored.has(succ):
                continue
            enter(succ)
            break
        else:
            frames.pop()
            node = path.pop()
            on_path.remove(node)
            explored.add(node)
    return []


def _break_cycle(graph: Graph, candidates: Iterable[str]) -> list[str]:
    explored = StringSet()
    for candidate in candidates:
        cycle = find_cycle(graph, candidate, explored)
        if not cycle:
            continue
        graph.remove_edge(cycle[-1], cycle[0])
        return cycle
    raise OrderingError("ordering stalled but no cycle was found among unresolved nodes")


def topological_ordering(graph: Graph) -> Iterator[OrderingResult]:
    """Lazily order *graph*, breaking cycles as needed.

    Yields one ``OrderingResult`` per broken cycle followed by a single
    result carrying the full ordering.  The graph loses one edge per broken
    cycle; that edge is already gone when the cycle is yielded.  Nothing is
    computed or mutated past the point where the consumer stops iterating.
    An empty graph yields nothing.
    """
    passes = 0
    while True:
        passes += 1
        logging.debug(f"Kahn pass {passes} over {len(graph)} nodes")
        order, non_roots = _kahn_pass(graph)
        if non_roots.is_empty():
            logging.debug(f"Ordering complete after {passes} pass(es)")
            if order:
                yield OrderingResult(nodes=tuple(order))
            return

        logging.debug(f"Pass {passes} stalled with {len(non_roots)} unresolved nodes")
        cycle = _break_cycle(graph, non_roots.all_unique())
        logging.info(f"Broke cycle by removing edge {cycle[-1]!r} -> {cycle[0]!r}")
        yield OrderingResult(cycle=tuple(cycle))


def order_nodes(graph: Graph) -> tuple[list[str], list[list[str]]]:
    """Drain ``topological_ordering`` into (ordered nodes, broken cycles)."""
    nodes: list[str] = []
    cycles: list[list[str]] = []
    for result in topological_ordering(graph):
        nodes.extend(result.nodes)
        if result.cycle is not None:
            cycles.append(list(result.cycle))
    return nodes, cycles
