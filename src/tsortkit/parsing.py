from __future__ import annotations

from collections.abc import Iterator

from .errors import OddTokenCountError
from .graph import Graph


def tokenize(text: str) -> list[str]:
    """Split *text* on any run of whitespace."""
    return text.split()


def parse_pairs(text: str) -> Iterator[tuple[str, str]]:
    """Yield consecutive token pairs of *text*.

    Raises OddTokenCountError after the last complete pair when a dangling
    token is left over.
    """
    tokens = tokenize(text)
    for i in range(0, len(tokens) - 1, 2):
        yield tokens[i], tokens[i + 1]
    if len(tokens) % 2:
        raise OddTokenCountError()


def parse_into(text: str, graph: Graph) -> Graph:
    """Populate *graph* from whitespace-separated token pairs.

    A pair of identical tokens registers the node without ordering it; a pair
    of distinct tokens ``a b`` adds the edge a -> b.  Every complete pair is
    applied before an odd token count is reported.
    """
    for a, b in parse_pairs(text):
        if a == b:
            graph.add_node(a)
        else:
            graph.put_edge(a, b)
    return graph
