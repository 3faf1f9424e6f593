"""
tsortkit: cycle-tolerant topological sorting of token pairs.

A ``Graph`` is populated from ``a b`` pairs and ``topological_ordering``
lazily yields the broken cycles followed by one complete ordering.
"""

from .errors import (
    AbsentMemberError,
    ConfigError,
    EmptyQueueError,
    EmptyStackError,
    GraphError,
    InputError,
    NodeNotFoundError,
    OddTokenCountError,
    OrderingError,
    PreconditionError,
    TsortError,
)
from .frontier import Multiset, Queue
from .graph import Graph, NodeData
from .ordering import OrderingResult, find_cycle, order_nodes, topological_ordering
from .parsing import parse_into, parse_pairs, tokenize
from .stack import Stack
from .stringset import StringSet

__version__ = "0.1.0"

__all__ = [
    # Containers
    "StringSet",
    "Stack",
    "Queue",
    "Multiset",
    # Graph and ordering
    "Graph",
    "NodeData",
    "OrderingResult",
    "topological_ordering",
    "order_nodes",
    "find_cycle",
    # Input
    "tokenize",
    "parse_pairs",
    "parse_into",
    # Errors
    "TsortError",
    "PreconditionError",
    "GraphError",
    "NodeNotFoundError",
    "EmptyStackError",
    "EmptyQueueError",
    "AbsentMemberError",
    "OrderingError",
    "InputError",
    "OddTokenCountError",
    "ConfigError",
]
