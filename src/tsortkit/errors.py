"""Exception taxonomy for tsortkit.

Two families matter to callers:

* ``PreconditionError`` and its subclasses signal a caller bug (asking the
  graph about a node it never saw, popping an empty stack, ...).  The library
  never catches these; they are meant to surface as tracebacks.
* ``InputError`` and ``ConfigError`` describe bad data handed to the tool and
  are reported by the command-line driver as ordinary diagnostics.

A cycle in the input is neither: it is returned as data by the ordering
engine.
"""

from __future__ import annotations


class TsortError(Exception):
    """Base class for every error raised by tsortkit."""


class PreconditionError(TsortError):
    """Raised when an operation is called in a state it does not accept."""


class GraphError(PreconditionError):
    """Raised when a graph operation references invalid nodes or edges."""


class NodeNotFoundError(GraphError):
    """Raised when a graph operation requires a node that was never added."""


class EmptyStackError(PreconditionError):
    """Raised by peek/pop on an empty stack."""


class EmptyQueueError(PreconditionError):
    """Raised by dequeue on an empty queue."""


class AbsentMemberError(PreconditionError):
    """Raised when removing a value that is not held by a container."""


class OrderingError(TsortError):
    """Raised when the ordering engine cannot make progress on a stalled pass."""


class InputError(TsortError):
    """Raised for malformed input data."""


class OddTokenCountError(InputError):
    """Raised when the input holds an unpaired trailing token."""

    def __init__(self, message: str = "odd data count"):
        super().__init__(message)


class ConfigError(TsortError):
    """Raised when a configuration document is invalid."""
