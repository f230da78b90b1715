"""
Error taxonomy for the construction engine.

Expected conditions (a bad segment selection, no free spot for a vertex)
never raise out of the engine. Entry points return an ``EngineResult``
that carries either the updated graph or the untouched input graph plus a
``Rejection`` reason. Exceptions are reserved for the serialization layer
and for genuinely corrupt data.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .graph import Graph


class Rejection(str, Enum):
    """Reasons an engine operation left the graph unchanged."""

    INVALID_SEGMENT = "invalid_segment"
    NO_PLACEMENT_FOUND = "no_placement_found"
    INSUFFICIENT_VERTICES = "insufficient_vertices"
    MALFORMED_IMPORT = "malformed_import"
    ALREADY_COLORED = "already_colored"


# Reasons that are not worth reporting to the user
SILENT_REJECTIONS = frozenset({Rejection.ALREADY_COLORED})


@dataclass(frozen=True)
class EngineResult:
    """Outcome of an engine operation."""

    graph: "Graph"
    reason: Optional[Rejection] = None
    message: str = ""
    vertex_index: Optional[int] = None  # vertex added or colored, if any

    @property
    def ok(self) -> bool:
        return self.reason is None

    @property
    def is_error(self) -> bool:
        return self.reason is not None and self.reason not in SILENT_REJECTIONS

    @classmethod
    def rejected(cls, graph: "Graph", reason: Rejection, message: str) -> "EngineResult":
        return cls(graph=graph, reason=reason, message=message)


class GraphEngineError(Exception):
    """Base class for engine exceptions."""


class MalformedImportError(GraphEngineError):
    """Serialized graph data is missing required fields or references bad indices."""

    reason = Rejection.MALFORMED_IMPORT


class GraphIntegrityError(GraphEngineError):
    """Internal indices are corrupt; this is a bug, not a user error."""
