"""
Base Contracts and Shared Types

Foundational enums, geometry primitives and error records used by every
layer of the analysis space.

BOUNDARY ENFORCEMENT:
=====================
- All types here are IMMUTABLE (frozen dataclasses / enums)
- No behavior beyond validation and trivial accessors
- No imports from other analysis_space layers
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple
import math


# =============================================================================
# ERROR STATES (Errors are data, recovered where they occur)
# =============================================================================

class ErrorCode(Enum):
    """
    Enumerated error codes.

    Nothing in the interactive path raises for these; each one is recorded
    next to the safe default that replaced the bad value.
    """
    # Data errors (transform layer)
    MISSING_COORDINATES = auto()
    DANGLING_RELATIONSHIP = auto()
    DUPLICATE_CARD = auto()
    DUPLICATE_RELATIONSHIP = auto()
    UNKNOWN_NODE_TYPE = auto()
    STRENGTH_OUT_OF_RANGE = auto()

    # Environment errors (event delivery, host callbacks)
    EVENT_API_RESTRICTED = auto()
    CALLBACK_FAILED = auto()

    # State errors
    NO_NETWORK_DATA = auto()


@dataclass(frozen=True)
class Error:
    """Immutable error record with flat key/value context."""
    code: ErrorCode
    message: str
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            context=self.context + ((key, value),)
        )


# =============================================================================
# DOMAIN ENUMS
# =============================================================================

class NodeType(Enum):
    """Board column a card lives in."""
    INBOX = "INBOX"
    QUESTIONS = "QUESTIONS"
    INSIGHTS = "INSIGHTS"
    THEMES = "THEMES"
    ACTIONS = "ACTIONS"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional['NodeType']:
        """Case-insensitive lookup; None when the value is not a known type."""
        if not raw or not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return None


class EdgeType(Enum):
    """Origin of a relationship."""
    SEMANTIC = "semantic"
    MANUAL = "manual"
    DERIVED = "derived"


# Relationship kinds produced elsewhere in the app that render as derived edges
DERIVED_RELATIONSHIP_KINDS = frozenset({"tag_similarity", "ai", "unified"})


class SidePanelType(Enum):
    """Side panels reachable from the analysis space toolbar."""
    RELATIONS = "relations"
    CLUSTERING = "clustering"
    THEORY = "theory"
    VIEW = "view"
    SEARCH = "search"


class ClusteringAlgorithm(Enum):
    """Selectable clustering modes."""
    HDBSCAN = "hdbscan"        # density-based approximation
    KMEANS = "kmeans"
    COMMUNITY = "community"


# =============================================================================
# GEOMETRY
# =============================================================================

@dataclass(frozen=True)
class Point:
    """2D point, in world or screen space depending on context."""
    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True)
class ContainerDimensions:
    """Size of the canvas container in screen pixels."""
    width: float
    height: float

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError("Container dimensions must be non-negative")


@dataclass(frozen=True)
class ContainerBounds:
    """Client-space rectangle of the canvas container (pointer mapping)."""
    left: float
    top: float
    width: float
    height: float

    @property
    def dimensions(self) -> ContainerDimensions:
        return ContainerDimensions(width=self.width, height=self.height)

    def to_local(self, client_x: float, client_y: float) -> Point:
        """Convert client coordinates to container-relative screen coordinates."""
        return Point(client_x - self.left, client_y - self.top)
