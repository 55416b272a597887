"""
Domain entities for the breeding bounded context.

Family tree types are in-memory projections built for one visualisation
and never persisted. Vaccination and breeding events mirror stored rows.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ConnectionType(Enum):
    """Direction-carrying label of a tree edge."""

    PARENT = "parent"
    OFFSPRING = "offspring"


class VaccinationStatus(Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class AnalyticsPeriod(Enum):
    """Selectable analytics windows. CUSTOM needs explicit bounds."""

    SEVEN_DAYS = ("7 Days", 7)
    THIRTY_DAYS = ("30 Days", 30)
    NINETY_DAYS = ("90 Days", 90)
    CUSTOM = ("Custom", 0)

    def __init__(self, display_name: str, days: int) -> None:
        self.display_name = display_name
        self.days = days


@dataclass(frozen=True)
class LineageLink:
    """A stored parent → offspring edge."""

    parent_id: str
    offspring_id: str


@dataclass(frozen=True)
class PedigreeRecord:
    """Display fields of a fowl needed to draw a tree node."""

    id: str
    name: str = ""
    breed: str = ""
    gender: str = ""
    birth_date: str = ""
    owner_id: str = ""


@dataclass(frozen=True)
class TreeNode:
    """A fowl placed on a generation ring.

    Attributes:
        generation: Link distance from the queried fowl (root is 0).
        position: Index of the node on its ring, 0 <= position < sibling_count.
        sibling_count: Number of nodes sharing the ring.
    """

    id: str
    name: str
    breed: str
    gender: str
    generation: int
    position: int
    sibling_count: int
    birth_date: str = ""


@dataclass(frozen=True)
class TreeConnection:
    from_id: str
    to_id: str
    type: ConnectionType


@dataclass(frozen=True)
class NodePosition:
    x: float
    y: float


@dataclass(frozen=True)
class FamilyTree:
    """Nodes and edges of one fowl's family graph."""

    root_id: str
    nodes: tuple[TreeNode, ...] = ()
    connections: tuple[TreeConnection, ...] = ()

    def node(self, node_id: str) -> Optional[TreeNode]:
        return next((n for n in self.nodes if n.id == node_id), None)

    @property
    def generations(self) -> int:
        return max((n.generation for n in self.nodes), default=0)


@dataclass(frozen=True)
class VaccinationEvent:
    id: str
    fowl_id: str
    vaccine_name: str
    scheduled_date: int
    status: VaccinationStatus = VaccinationStatus.PENDING
    completed_date: Optional[int] = None
    notes: str = ""

    @property
    def is_overdue(self) -> bool:
        """True when still pending after its scheduled instant."""
        return (
            self.status is VaccinationStatus.PENDING
            and self.scheduled_date < int(time.time() * 1000)
        )


@dataclass(frozen=True)
class BreedingSummary:
    """Aggregate of breeding events over one window, as read from storage."""

    total_breedings: int = 0
    total_eggs: int = 0
    total_hatched: int = 0
    average_offspring_count: float = 0.0
    trend: list[float] = field(default_factory=list)

    @property
    def hatch_rate(self) -> float:
        if self.total_eggs <= 0:
            return 0.0
        return self.total_hatched / self.total_eggs * 100


@dataclass(frozen=True)
class BreedingAnalytics:
    """Dashboard figures derived from a BreedingSummary."""

    hatch_rate: float
    mortality_rate: float
    avg_weight_gain: float
    trend_data: list[float]
    period: AnalyticsPeriod
