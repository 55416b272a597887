"""
Data Transfer Objects for the breeding application layer.
"""

from dataclasses import dataclass
from typing import Optional

from fowlregistry.domain.breeding.entities import FamilyTree, NodePosition


@dataclass(frozen=True)
class FamilyTreeResult:
    """A built tree together with its radial layout.

    Attributes:
        tree: Nodes and typed connections.
        positions: Canvas position per node id, centred on (0, 0).
    """

    tree: FamilyTree
    positions: dict[str, NodePosition]


@dataclass(frozen=True)
class TreeExport:
    content: bytes
    media_type: str
    filename: str


@dataclass(frozen=True)
class AnalyticsQuery:
    """Input DTO for breeding analytics.

    Attributes:
        period: Name of an AnalyticsPeriod member, e.g. "SEVEN_DAYS".
        start: Custom window start (epoch ms), CUSTOM only.
        end: Custom window end (epoch ms), CUSTOM only.
    """

    period: str
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass(frozen=True)
class ScheduleVaccinationCommand:
    fowl_id: str
    vaccine_name: str
    scheduled_date: int
    notes: str = ""
    caller_uid: Optional[str] = None
