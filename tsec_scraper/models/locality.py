"""
Page-scoped context models.

Locality metadata is read once per page and attached to every row
extracted from that page; the ward summary sits alongside a voter list.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional, Any


@dataclass
class LocalityMetadata:
    """District / municipality context of a page."""
    district_id: Optional[int] = None
    district_name: str = ""
    municipality_id: Optional[int] = None
    municipality_name: str = ""
    circle_id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class WardSummary:
    """Voter counts for one ward. Unparseable counts are 0."""
    men: int = 0
    women: int = 0
    other: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
