"""
Page-level models: what one extraction pass produces and what gets uploaded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, List, Any

from .locality import LocalityMetadata, WardSummary
from .records import RowRecord, VoterRecord


@dataclass
class ExtractionResult:
    """
    Outcome of running one extractor over one document.

    Attributes:
        records: Row records in document order
        skipped: Rows dropped because they had no primary identifier
        locality: Page-level locality metadata
        summary: Ward totals (voter lists only)
        extras: Other page-level values (ward number, language, district name)
    """

    records: List[RowRecord] = field(default_factory=list)
    skipped: int = 0
    locality: LocalityMetadata = field(default_factory=LocalityMetadata)
    summary: Optional[WardSummary] = None
    extras: dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def to_rows(self) -> List[dict[str, Any]]:
        """Records as plain dictionaries (export order)."""
        return [r.to_dict() for r in self.records]


@dataclass
class VoterUploadPayload:
    """
    Body POSTed to the voters ingestion endpoint for one ward.

    Combines the village/ward metadata with the ward's voter list.
    """

    village_id: int
    ward_no: Optional[int] = None
    language: str = "en"
    summary: WardSummary = field(default_factory=WardSummary)
    voters: List[VoterRecord] = field(default_factory=list)

    @classmethod
    def from_extraction(cls, result: ExtractionResult, village_id: int) -> "VoterUploadPayload":
        """Assemble the payload from a voter-list extraction."""
        return cls(
            village_id=village_id,
            ward_no=result.extras.get("ward_no"),
            language=result.extras.get("language", "en"),
            summary=result.summary or WardSummary(),
            voters=list(result.records),
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire format expected by the ingestion API."""
        return {
            "village_id": self.village_id,
            "ward_no": self.ward_no,
            "language": self.language,
            "total_men": self.summary.men,
            "total_women": self.summary.women,
            "total_other": self.summary.other,
            "total_votes": self.summary.total,
            "voters": [v.to_dict() for v in self.voters],
        }
