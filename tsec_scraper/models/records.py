"""
Row record models.

One dataclass per page type. Every record has a primary identifier
(see PRIMARY_KEY); records without one are never emitted by an extractor.
Field order is the export column order.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, fields
from typing import Optional, Any, ClassVar, List


class RowRecord:
    """Mixin with the serialization helpers shared by all row records."""

    PRIMARY_KEY: ClassVar[str] = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON/CSV serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        """Create a record from a dictionary, ignoring unknown keys."""
        return cls(**{
            k: v for k, v in data.items()
            if k in cls.__dataclass_fields__
        })

    @classmethod
    def field_names(cls) -> List[str]:
        """Column names in export order."""
        return [f.name for f in fields(cls)]

    @property
    def primary_value(self) -> Any:
        return getattr(self, self.PRIMARY_KEY)

    @property
    def has_primary_key(self) -> bool:
        value = self.primary_value
        return value is not None and value != ""


@dataclass
class PollingStationRecord(RowRecord):
    """Urban local body ward -> polling station mapping row."""

    PRIMARY_KEY: ClassVar[str] = "ps_id"

    district_id: Optional[int] = None
    district_name: str = ""
    municipality_id: Optional[int] = None
    municipality_name: str = ""
    circle_id: Optional[int] = None
    ward_id: Optional[int] = None
    ps_id: Optional[int] = None


@dataclass
class ResultRecord(RowRecord):
    """Gram panchayat result row: who won which village, for which party."""

    PRIMARY_KEY: ClassVar[str] = "village"

    mandal: str = ""
    village: str = ""
    winner: str = ""
    party: str = ""

    # Spreadsheet header labels (XLSX only)
    XLSX_HEADERS: ClassVar[dict[str, str]] = {
        "mandal": "Mandal",
        "village": "Village",
        "winner": "Winner",
        "party": "Party",
    }

    @property
    def has_primary_key(self) -> bool:
        # Result pages leave the village blank on continuation rows
        return bool(self.village or self.winner or self.party)


@dataclass
class ContestantRecord(RowRecord):
    """Candidate contesting a ULB ward."""

    PRIMARY_KEY: ClassVar[str] = "name"

    name: str = ""
    ward_no: Optional[int] = None
    reservation: str = ""
    party_affiliation: str = ""

    def with_village(self, village_id: int) -> dict[str, Any]:
        """Upload row: the record plus the operator-supplied village id."""
        data = self.to_dict()
        data["village_id"] = village_id
        return data


@dataclass
class VoterRecord(RowRecord):
    """One elector from a ward voter list."""

    PRIMARY_KEY: ClassVar[str] = "name"

    serial_no: str = ""
    ac_no: str = ""
    ps_no: str = ""
    sl_no: str = ""
    name: str = ""
    relation_type: str = ""  # Father / Husband / Mother / Other (page wording)
    relation_name: str = ""
    age: str = ""
    sex: str = ""  # M / F
    door_no: str = ""
    epic_no: str = ""

    def __post_init__(self):
        """Normalize fields after initialization."""
        self.sex = self.sex.strip().upper()
        self.epic_no = self.epic_no.strip().upper()
