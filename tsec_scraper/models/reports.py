"""
Delivery and crawl outcome models.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Optional, List, Any


@dataclass
class DeliveryResult:
    """Outcome of handing a payload to a delivery sink."""
    target: str = ""  # file path or endpoint URL
    status_code: Optional[int] = None
    response_text: Optional[str] = None
    attempts: int = 1
    record_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CrawlFailure:
    """One trigger element that could not be fetched, parsed or uploaded."""
    index: int
    label: str
    error: str


@dataclass
class CrawlReport:
    """
    Summary of one crawl run.

    `attempted` counts every trigger element found on the index page,
    whether or not it succeeded.
    """
    attempted: int = 0
    succeeded: int = 0
    skipped: int = 0
    failures: List[CrawlFailure] = field(default_factory=list)
    voters_uploaded: int = 0

    @property
    def failed(self) -> int:
        return len(self.failures)

    def record_failure(self, index: int, label: str, error: Exception) -> None:
        self.failures.append(CrawlFailure(index=index, label=label, error=str(error)))

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["failed"] = self.failed
        return data
