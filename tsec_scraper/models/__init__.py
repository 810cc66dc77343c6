"""
Data models for the TSEC scraper.

These models represent the flat records extracted from pages and the
payloads handed to delivery sinks; all are plain dataclasses that
serialize straight to JSON.
"""

from .locality import LocalityMetadata, WardSummary
from .records import (
    RowRecord,
    PollingStationRecord,
    ResultRecord,
    ContestantRecord,
    VoterRecord,
)
from .document import ExtractionResult, VoterUploadPayload
from .reports import DeliveryResult, CrawlReport, CrawlFailure

__all__ = [
    # Page context
    "LocalityMetadata",
    "WardSummary",

    # Row records
    "RowRecord",
    "PollingStationRecord",
    "ResultRecord",
    "ContestantRecord",
    "VoterRecord",

    # Page-level results
    "ExtractionResult",
    "VoterUploadPayload",

    # Outcomes
    "DeliveryResult",
    "CrawlReport",
    "CrawlFailure",
]
