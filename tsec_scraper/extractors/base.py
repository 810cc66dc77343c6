"""
Base extractor class.

Every page type follows the same pipeline: locate the container, pull
fields out of each row, and assemble flat records with page-level
metadata. Subclasses implement locate() and extract_records(); run()
adds logging and timing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from bs4 import BeautifulSoup, Tag

from ..logger import get_logger
from ..models import ExtractionResult
from ..utils.timing import timed_operation


class BaseExtractor(ABC):
    """
    Abstract base class for all page extractors.

    Extractors are pure: they read an already-parsed document and return
    an ExtractionResult. Rows missing their primary identifier are dropped
    and counted in `skipped`; extraction only fails as a whole when the
    page lacks the expected container (ContainerNotFoundError).
    """

    # Extractor name for logging (override in subclass)
    name: str = "BaseExtractor"

    def __init__(self):
        self.logger = get_logger(self.name)

    def log_debug(self, message: str, **kwargs: Any) -> None:
        extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
        self.logger.debug(f"{message} {extra}".strip())

    def log_info(self, message: str, **kwargs: Any) -> None:
        extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
        self.logger.info(f"{message} {extra}".strip())

    def log_warning(self, message: str, **kwargs: Any) -> None:
        extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
        self.logger.warning(f"{message} {extra}".strip())

    @abstractmethod
    def locate(self, doc: BeautifulSoup) -> Any:
        """
        Find the region(s) holding extractable rows.

        Raises:
            ContainerNotFoundError: If the page lacks the expected structure
        """

    @abstractmethod
    def extract_records(self, doc: BeautifulSoup, **session: Any) -> ExtractionResult:
        """Extract and assemble records from a parsed document."""

    def run(self, doc: BeautifulSoup, **session: Any) -> ExtractionResult:
        """
        Extract with timing and a summary log line.

        Args:
            doc: Parsed page
            **session: Operator-supplied identifiers (circle_id, village_id)

        Returns:
            ExtractionResult (possibly with zero records)
        """
        with timed_operation(f"{self.name} extraction", self.logger):
            result = self.extract_records(doc, **session)

        self.log_info(
            f"{self.name}: extracted {len(result.records)} record(s)",
            skipped=result.skipped,
        )
        return result

    @staticmethod
    def attr(node: Optional[Tag], name: str) -> str:
        """Attribute value of a node ('' when missing)."""
        if node is None:
            return ""
        value = node.get(name, "")
        if isinstance(value, list):
            return " ".join(value)
        return value
