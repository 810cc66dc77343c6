"""
Delivery sink interface.

A sink takes an assembled payload (a record sequence or a composite
upload body) and moves it somewhere: a file on disk, an HTTP endpoint,
an S3 bucket. Callers only depend on deliver() and the DeliveryResult it
returns; failures are raised as ScraperError subclasses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..models import DeliveryResult


class DeliverySink(ABC):
    """Abstract destination for extracted data."""

    @abstractmethod
    def deliver(self, payload: Any, name: str = "") -> DeliveryResult:
        """
        Deliver a payload.

        Args:
            payload: Record dictionaries or a composite JSON-able object
            name: Short name for logs / filenames

        Returns:
            DeliveryResult describing where the payload went

        Raises:
            ScraperError: If delivery fails
        """
        pass

    @staticmethod
    def count_records(payload: Any) -> int:
        """Number of row records carried by a payload."""
        if isinstance(payload, list):
            return len(payload)
        if isinstance(payload, dict):
            for key in ("voters", "records", "rows"):
                if isinstance(payload.get(key), list):
                    return len(payload[key])
        return 0
