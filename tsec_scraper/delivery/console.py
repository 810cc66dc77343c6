"""
Console sink for dry runs: prints the payload instead of uploading it.
"""

from __future__ import annotations

from typing import Any, Optional

from rich.console import Console

from ..models import DeliveryResult
from .base import DeliverySink
from .file_export import to_json


class ConsoleSink(DeliverySink):
    """Print payloads as JSON on the console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def deliver(self, payload: Any, name: str = "") -> DeliveryResult:
        if name:
            self.console.rule(name)
        self.console.print_json(to_json(payload))
        return DeliveryResult(target="console", record_count=self.count_records(payload))
