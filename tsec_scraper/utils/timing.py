"""
Timing for fetch / extract / upload steps.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass
class TimingResult:
    name: str
    duration_sec: float = 0.0
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if self.duration_sec < 1:
            text = f"{self.name} took {self.duration_sec * 1000:.0f}ms"
        else:
            text = f"{self.name} took {self.duration_sec:.2f}s"
        return text if self.success else f"{text}, failed: {self.error}"


@contextmanager
def timed_operation(
    name: str,
    logger: Optional[logging.Logger] = None,
    log_level: int = logging.DEBUG,
) -> Iterator[TimingResult]:
    """
    Time the enclosed block and log the duration when it ends.

    Exceptions propagate unchanged.

    Usage:
        with timed_operation("upload ward 3", logger) as timing:
            sink.deliver(payload)
    """
    timing = TimingResult(name=name)
    start = time.perf_counter()
    try:
        yield timing
    except Exception as e:
        timing.error = str(e)
        raise
    finally:
        timing.duration_sec = time.perf_counter() - start
        if logger is not None:
            logger.log(log_level, str(timing))
