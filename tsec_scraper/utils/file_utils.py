"""
File and path utility functions for exported files.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import date
from pathlib import Path
from typing import Any, Optional

WHITESPACE_RE = re.compile(r"\s+")


def _keep_char(ch: str) -> bool:
    # Combining marks (category M*) carry Telugu vowel signs
    return ch.isalnum() or unicodedata.category(ch).startswith("M") or ch in ("-", "_", " ")


def sanitize_filename(base: str) -> str:
    """
    Make a filename stem safe across filesystems.

    Keeps letters, digits, combining marks, '-', '_' and spaces, then
    trims and collapses whitespace to underscores.
    """
    kept = "".join(ch for ch in base if _keep_char(ch))
    return WHITESPACE_RE.sub("_", kept.strip())


def build_filename(*parts: Any, fallback: Optional[str] = None) -> str:
    """
    Join non-empty parts with '-' and sanitize the result.

    Example:
        build_filename("eenadu-results", "Nagarkurnool", "2025-12-12")
        -> "eenadu-results-Nagarkurnool-2025-12-12"
    """
    joined = "-".join(str(p) for p in parts if p not in (None, ""))
    return sanitize_filename(joined) or (fallback or "export")


def date_stamp(today: Optional[date] = None, dashed: bool = False) -> str:
    """YYYYMMDD (or YYYY-MM-DD) for the given or current local date."""
    today = today or date.today()
    return today.strftime("%Y-%m-%d" if dashed else "%Y%m%d")


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Returns:
        The same path (for chaining)
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path
