"""
Utility functions for the TSEC scraper.
"""

from .text import (
    clean_text,
    parse_int_safe,
    first_int,
    all_digit_runs,
    strip_label,
)

from .html import (
    parse_html,
    load_document,
    require_one,
    table_rows,
    body_rows,
    cells,
    node_text,
)

from .file_utils import (
    sanitize_filename,
    build_filename,
    date_stamp,
    ensure_dir,
)

from .timing import (
    timed_operation,
    TimingResult,
)

__all__ = [
    # Text utilities
    "clean_text",
    "parse_int_safe",
    "first_int",
    "all_digit_runs",
    "strip_label",

    # HTML utilities
    "parse_html",
    "load_document",
    "require_one",
    "table_rows",
    "body_rows",
    "cells",
    "node_text",

    # File utilities
    "sanitize_filename",
    "build_filename",
    "date_stamp",
    "ensure_dir",

    # Timing utilities
    "timed_operation",
    "TimingResult",
]
