"""
File export: JSON, CSV and XLSX.

Exports are written to the configured output directory with filenames
derived from the page's locality and the current date.
"""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

import pandas as pd

from ..exceptions import ConfigurationError
from ..logger import get_logger
from ..models import DeliveryResult
from ..utils.file_utils import ensure_dir
from .base import DeliverySink

logger = get_logger(__name__)

FORMATS = ("json", "csv", "xlsx")
SHEET_NAME = "Results"


def to_json(payload: Any) -> str:
    """Pretty-printed JSON (2-space indent) with a trailing newline."""
    return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"


def _fieldnames(rows: Sequence[dict[str, Any]]) -> List[str]:
    """Column order: keys of the first row, then unseen keys in first-seen order."""
    names: List[str] = []
    for row in rows:
        for key in row:
            if key not in names:
                names.append(key)
    return names


def _csv_line(values: Sequence[Any]) -> str:
    buffer = io.StringIO()
    # A "\r\n" terminator makes the writer quote fields holding a lone CR as well as LF
    csv.writer(buffer, lineterminator="\r\n", quoting=csv.QUOTE_MINIMAL).writerow(values)
    return buffer.getvalue()[:-2] + "\n"


def to_csv(rows: Sequence[dict[str, Any]], fieldnames: Optional[Iterable[str]] = None) -> str:
    """
    CSV text with a header row and '\\n' line endings.

    Fields are quoted only when they contain a comma, a double quote, a CR
    or a LF; embedded quotes are doubled. None becomes an empty field.
    """
    fieldnames = list(fieldnames) if fieldnames else _fieldnames(rows)
    lines = [_csv_line(fieldnames)]
    lines += [_csv_line([row.get(name) for name in fieldnames]) for row in rows]
    return "".join(lines)


def write_xlsx(
    rows: Sequence[dict[str, Any]],
    path: Path,
    headers: Optional[dict[str, str]] = None,
    sheet_name: str = SHEET_NAME,
) -> Path:
    """
    Write rows to a single-sheet workbook.

    The header row comes from the row keys, optionally relabelled through
    `headers` (e.g. {"mandal": "Mandal"}).
    """
    df = pd.DataFrame(list(rows), columns=_fieldnames(rows) or None)
    if headers:
        df = df.rename(columns=headers)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    return path


class FileExportSink(DeliverySink):
    """
    Write record sequences to JSON / CSV / XLSX files.

    Example:
        sink = FileExportSink(Path("exports"), fmt="csv")
        result = sink.deliver(rows, name="eenadu-results-2025-12-12")
        print(result.target)
    """

    def __init__(
        self,
        output_dir: Path,
        fmt: str = "json",
        fieldnames: Optional[List[str]] = None,
        xlsx_headers: Optional[dict[str, str]] = None,
    ):
        if fmt not in FORMATS:
            raise ConfigurationError(f"Unsupported export format: {fmt}", config_key="format")
        self.output_dir = Path(output_dir)
        self.fmt = fmt
        self.fieldnames = fieldnames
        self.xlsx_headers = xlsx_headers

    def path_for(self, name: str) -> Path:
        return self.output_dir / f"{name}.{self.fmt}"

    def deliver(self, payload: Any, name: str = "export") -> DeliveryResult:
        """Write the payload and return the file path as the target."""
        ensure_dir(self.output_dir)
        path = self.path_for(name)

        if self.fmt == "json":
            path.write_text(to_json(payload), encoding="utf-8")
        elif self.fmt == "csv":
            path.write_text(to_csv(payload, self.fieldnames), encoding="utf-8")
        else:
            write_xlsx(payload, path, headers=self.xlsx_headers)

        count = self.count_records(payload)
        logger.info(f"Wrote {count} record(s) to {path}")
        return DeliveryResult(target=str(path), record_count=count)
