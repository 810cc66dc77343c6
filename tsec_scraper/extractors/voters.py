"""
Ward voter list extractor (finalgprolls.tsec.gov.in gpwardvoterselec1.do).

The printable voter list (#printArea) has, per ward:
- a header table with "Ward No." and the "Total Voters Details" counts
- one bordered table (table.bl.bb.br.bt) per voter:

    row 1: serial no | A.C No.:-116 PS No.: -60 SLNo.: -1
    row 2: Name            | : <b>NAME</b>
    row 3: Father Name     | : <b>RELATION NAME</b>
    row 4: Age : 24  Sex : F        (nested table on Telugu pages)
    row 5: Door No.        | : <b>0000</b>
    row 6: <b>EPIC NO</b>

Both the English and the Telugu rendering of the page are supported.
"""

from __future__ import annotations

import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from ..exceptions import ContainerNotFoundError
from ..models import ExtractionResult, VoterRecord, WardSummary
from ..utils.html import cells, node_text, table_rows
from ..utils.text import all_digit_runs, first_int, parse_int_safe, strip_label
from .base import BaseExtractor

TELUGU_PAGE_MARKERS = ("గ్రామ పంచాయితి", "సాధారణ ఎన్నికలు")
WARD_LABEL_EN = "Ward No."
WARD_LABEL_TE = "వార్డు నె౦బరు"
SUMMARY_MARKERS = ("Total Voters Details", "మొత్తం ఓటర్ల వివరాలు")

SEX_RE = re.compile(r"\b([MF])\b", re.IGNORECASE)
SEX_AFTER_COLON_RE = re.compile(r":\s*([MF])", re.IGNORECASE)

MIN_VOTER_ROWS = 6


def detect_language(doc: BeautifulSoup) -> str:
    """'te' for the Telugu rendering of the page, 'en' otherwise."""
    text = doc.get_text(" ")
    return "te" if any(marker in text for marker in TELUGU_PAGE_MARKERS) else "en"


def _cell(tds: List[Tag], index: int) -> Optional[Tag]:
    return tds[index] if len(tds) > index else None


def _bold_value(cell: Optional[Tag]) -> str:
    """Text of the first <b> in a cell, without the ':' separator."""
    if cell is None:
        return ""
    bold = cell.find("b")
    return strip_label(node_text(bold)) if bold is not None else ""


class VoterListExtractor(BaseExtractor):
    """Extract VoterRecords plus ward number, language and ward totals."""

    name = "VoterListExtractor"

    AREA_SELECTOR = "#printArea"
    VOTER_TABLE_SELECTOR = "#printArea table.bl.bb.br.bt"

    def locate(self, doc: BeautifulSoup) -> List[Tag]:
        tables = doc.select(self.VOTER_TABLE_SELECTOR)
        if not tables:
            raise ContainerNotFoundError("No voter tables found!", selector=self.VOTER_TABLE_SELECTOR)
        return tables

    def ward_number(self, doc: BeautifulSoup) -> Optional[int]:
        """Ward number from the "Ward No." label cell's neighbour (":Ward -1" -> 1)."""
        for td in doc.select(f"{self.AREA_SELECTOR} td"):
            if td.find("td") is not None:
                # layout cell wrapping the real label
                continue
            text = node_text(td)
            if text != WARD_LABEL_EN and WARD_LABEL_TE not in text:
                continue
            value_cell = td.find_next_sibling()
            if value_cell is None:
                continue
            value = strip_label(node_text(value_cell)).replace("Ward -", "").strip()
            return parse_int_safe(value)
        return None

    def ward_summary(self, doc: BeautifulSoup) -> WardSummary:
        """Men / women / other / total counts from the summary row (0 when absent)."""
        summary = WardSummary()
        main_table = doc.select_one(f"{self.AREA_SELECTOR} table")
        if main_table is None:
            return summary

        for row in main_table.find_all("tr"):
            if not self._is_summary_row(row):
                continue
            # Innermost matching row only; outer layout rows contain it too
            if any(self._is_summary_row(inner) for inner in row.find_all("tr")):
                continue
            tds = cells(row)
            if len(tds) < 5:
                continue
            counts = [parse_int_safe(node_text(td)) or 0 for td in tds[1:5]]
            summary.men, summary.women, summary.other, summary.total = counts
            break

        return summary

    @staticmethod
    def _is_summary_row(row: Tag) -> bool:
        text = node_text(row)
        return any(marker in text for marker in SUMMARY_MARKERS)

    def parse_voter_table(self, table: Tag) -> Optional[VoterRecord]:
        """
        Parse one voter box.

        Returns None for boxes with fewer than six rows.
        """
        rows = table_rows(table)
        if len(rows) < MIN_VOTER_ROWS:
            return None

        voter = VoterRecord()

        # Row 1: serial no, then "A.C No. / PS No. / SLNo." numbers
        first = cells(rows[0])
        voter.serial_no = node_text(_cell(first, 0))
        numbers = all_digit_runs(node_text(_cell(first, 1)))
        if len(numbers) >= 3:
            voter.ac_no, voter.ps_no, voter.sl_no = numbers[:3]

        # Row 2: name
        voter.name = _bold_value(_cell(cells(rows[1]), 1))

        # Row 3: relation label and relation name
        relation = cells(rows[2])
        voter.relation_type = node_text(_cell(relation, 0))
        voter.relation_name = _bold_value(_cell(relation, 1))

        # Row 4: age and sex, possibly in a nested table
        age_sex = node_text(rows[3])
        age = first_int(age_sex)
        if age is not None:
            voter.age = str(age)
        sex = SEX_RE.search(age_sex) or SEX_AFTER_COLON_RE.search(age_sex)
        if sex:
            voter.sex = sex.group(1).upper()

        # Row 5: door number
        voter.door_no = _bold_value(_cell(cells(rows[4]), 1))

        # Last row: EPIC number
        epic = rows[-1].find("b")
        if epic is not None:
            voter.epic_no = node_text(epic).upper()

        return voter

    def extract_records(self, doc: BeautifulSoup, **_) -> ExtractionResult:
        tables = self.locate(doc)

        language = detect_language(doc)
        ward_no = self.ward_number(doc)
        result = ExtractionResult(
            summary=self.ward_summary(doc),
            extras={"ward_no": ward_no, "language": language},
        )
        self.log_debug("Voter list page", language=language, ward_no=ward_no, **result.summary.to_dict())

        for index, table in enumerate(tables):
            voter = self.parse_voter_table(table)
            if voter is None:
                self.log_warning(f"Skipping voter table {index}: insufficient rows")
                result.skipped += 1
                continue
            if not voter.has_primary_key:
                result.skipped += 1
                continue
            result.records.append(voter)

        return result
