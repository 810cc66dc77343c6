"""
Eenadu panchayat results extractor.

The results page lists one table.panelcinn01 per mandal; the mandal name
sits in a colspan=3 header ("మండలం: <name> (<count>)") and every body row
is village / winner / party.
"""

from __future__ import annotations

import copy
import re
from typing import List

from bs4 import BeautifulSoup, Tag

from ..exceptions import ContainerNotFoundError
from ..models import ExtractionResult, ResultRecord
from ..utils.file_utils import build_filename, date_stamp
from ..utils.html import body_rows, cells, node_text
from ..utils.text import clean_text
from .base import BaseExtractor

MANDAL_MARKER = "మండలం:"
PARENTHESISED_RE = re.compile(r"\(.*?\)")


def parse_mandal_name(header_text: str) -> str:
    """Mandal name from a table header, without the marker or "(N)" counts."""
    text = clean_text(header_text)
    idx = text.find(MANDAL_MARKER)
    after = text[idx + len(MANDAL_MARKER):] if idx >= 0 else text
    return clean_text(PARENTHESISED_RE.sub("", after))


class ResultsExtractor(BaseExtractor):
    """Extract ResultRecords from every mandal table on the page."""

    name = "ResultsExtractor"

    TABLE_SELECTOR = "table.panelcinn01"
    MANDAL_HEADER_SELECTOR = "thead th[colspan='3']"
    DISTRICT_SELECTOR = "h2.sec_head.mandal-ttl"
    PARTY_ICON_SELECTOR = ".mandal-party-icon"

    def locate(self, doc: BeautifulSoup) -> List[Tag]:
        tables = doc.select(self.TABLE_SELECTOR)
        if not tables:
            raise ContainerNotFoundError(
                "No mandal tables (table.panelcinn01) found on this page.",
                selector=self.TABLE_SELECTOR,
            )
        return tables

    def district_name(self, doc: BeautifulSoup) -> str:
        """District from the page heading, e.g. "నాగర్‌కర్నూల్ - 151 పంచాయతీలు"."""
        heading = doc.select_one(self.DISTRICT_SELECTOR)
        if heading is None:
            return ""
        return clean_text(node_text(heading).split("-")[0])

    def party_text(self, cell: Tag) -> str:
        """Party cell text with the party-symbol icon markup removed."""
        cell = copy.copy(cell)
        for icon in cell.select(self.PARTY_ICON_SELECTOR):
            icon.decompose()
        return node_text(cell)

    def extract_records(self, doc: BeautifulSoup, **_) -> ExtractionResult:
        tables = self.locate(doc)
        district = self.district_name(doc)
        result = ExtractionResult(extras={"district_name": district})
        result.locality.district_name = district

        for table in tables:
            header = table.select_one(self.MANDAL_HEADER_SELECTOR)
            if header is None:
                self.log_debug("Skipping table without mandal header")
                continue

            mandal = parse_mandal_name(header.get_text(" "))
            if not mandal:
                continue

            for row in body_rows(table):
                tds = cells(row)
                if len(tds) < 3:
                    continue

                record = ResultRecord(
                    mandal=mandal,
                    village=node_text(tds[0]),
                    winner=node_text(tds[1]),
                    party=self.party_text(tds[2]),
                )
                if not record.has_primary_key:
                    result.skipped += 1
                    continue
                result.records.append(record)

        return result

    @staticmethod
    def filename_base(district: str, today=None) -> str:
        """eenadu-results[-<district>]-YYYY-MM-DD"""
        stamp = date_stamp(today, dashed=True)
        return build_filename(
            "eenadu-results",
            district or None,
            stamp,
            fallback=f"eenadu-results-{stamp}",
        )
