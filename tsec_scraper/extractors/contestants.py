"""
ULB ward contestants extractor (tsec.gov.in/knowPRUrban.se).

The contestants grid interleaves ward banners with candidate rows:

    | WARD Name : 12 , Reserved for : BC (Women), ... |   <- single colspan cell
    | 1 | <candidate name> | <party>                    |
    | 2 | <candidate name> | <party>                    |

Each banner sets the ward number and reservation inherited by the rows
that follow it, until the next banner.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup, Tag

from ..models import ContestantRecord, ExtractionResult
from ..utils.html import cells, node_text, require_one, table_rows
from ..utils.text import clean_text, parse_int_safe
from .base import BaseExtractor

WARD_RE = re.compile(r"WARD\s*Name\s*:\s*([0-9]+)", re.IGNORECASE)
RESERVATION_RE = re.compile(r"Reserved\s*for\s*:\s*([^,]+)", re.IGNORECASE)


@dataclass
class WardBanner:
    ward_no: Optional[int] = None
    reservation: str = ""


def parse_ward_banner(text: str) -> WardBanner:
    """Ward number and reservation category from a banner row's text."""
    ward = WARD_RE.search(text)
    reservation = RESERVATION_RE.search(text)
    return WardBanner(
        ward_no=parse_int_safe(ward.group(1)) if ward else None,
        reservation=clean_text(reservation.group(1)) if reservation else "",
    )


class ContestantsExtractor(BaseExtractor):
    """Extract ContestantRecords, carrying ward context down from banner rows."""

    name = "ContestantsExtractor"

    TABLE_SELECTOR = "#GridView1"

    def locate(self, doc: BeautifulSoup) -> Tag:
        return require_one(doc, self.TABLE_SELECTOR, "table #GridView1")

    def extract_records(self, doc: BeautifulSoup, **_) -> ExtractionResult:
        table = self.locate(doc)
        result = ExtractionResult()

        # Cursor for the current traversal only
        current = WardBanner()

        for row in table_rows(table):
            if cells(row, "th"):
                continue

            tds = cells(row)
            if not tds:
                continue

            if len(tds) == 1 and tds[0].has_attr("colspan"):
                banner = parse_ward_banner(node_text(tds[0]))
                if banner.ward_no is not None:
                    current.ward_no = banner.ward_no
                if banner.reservation:
                    current.reservation = banner.reservation
                continue

            if len(tds) < 3:
                continue

            record = ContestantRecord(
                name=node_text(tds[1]),
                ward_no=current.ward_no,
                reservation=current.reservation,
                party_affiliation=node_text(tds[2]),
            )
            if not record.has_primary_key:
                result.skipped += 1
                continue
            result.records.append(record)

        return result

    @staticmethod
    def upload_payload(result: ExtractionResult, village_id: int) -> list[dict]:
        """JSON array body for the contestants ingestion endpoint."""
        return [record.with_village(village_id) for record in result.records]
