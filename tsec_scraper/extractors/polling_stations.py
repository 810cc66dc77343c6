"""
Praja circle ULB polling-station mapper.

Reads the ULB polling-station grid (#GridView1) on tsec.gov.in and maps
every row to district + municipality + ward + polling station ids, tagged
with an operator-supplied praja circle id.

Row ids come from the popup buttons' onclick query strings when present
(psurban.do?...&ward_id=3&ps_id=12), falling back to the visible cells.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from bs4 import BeautifulSoup, Tag

from ..models import ExtractionResult, LocalityMetadata, PollingStationRecord
from ..utils.file_utils import build_filename, date_stamp
from ..utils.html import (
    cells,
    handler_args,
    handler_param,
    label_value_text,
    node_text,
    require_one,
    selected_option_text,
    table_rows,
)
from ..utils.text import first_int, parse_int_safe
from .base import BaseExtractor

DISTRICT_LABEL_RE = re.compile(r"\bdistrict\b", re.IGNORECASE)
MUNICIPALITY_LABEL_RE = re.compile(r"\b(m\s*&\s*c|municipality|mnc|ulb)\b", re.IGNORECASE)


class PollingStationExtractor(BaseExtractor):
    """Extract PollingStationRecords from the ULB polling-station grid."""

    name = "PollingStationExtractor"

    TABLE_SELECTOR = "#GridView1"
    POPUP_SELECTOR = 'input[onclick*="popupDataUlb("]'

    def locate(self, doc: BeautifulSoup) -> Tag:
        return require_one(doc, self.TABLE_SELECTOR, "table #GridView1")

    def popup_query_string(self, doc: BeautifulSoup) -> Optional[str]:
        """Query string passed to the first popupDataUlb('...') button."""
        button = doc.select_one(self.POPUP_SELECTOR)
        if button is None:
            return None
        args = handler_args(button.get("onclick", ""), "popupDataUlb")
        return args[0] if args else None

    def extract_locality(self, doc: BeautifulSoup) -> LocalityMetadata:
        """District / municipality ids and names for the whole page."""
        locality = LocalityMetadata()

        query = self.popup_query_string(doc)
        if query:
            params = parse_qs(urlsplit(query).query)
            locality.district_id = parse_int_safe(params.get("district_id", [None])[0])
            locality.municipality_id = parse_int_safe(params.get("mnc_id", [None])[0])

        locality.district_name = (
            selected_option_text(doc, ["district"])
            or label_value_text(doc, DISTRICT_LABEL_RE)
        )
        locality.municipality_name = (
            selected_option_text(doc, ["mnc", "municipality", "ulb"])
            or label_value_text(doc, MUNICIPALITY_LABEL_RE)
        )
        return locality

    def extract_records(self, doc: BeautifulSoup, circle_id: Optional[int] = None, **_) -> ExtractionResult:
        table = self.locate(doc)
        locality = self.extract_locality(doc)
        locality.circle_id = circle_id
        self.log_debug("Page locality", **locality.to_dict())

        result = ExtractionResult(locality=locality)

        for row in table_rows(table):
            tds = cells(row)
            if len(tds) < 3:
                continue

            ward_id = parse_int_safe(handler_param(row, "ward_id"))
            if ward_id is None:
                ward_id = first_int(node_text(tds[1]))

            ps_id = parse_int_safe(handler_param(row, "ps_id"))
            if ps_id is None:
                ps_id = parse_int_safe(node_text(tds[2]))
            if ps_id is None:
                result.skipped += 1
                self.log_debug("Dropping row without ps_id", row=node_text(row)[:80])
                continue

            result.records.append(PollingStationRecord(
                district_id=locality.district_id,
                district_name=locality.district_name,
                municipality_id=locality.municipality_id,
                municipality_name=locality.municipality_name,
                circle_id=circle_id,
                ward_id=ward_id,
                ps_id=ps_id,
            ))

        return result

    @staticmethod
    def filename_base(locality: LocalityMetadata, today=None) -> str:
        """praja-circle-ulb-ps[-district-N][-mnc-N]-praja-N-YYYYMMDD"""
        return build_filename(
            "praja-circle-ulb-ps",
            f"district-{locality.district_id}" if locality.district_id is not None else None,
            f"mnc-{locality.municipality_id}" if locality.municipality_id is not None else None,
            f"praja-{locality.circle_id}",
            date_stamp(today),
        )
