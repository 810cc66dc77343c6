"""
Multi-ward voter crawl.

The ward index page (finalgprolls.tsec.gov.in) renders one button per
ward whose onclick calls

    popupData('English','189','31','13','15','1')
              type     election district mandal gpcode ward

For each button, in page order, the crawler POSTs those parameters to the
detail page next to the index page, extracts the voter list from the
returned HTML and uploads it. One ward at a time with a fixed pause in
between; a failing ward is logged and the crawl moves on.

The village id the uploads are tagged with lives in an explicit
CrawlSession. SessionStore keeps it on disk so that re-running an
interrupted crawl reuses the same village; it is cleared once a crawl
completes.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Callable, List, Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup, Tag
from rich.progress import Progress

from .delivery.base import DeliverySink
from .exceptions import FetchError, ScraperError, UnknownReportTypeError
from .extractors.voters import VoterListExtractor
from .logger import get_logger
from .models import CrawlReport, VoterUploadPayload
from .prompts import resolve_identifier
from .utils.html import handler_args, parse_html
from .utils.text import parse_int_safe
from .utils.timing import timed_operation

logger = get_logger(__name__)

POPUP_FUNCTION = "popupData"
TRIGGER_SELECTOR = f'[onclick*="{POPUP_FUNCTION}("]'
DEFAULT_DETAIL_PAGE = "gpwardvoterselec1.do"

# Report type shown on the button -> request mode of the detail page
REPORT_MODES = {
    "English": "createViewInEnglishReport",
    "Telugu": "createViewInTeluguReport",
    "Urdu": "createViewInUrduReport",
    "Hindi": "createViewInHindiReport",
    "Both": "createViewInBothReport",
}

POPUP_FIELDS = ("election_id", "district_id", "mandal_id", "gpcode", "ward_id")


@dataclass
class PopupRequest:
    """Parameters of one ward's detail-page request."""
    report_type: str
    mode: str
    election_id: int
    district_id: int
    mandal_id: int
    gpcode: int
    ward_id: int

    # Values exactly as written in the handler ("01" stays "01")
    raw: Optional[dict[str, str]] = None

    def form_data(self) -> dict[str, str]:
        """Form-encoded body for the detail page."""
        data = {"mode": self.mode}
        raw = self.raw or {}
        for name in POPUP_FIELDS:
            data[name] = raw.get(name, str(getattr(self, name)))
        return data

    @property
    def label(self) -> str:
        return f"ward {self.ward_id} (gp {self.gpcode})"


def parse_popup_call(onclick: str) -> PopupRequest:
    """
    Parse a popupData('<type>','<election>','<district>','<mandal>','<gpcode>','<ward>') handler.

    Raises:
        UnknownReportTypeError: If the report type has no known mode
        ScraperError: If the handler is not a well-formed popupData call
    """
    args = handler_args(onclick, POPUP_FUNCTION)
    if args is None or len(args) < 1 + len(POPUP_FIELDS):
        raise ScraperError("Malformed popupData handler", details={"onclick": (onclick or "")[:200]})

    report_type = args[0]
    mode = REPORT_MODES.get(report_type)
    if mode is None:
        raise UnknownReportTypeError(report_type)

    raw = dict(zip(POPUP_FIELDS, args[1:]))
    ids = {name: parse_int_safe(value) for name, value in raw.items()}
    missing = [name for name, value in ids.items() if value is None]
    if missing:
        raise ScraperError("Non-numeric popupData parameters", details={"fields": missing})

    return PopupRequest(report_type=report_type, mode=mode, raw=raw, **ids)


def find_triggers(doc: BeautifulSoup) -> List[Tag]:
    """Ward buttons on the index page, in document order."""
    return doc.select(TRIGGER_SELECTOR)


def detail_url(index_url: str, detail_page: str = DEFAULT_DETAIL_PAGE) -> str:
    """The detail page resolved against the index page's own path."""
    return urljoin(index_url, detail_page)


@dataclass
class CrawlSession:
    """Identifiers that stay fixed for one crawl."""
    village_id: int


class SessionStore:
    """
    JSON file holding the active CrawlSession.

    Example:
        store = SessionStore(Path(".crawl_session.json"))
        session = store.load() or CrawlSession(village_id=42)
        store.save(session)
        ...
        store.clear()
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[CrawlSession]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable crawl session {self.path}: {e}")
            return None
        village_id = parse_int_safe(data.get("village_id")) if isinstance(data, dict) else None
        if village_id is None or village_id <= 0:
            return None
        return CrawlSession(village_id=village_id)

    def save(self, session: CrawlSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(asdict(session)), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class WardCrawler:
    """
    Sequential fetch -> extract -> upload loop over ward buttons.

    Args:
        sink: Where each ward's payload goes (HTTP upload in production)
        http: requests session used for detail-page POSTs
        extractor: Voter list extractor (default VoterListExtractor)
        delay_sec: Pause between wards
        detail_page: Detail page name relative to the index page
        timeout: Optional timeout for detail-page requests
        sleep: Sleep function (injectable for tests)
        progress: Optional rich progress display
    """

    def __init__(
        self,
        sink: DeliverySink,
        http: Optional[requests.Session] = None,
        extractor: Optional[VoterListExtractor] = None,
        delay_sec: float = 1.0,
        detail_page: str = DEFAULT_DETAIL_PAGE,
        timeout: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        progress: Optional[Progress] = None,
    ):
        self.sink = sink
        self.http = http or requests.Session()
        self.extractor = extractor or VoterListExtractor()
        self.delay_sec = delay_sec
        self.detail_page = detail_page
        self.timeout = timeout
        self._sleep = sleep
        self.progress = progress

    def fetch_detail(self, url: str, request: PopupRequest) -> BeautifulSoup:
        """POST the ward parameters and parse the returned page."""
        try:
            response = self.http.post(url, data=request.form_data(), timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch {request.label}: {e}", url=url)
        if not response.ok:
            raise FetchError(
                f"Detail page for {request.label} returned HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )
        return parse_html(response.content)

    def process(self, url: str, request: PopupRequest, session: CrawlSession) -> int:
        """Fetch, extract and upload one ward. Returns the number of voters uploaded."""
        with timed_operation(f"fetch {request.label}", logger):
            doc = self.fetch_detail(url, request)

        result = self.extractor.run(doc)
        payload = VoterUploadPayload.from_extraction(result, village_id=session.village_id)
        logger.debug(f"Payload for {request.label}: {payload.to_dict()}")

        with timed_operation(f"upload {request.label}", logger):
            self.sink.deliver(payload.to_dict(), name=request.label)
        return len(payload.voters)

    def run(self, index_doc: BeautifulSoup, index_url: str, session: CrawlSession) -> CrawlReport:
        """
        Crawl every ward button on the index page.

        Never raises for a single ward's failure; see the returned report.
        """
        triggers = find_triggers(index_doc)
        url = detail_url(index_url, self.detail_page)
        report = CrawlReport(attempted=len(triggers))
        logger.info(f"Found {len(triggers)} ward button(s); detail page {url}")

        task = self.progress.add_task("Crawling wards", total=len(triggers)) if self.progress else None

        for index, trigger in enumerate(triggers):
            if index > 0 and self.delay_sec > 0:
                self._sleep(self.delay_sec)

            label = f"element {index + 1}"
            try:
                request = parse_popup_call(trigger.get("onclick", ""))
                label = request.label
                report.voters_uploaded += self.process(url, request, session)
                report.succeeded += 1
            except UnknownReportTypeError as e:
                logger.warning(f"Skipping {label}: {e.message}")
                report.skipped += 1
            except Exception as e:
                logger.error(f"Failed {label}: {e}")
                report.record_failure(index, label, e)
            finally:
                if task is not None:
                    self.progress.advance(task)

        logger.info(
            f"Crawl finished: {report.attempted} attempted, {report.succeeded} uploaded, "
            f"{report.failed} failed, {report.skipped} skipped"
        )
        return report


def run_crawl(
    index_doc: BeautifulSoup,
    index_url: str,
    crawler: WardCrawler,
    store: SessionStore,
    village_id: Optional[Any] = None,
    ask: Optional[Callable[[str], str]] = None,
) -> CrawlReport:
    """
    Run a crawl with session handling.

    The village id comes from the command line, an interrupted earlier
    crawl (SessionStore), or the operator, in that order. The stored
    session is cleared once the crawl completes.

    Raises:
        OperationCancelledError / InvalidInputError: From the village id prompt
    """
    session = None
    if village_id is None:
        session = store.load()
        if session is not None:
            logger.info(f"Resuming crawl for village {session.village_id}")
    if session is None:
        session = CrawlSession(village_id=resolve_identifier(village_id, "village_id", ask=ask))
    store.save(session)

    report = crawler.run(index_doc, index_url, session)
    store.clear()
    return report
