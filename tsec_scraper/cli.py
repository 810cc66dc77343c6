"""
Command-line interface.

Examples:
  # ULB polling-station map -> JSON file (prompts for the praja circle id)
  python -m tsec_scraper polling-stations saved/ulb_ps.html

  # Eenadu panchayat winners -> XLSX (or --format csv)
  python -m tsec_scraper results https://www.eenadu.net/telangana/panchayat-elections-results-phase1/...

  # ULB contestants -> ingestion API
  python -m tsec_scraper contestants saved/contestants.html --village-id 42

  # One ward voter list -> ingestion API, print instead of uploading
  python -m tsec_scraper voters saved/ward1.html --village-id 42 --dry-run

  # All wards of a panchayat, one after another
  python -m tsec_scraper crawl https://finalgprolls.tsec.gov.in/gpwardvoters.do --village-id 42
  python -m tsec_scraper crawl saved/index.html --base-url https://finalgprolls.tsec.gov.in/gpwardvoters.do
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Optional

import requests

from . import __version__
from .config import Config, get_config
from .crawler import SessionStore, WardCrawler, run_crawl
from .delivery import (
    ConsoleSink,
    DeliverySink,
    FileExportSink,
    HttpUploadSink,
    RetryPolicy,
    upload_export,
)
from .exceptions import ConfigurationError, OperationCancelledError, ScraperError
from .extractors import (
    ContestantsExtractor,
    PollingStationExtractor,
    ResultsExtractor,
    VoterListExtractor,
)
from .logger import get_logger
from .models import ResultRecord, VoterUploadPayload
from .prompts import console, get_progress, resolve_identifier
from .utils.html import is_url, load_document

logger = get_logger(__name__)


def _upload_sink(args: argparse.Namespace, config: Config, default_endpoint: str) -> DeliverySink:
    if args.dry_run:
        return ConsoleSink(console)
    return HttpUploadSink(
        args.endpoint or default_endpoint,
        retry_policy=RetryPolicy(
            max_retries=config.upload.max_retries,
            backoff_sec=config.upload.retry_delay_sec,
        ),
        timeout=config.upload.timeout_sec,
    )


def _export_to_s3(path: str, args: argparse.Namespace, config: Config) -> None:
    if args.s3_output:
        upload_export(Path(path), args.s3_output, config.s3)


def cmd_polling_stations(args: argparse.Namespace, config: Config) -> int:
    doc, _ = load_document(args.source)
    extractor = PollingStationExtractor()
    # Fail on a missing grid before bothering the operator
    extractor.locate(doc)
    circle_id = resolve_identifier(args.circle_id, "praja_circle_id")

    result = extractor.run(doc, circle_id=circle_id)
    if result.is_empty:
        console.print("[red]No PS rows found in #GridView1.[/red]")
        return 1

    sink = FileExportSink(args.output_dir or config.output_dir, fmt="json")
    delivered = sink.deliver(result.to_rows(), name=extractor.filename_base(result.locality))
    logger.debug(f"Export: {delivered.to_dict()}")
    _export_to_s3(delivered.target, args, config)
    console.print(f"[green]Done ({len(result)} rows)[/green] -> {delivered.target}")
    return 0


def cmd_results(args: argparse.Namespace, config: Config) -> int:
    doc, _ = load_document(args.source)
    extractor = ResultsExtractor()
    result = extractor.run(doc)
    if result.is_empty:
        console.print("[red]No rows found. Make sure the page has mandal tables (table.panelcinn01).[/red]")
        return 1

    sink = FileExportSink(
        args.output_dir or config.output_dir,
        fmt=args.format,
        fieldnames=ResultRecord.field_names(),
        xlsx_headers=ResultRecord.XLSX_HEADERS,
    )
    name = extractor.filename_base(result.extras.get("district_name", ""))
    delivered = sink.deliver(result.to_rows(), name=name)
    logger.debug(f"Export: {delivered.to_dict()}")
    _export_to_s3(delivered.target, args, config)
    console.print(f"[green]Done ({len(result)} rows)[/green] -> {delivered.target}")
    return 0


def cmd_contestants(args: argparse.Namespace, config: Config) -> int:
    doc, _ = load_document(args.source)
    extractor = ContestantsExtractor()
    extractor.locate(doc)
    village_id = resolve_identifier(args.village_id, "village_id")

    result = extractor.run(doc)
    if result.is_empty:
        console.print("[red]No contestants found in the table.[/red]")
        return 1

    payload = extractor.upload_payload(result, village_id)
    logger.debug(f"Contestants payload: {payload}")
    delivered = _upload_sink(args, config, config.upload.contestants_endpoint).deliver(payload, name="contestants")
    logger.debug(f"Delivery: {delivered.to_dict()}")
    console.print(f"[green]Uploaded {len(payload)} contestants successfully.[/green]")
    return 0


def cmd_voters(args: argparse.Namespace, config: Config) -> int:
    doc, _ = load_document(args.source)
    extractor = VoterListExtractor()
    extractor.locate(doc)
    village_id = resolve_identifier(args.village_id, "village_id")

    result = extractor.run(doc)
    payload = VoterUploadPayload.from_extraction(result, village_id=village_id)
    logger.debug(f"Voters payload: {payload.to_dict()}")
    delivered = _upload_sink(args, config, config.upload.voters_endpoint).deliver(
        payload.to_dict(), name=f"ward {payload.ward_no}"
    )
    logger.debug(f"Delivery: {delivered.to_dict()}")
    console.print(
        f"[green]Data extracted ({len(payload.voters)} records) and uploaded "
        f"for village {village_id}![/green]"
    )
    return 0


def cmd_crawl(args: argparse.Namespace, config: Config) -> int:
    # One session for the index page and every detail POST, so server cookies carry over
    http = requests.Session()
    doc, index_url = load_document(args.source, session=http, timeout=config.crawl.fetch_timeout_sec)
    if args.base_url:
        index_url = args.base_url
    elif not is_url(index_url):
        raise ConfigurationError(
            "A saved index page needs --base-url (the page's original URL) to resolve ward requests",
            config_key="base_url",
        )
    delay = config.crawl.delay_sec if args.delay is None else args.delay

    with get_progress() as progress:
        crawler = WardCrawler(
            sink=_upload_sink(args, config, config.upload.voters_endpoint),
            http=http,
            delay_sec=delay,
            detail_page=config.crawl.detail_page,
            timeout=config.crawl.fetch_timeout_sec,
            progress=progress,
        )
        report = run_crawl(
            doc,
            index_url,
            crawler,
            SessionStore(config.session_file),
            village_id=args.village_id,
        )

    logger.debug(f"Crawl report: {report.to_dict()}")
    console.print(f"[green]Crawl finished. Processed {report.attempted} ward(s).[/green]")
    for failure in report.failures:
        console.print(f"[yellow]  failed: {failure.label}: {failure.error}[/yellow]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsec-scraper",
        description="Extract election and voter tables from TSEC / Eenadu pages.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1] if __doc__ else None,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_source(p: argparse.ArgumentParser) -> None:
        p.add_argument("source", help="Saved HTML file or page URL")

    def add_export(p: argparse.ArgumentParser) -> None:
        p.add_argument("--output-dir", "-o", type=Path, help="Export directory (default: OUTPUT_DIR)")
        p.add_argument("--s3-output", help="s3:// prefix to copy the exported file to")

    def add_upload(p: argparse.ArgumentParser) -> None:
        p.add_argument("--village-id", help="Village id (prompted when omitted)")
        p.add_argument("--endpoint", help="Override the ingestion endpoint")
        p.add_argument("--dry-run", action="store_true", help="Print the payload instead of uploading")

    p = sub.add_parser("polling-stations", help="ULB ward -> polling station map (JSON file)")
    add_source(p)
    add_export(p)
    p.add_argument("--circle-id", help="Praja circle id (prompted when omitted)")
    p.set_defaults(func=cmd_polling_stations)

    p = sub.add_parser("results", help="Panchayat winners per mandal (XLSX/CSV/JSON file)")
    add_source(p)
    add_export(p)
    p.add_argument("--format", "-f", choices=["xlsx", "csv", "json"], default="xlsx")
    p.set_defaults(func=cmd_results)

    p = sub.add_parser("contestants", help="ULB ward contestants -> ingestion API")
    add_source(p)
    add_upload(p)
    p.set_defaults(func=cmd_contestants)

    p = sub.add_parser("voters", help="One ward voter list -> ingestion API")
    add_source(p)
    add_upload(p)
    p.set_defaults(func=cmd_voters)

    p = sub.add_parser("crawl", help="Every ward on a voter index page -> ingestion API")
    add_source(p)
    add_upload(p)
    p.add_argument("--base-url", help="Original URL of a saved index page; ward requests are resolved against it")
    p.add_argument("--delay", type=float, help="Seconds between wards (default: CRAWL_DELAY_SEC or 1)")
    p.set_defaults(func=cmd_crawl)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()

    start_time = time.perf_counter()
    try:
        status = args.func(args, config)
    except (OperationCancelledError, KeyboardInterrupt):
        console.print("Cancelled.")
        return 130
    except ScraperError as e:
        logger.error(str(e))
        console.print(f"[red]{args.command} failed: {e.message}[/red]")
        return 1

    elapsed = time.perf_counter() - start_time
    logger.debug(f"{args.command} completed in {elapsed:.2f} seconds")
    return status


if __name__ == "__main__":
    sys.exit(main())
