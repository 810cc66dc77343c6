import json

import pytest

from tsec_scraper import cli, prompts
from tsec_scraper.crawler import requests as crawler_requests
from tsec_scraper.extractors.results import MANDAL_MARKER

from conftest import FIXTURES

RESULTS_PAGE = f"""
<html><body>
<h2 class="sec_head mandal-ttl">Nagarkurnool - 151 Panchayats</h2>
<table class="panelcinn01">
  <thead><tr><th colspan="3">{MANDAL_MARKER} Achampet (1)</th></tr></thead>
  <tbody><tr><td>Rangapur</td><td>K. Ramesh</td><td>INC</td></tr></tbody>
</table>
</body></html>
"""


@pytest.fixture
def results_page(tmp_path):
    path = tmp_path / "results.html"
    path.write_text(RESULTS_PAGE, encoding="utf-8")
    return path


def test_polling_stations_exports_json(isolated_config):
    status = cli.main([
        "polling-stations", str(FIXTURES / "ulb_polling_stations.html"), "--circle-id", "7",
    ])

    assert status == 0
    exported = list((isolated_config / "exports").glob("praja-circle-ulb-ps-district-4-mnc-12-praja-7-*.json"))
    assert len(exported) == 1
    rows = json.loads(exported[0].read_text(encoding="utf-8"))
    assert [row["ps_id"] for row in rows] == [12, 15]


def test_results_csv_to_output_dir(isolated_config, results_page):
    out = isolated_config / "custom"

    status = cli.main(["results", str(results_page), "--format", "csv", "--output-dir", str(out)])

    assert status == 0
    (exported,) = out.glob("eenadu-results-Nagarkurnool-*.csv")
    assert exported.read_text(encoding="utf-8") == "mandal,village,winner,party\nAchampet,Rangapur,K. Ramesh,INC\n"


def test_results_without_rows_fails(isolated_config, tmp_path):
    page = tmp_path / "empty.html"
    page.write_text('<table class="panelcinn01"><thead><tr><th colspan="3">x</th></tr></thead></table>')

    assert cli.main(["results", str(page)]) == 1


def test_voters_dry_run(isolated_config):
    status = cli.main([
        "voters", str(FIXTURES / "ward_voters_en.html"), "--village-id", "42", "--dry-run",
    ])

    assert status == 0


def test_invalid_village_id_fails(isolated_config):
    status = cli.main([
        "voters", str(FIXTURES / "ward_voters_en.html"), "--village-id", "0", "--dry-run",
    ])

    assert status == 1


def test_missing_container_fails(isolated_config):
    status = cli.main([
        "contestants", str(FIXTURES / "ward_voters_en.html"), "--village-id", "1", "--dry-run",
    ])

    assert status == 1


def test_missing_file_fails(isolated_config, tmp_path):
    assert cli.main(["results", str(tmp_path / "nope.html")]) == 1


def test_cancelled_prompt_exits_130(isolated_config, monkeypatch):
    class EofPrompt:
        @staticmethod
        def ask(*args, **kwargs):
            raise EOFError()

    monkeypatch.setattr(prompts, "Prompt", EofPrompt)

    status = cli.main(["polling-stations", str(FIXTURES / "ulb_polling_stations.html")])

    assert status == 130
    assert not (isolated_config / "exports").exists()


INDEX_URL = "https://finalgprolls.tsec.gov.in/gpwardvoters.do"


class FakeResponse:
    ok = True
    status_code = 200

    def __init__(self, fixture, url=None):
        self.content = (FIXTURES / fixture).read_bytes()
        self.url = url


@pytest.fixture
def fake_http(monkeypatch):
    """Replace requests.Session; every session created records into one shared log."""
    calls = []

    class FakeHttp:
        def __init__(self):
            self.cookies = {}

        def get(self, url, timeout=None):
            calls.append(("GET", url, None, self))
            self.cookies["JSESSIONID"] = "abc"
            return FakeResponse("ward_index.html", url=url)

        def post(self, url, data=None, timeout=None):
            calls.append(("POST", url, data["ward_id"], self))
            return FakeResponse("ward_voters_en.html")

    monkeypatch.setattr(crawler_requests, "Session", FakeHttp)
    return calls


def test_crawl_saved_page_posts_against_base_url(isolated_config, fake_http):
    status = cli.main([
        "crawl", str(FIXTURES / "ward_index.html"), "--base-url", INDEX_URL,
        "--village-id", "42", "--delay", "0", "--dry-run",
    ])

    assert status == 0
    assert [(method, url, ward) for method, url, ward, _ in fake_http] == [
        ("POST", "https://finalgprolls.tsec.gov.in/gpwardvoterselec1.do", "1"),
        ("POST", "https://finalgprolls.tsec.gov.in/gpwardvoterselec1.do", "02"),
    ]
    assert not (isolated_config / "session.json").exists()


def test_crawl_saved_page_without_base_url_fails(isolated_config, fake_http):
    status = cli.main([
        "crawl", str(FIXTURES / "ward_index.html"), "--village-id", "42", "--delay", "0", "--dry-run",
    ])

    assert status == 1
    assert fake_http == []


def test_crawl_url_reuses_index_session(isolated_config, fake_http):
    status = cli.main(["crawl", INDEX_URL, "--village-id", "42", "--delay", "0", "--dry-run"])

    assert status == 0
    assert [method for method, *_ in fake_http] == ["GET", "POST", "POST"]
    sessions = {id(session) for *_, session in fake_http}
    assert len(sessions) == 1
    assert fake_http[-1][3].cookies == {"JSESSIONID": "abc"}
