import os
from pathlib import Path

import pytest

# Keep test runs from writing log files into the project
os.environ.setdefault("LOG_TO_FILE", "0")

from tsec_scraper.config import reset_config  # noqa: E402
from tsec_scraper.utils.html import parse_html  # noqa: E402

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def load_fixture(name):
    return parse_html((FIXTURES / name).read_bytes())


@pytest.fixture
def fixtures_dir():
    return FIXTURES


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Config whose exports and crawl session live under tmp_path."""
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "exports"))
    monkeypatch.setenv("CRAWL_SESSION_FILE", str(tmp_path / "session.json"))
    reset_config()
    yield tmp_path
    reset_config()
