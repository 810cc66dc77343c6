from pathlib import Path

from tsec_scraper.config import (
    DEFAULT_CONTESTANTS_ENDPOINT,
    DEFAULT_VOTERS_ENDPOINT,
    Config,
    get_config,
    reset_config,
)


def test_defaults(monkeypatch):
    for key in ("VOTERS_UPLOAD_URL", "CONTESTANTS_UPLOAD_URL", "UPLOAD_MAX_RETRIES", "UPLOAD_TIMEOUT_SEC",
                "CRAWL_DELAY_SEC", "CRAWL_SESSION_FILE"):
        monkeypatch.delenv(key, raising=False)

    config = Config()

    assert config.upload.voters_endpoint == DEFAULT_VOTERS_ENDPOINT
    assert config.upload.contestants_endpoint == DEFAULT_CONTESTANTS_ENDPOINT
    assert config.upload.max_retries == 0
    assert config.upload.timeout_sec is None
    assert config.crawl.delay_sec == 1.0
    assert config.crawl.detail_page == "gpwardvoterselec1.do"
    assert config.session_file == config.base_dir / ".crawl_session.json"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("VOTERS_UPLOAD_URL", "http://localhost:8000/ingest")
    monkeypatch.setenv("UPLOAD_MAX_RETRIES", "2")
    monkeypatch.setenv("UPLOAD_TIMEOUT_SEC", "15")
    monkeypatch.setenv("CRAWL_DELAY_SEC", "0.25")
    monkeypatch.setenv("CRAWL_SESSION_FILE", str(tmp_path / "s.json"))
    monkeypatch.setenv("DEBUG", "yes")

    config = Config()

    assert config.upload.voters_endpoint == "http://localhost:8000/ingest"
    assert config.upload.max_retries == 2
    assert config.upload.timeout_sec == 15.0
    assert config.crawl.delay_sec == 0.25
    assert config.session_file == Path(tmp_path / "s.json")
    assert config.debug is True


def test_invalid_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("UPLOAD_MAX_RETRIES", "many")

    assert Config().upload.max_retries == 0


def test_get_config_is_cached():
    reset_config()
    assert get_config() is get_config()
    reset_config()


def test_directories_follow_working_directory(monkeypatch, tmp_path):
    import tsec_scraper

    for key in ("TSEC_BASE_DIR", "OUTPUT_DIR", "LOG_DIR", "CRAWL_SESSION_FILE"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)

    config = Config()

    package_dir = Path(tsec_scraper.__file__).resolve().parent
    assert config.output_dir == tmp_path / "exports"
    assert config.logs_dir == tmp_path / "logs"
    assert config.session_file == tmp_path / ".crawl_session.json"
    assert package_dir not in config.output_dir.resolve().parents


def test_base_dir_override(monkeypatch, tmp_path):
    monkeypatch.setenv("TSEC_BASE_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("OUTPUT_DIR", raising=False)

    assert Config().output_dir == tmp_path / "data" / "exports"


def test_dotenv_values_do_not_override_environment(monkeypatch, tmp_path):
    from tsec_scraper.config import _load_dotenv

    (tmp_path / ".env").write_text('CRAWL_DELAY_SEC="3"\nUPLOAD_MAX_RETRIES=4\n# comment\n', encoding="utf-8")
    monkeypatch.setenv("TSEC_BASE_DIR", str(tmp_path))
    monkeypatch.setenv("UPLOAD_MAX_RETRIES", "1")
    # Empty counts as unset for the loader; setenv restores the real value afterwards
    monkeypatch.setenv("CRAWL_DELAY_SEC", "")

    _load_dotenv()

    assert Config().crawl.delay_sec == 3.0
    assert Config().upload.max_retries == 1
