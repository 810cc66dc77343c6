"""
Runtime settings for the scraper.

Every value has a default and can be overridden from the environment or
from a `.env` file in the base directory (real environment variables win).

Usage:
    from tsec_scraper.config import get_config
    config = get_config()
    sink = HttpUploadSink(config.upload.voters_endpoint)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


def default_base_dir() -> Path:
    """TSEC_BASE_DIR, else the working directory. Exports, logs and the crawl session live here."""
    return Path(os.getenv("TSEC_BASE_DIR") or Path.cwd())


def _load_dotenv(dotenv_path: Optional[Path] = None) -> None:
    """
    Copy KEY=VALUE lines of a .env file into os.environ.

    Blank lines and '#' comments are ignored, surrounding quotes are
    stripped and variables that are already set are left alone.
    """
    dotenv_path = dotenv_path or default_base_dir() / ".env"
    if not dotenv_path.is_file():
        return

    for line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key and not os.getenv(key):
            os.environ[key] = value.strip('"').strip("'")


_load_dotenv()


def _get_bool_env(key: str, default: bool = False) -> bool:
    """'1/true/yes/on' or '0/false/no/off'; anything else gives the default."""
    value = os.getenv(key, "").strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return default


def _get_int_env(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, "").strip())
    except ValueError:
        return default


def _get_float_env(key: str, default: Optional[float] = None) -> Optional[float]:
    try:
        return float(os.getenv(key, "").strip())
    except ValueError:
        return default


DEFAULT_VOTERS_ENDPOINT = (
    "https://nonvindicable-semipractical-jadiel.ngrok-free.dev/web-app/voters/ingest"
)
DEFAULT_CONTESTANTS_ENDPOINT = (
    "https://api.thecircleapp.in/web-app/gp-trotter/municipality-elections/ward-contestants/ingest"
)


@dataclass
class UploadConfig:
    """Ingestion endpoints and HTTP delivery behaviour."""
    voters_endpoint: str = field(
        default_factory=lambda: os.getenv("VOTERS_UPLOAD_URL", DEFAULT_VOTERS_ENDPOINT)
    )
    contestants_endpoint: str = field(
        default_factory=lambda: os.getenv("CONTESTANTS_UPLOAD_URL", DEFAULT_CONTESTANTS_ENDPOINT)
    )
    # None leaves the timeout to requests (no timeout)
    timeout_sec: Optional[float] = field(default_factory=lambda: _get_float_env("UPLOAD_TIMEOUT_SEC"))

    # 0 = single attempt
    max_retries: int = field(default_factory=lambda: _get_int_env("UPLOAD_MAX_RETRIES", 0))
    retry_delay_sec: float = field(default_factory=lambda: _get_float_env("UPLOAD_RETRY_DELAY_SEC", 2.0))


@dataclass
class CrawlConfig:
    """Multi-ward voter crawl settings."""
    delay_sec: float = field(default_factory=lambda: _get_float_env("CRAWL_DELAY_SEC", 1.0))
    detail_page: str = field(
        default_factory=lambda: os.getenv("CRAWL_DETAIL_PAGE", "gpwardvoterselec1.do")
    )
    session_file: str = field(default_factory=lambda: os.getenv("CRAWL_SESSION_FILE", ""))
    fetch_timeout_sec: Optional[float] = field(
        default_factory=lambda: _get_float_env("CRAWL_FETCH_TIMEOUT_SEC")
    )


@dataclass
class S3Config:
    """Where and how exported files are copied to S3 (--s3-output)."""
    # Empty credentials fall back to the default boto3 chain (profile, IAM role)
    access_key_id: str = field(default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID", ""))
    secret_access_key: str = field(default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY", ""))
    session_token: str = field(default_factory=lambda: os.getenv("AWS_SESSION_TOKEN", ""))
    region: str = field(default_factory=lambda: os.getenv("AWS_REGION", "ap-south-1"))

    connect_timeout: int = field(default_factory=lambda: _get_int_env("S3_CONNECT_TIMEOUT", 10))
    read_timeout: int = field(default_factory=lambda: _get_int_env("S3_READ_TIMEOUT", 60))
    max_retries: int = field(default_factory=lambda: _get_int_env("S3_MAX_RETRIES", 3))

    @property
    def has_credentials(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)


@dataclass
class Config:
    """
    Top-level settings.

    Directories are resolved against base_dir unless given as
    absolute paths; nothing is created until something is written there.
    """

    base_dir: Path = field(default_factory=default_base_dir)

    # Export files and log files
    output_dir: Path = field(default=None)
    logs_dir: Path = field(default=None)

    # DEBUG=1: debug-level console logging and payload dumps
    debug: bool = field(default_factory=lambda: _get_bool_env("DEBUG", False))
    log_to_file: bool = field(default_factory=lambda: _get_bool_env("LOG_TO_FILE", True))

    upload: UploadConfig = field(default_factory=UploadConfig)
    crawl: CrawlConfig = field(default_factory=CrawlConfig)
    s3: S3Config = field(default_factory=S3Config)

    def __post_init__(self):
        if self.output_dir is None:
            self.output_dir = self.base_dir / os.getenv("OUTPUT_DIR", "exports")
        if self.logs_dir is None:
            self.logs_dir = self.base_dir / os.getenv("LOG_DIR", "logs")

    @property
    def session_file(self) -> Path:
        """Where the crawl session (village id) is persisted between runs."""
        if self.crawl.session_file:
            return Path(self.crawl.session_file)
        return self.base_dir / ".crawl_session.json"


_config: Optional[Config] = None


def get_config() -> Config:
    """Process-wide Config, built on first use."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached Config so the next get_config() re-reads the environment."""
    global _config
    _config = None
