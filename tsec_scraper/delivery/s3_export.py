"""
S3 export for files written by FileExportSink.

Supports destinations in these formats:
- s3://bucket/prefix/
- https://bucket.s3.region.amazonaws.com/prefix/
- https://s3.region.amazonaws.com/bucket/prefix/
"""

from __future__ import annotations

import mimetypes
import re
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import unquote

from ..config import S3Config
from ..exceptions import ConfigurationError, ScraperError
from ..logger import get_logger
from ..models import DeliveryResult

logger = get_logger(__name__)


S3_URI_PATTERN = re.compile(r"^s3://([^/]+)/?(.*)$")
S3_HTTPS_VIRTUAL_HOSTED = re.compile(
    r"^https?://([^.]+)\.s3\.([^.]+\.)?amazonaws\.com/?(.*)$"
)
S3_HTTPS_PATH_STYLE = re.compile(
    r"^https?://s3\.([^.]+\.)?amazonaws\.com/([^/]+)/?(.*)$"
)


def parse_s3_url(url: str) -> Tuple[str, str]:
    """
    Parse an S3 destination into bucket and key prefix.

    Raises:
        ConfigurationError: If the URL is not an S3 location
    """
    match = S3_URI_PATTERN.match(url)
    if match:
        return match.group(1), unquote(match.group(2))

    match = S3_HTTPS_VIRTUAL_HOSTED.match(url)
    if match:
        return match.group(1), unquote(match.group(3))

    match = S3_HTTPS_PATH_STYLE.match(url)
    if match:
        return match.group(2), unquote(match.group(3))

    raise ConfigurationError(f"Cannot parse S3 URL: {url}", config_key="s3_output")


def get_s3_client(s3_config: S3Config):
    """Create a boto3 S3 client from configuration."""
    import boto3
    from botocore.config import Config as BotoConfig

    kwargs = {
        "region_name": s3_config.region,
        "config": BotoConfig(
            connect_timeout=s3_config.connect_timeout,
            read_timeout=s3_config.read_timeout,
            retries={"max_attempts": s3_config.max_retries},
        ),
    }

    # Add explicit credentials if provided
    if s3_config.has_credentials:
        kwargs["aws_access_key_id"] = s3_config.access_key_id
        kwargs["aws_secret_access_key"] = s3_config.secret_access_key
        if s3_config.session_token:
            kwargs["aws_session_token"] = s3_config.session_token

    return boto3.client("s3", **kwargs)


def upload_export(
    local_path: Path,
    destination: str,
    s3_config: S3Config,
    client=None,
) -> DeliveryResult:
    """
    Upload an exported file under an S3 prefix.

    A destination ending in '/' (or an empty key) is treated as a prefix
    and the file name is appended; otherwise it is the full object key.

    Raises:
        ScraperError: If the upload fails
    """
    local_path = Path(local_path)
    bucket, key = parse_s3_url(destination)
    if not key or key.endswith("/"):
        key = f"{key}{local_path.name}"

    client = client or get_s3_client(s3_config)
    content_type: Optional[str] = mimetypes.guess_type(local_path.name)[0]
    extra_args = {"ContentType": content_type} if content_type else None

    s3_url = f"s3://{bucket}/{key}"
    logger.info(f"Uploading {local_path} -> {s3_url}")
    try:
        client.upload_file(str(local_path), bucket, key, ExtraArgs=extra_args)
    except Exception as e:
        raise ScraperError(f"Failed to upload to S3: {e}", details={"s3_url": s3_url})

    return DeliveryResult(target=s3_url)
