"""
HTTP upload to an ingestion endpoint.

One POST per attempt with a JSON body and `Content-Type: application/json`.
Any 2xx is success. By default nothing is retried; a RetryPolicy can allow
retries of transient failures (transport errors, 429 and 5xx).
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from ..exceptions import ConfigurationError, UploadError
from ..logger import get_logger
from ..models import DeliveryResult
from .base import DeliverySink
from .file_export import to_json

logger = get_logger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


@dataclass
class RetryPolicy:
    """
    Retry behaviour for transient upload failures.

    max_retries=0 means a single attempt.
    """
    max_retries: int = 0
    backoff_sec: float = 2.0
    retry_statuses: tuple = (429, 500, 502, 503, 504)

    def is_transient_status(self, status_code: int) -> bool:
        return status_code in self.retry_statuses or status_code >= 500

    def delay_for(self, attempt: int) -> float:
        """Exponential backoff before retry number `attempt` (1-based)."""
        return self.backoff_sec * (2 ** (attempt - 1))


class HttpUploadSink(DeliverySink):
    """
    POST payloads as JSON to a fixed endpoint.

    Example:
        sink = HttpUploadSink("https://example.org/ingest")
        result = sink.deliver(payload.to_dict(), name="ward 3")
    """

    def __init__(
        self,
        url: str,
        retry_policy: Optional[RetryPolicy] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not url:
            raise ConfigurationError("Upload endpoint is not configured", config_key="endpoint")
        self.url = url
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout = timeout
        self.session = session or requests.Session()
        self._sleep = sleep

    def _post_once(self, body: bytes) -> requests.Response:
        try:
            response = self.session.post(self.url, data=body, headers=JSON_HEADERS, timeout=self.timeout)
        except requests.RequestException as e:
            raise UploadError(f"Upload failed: {e}", url=self.url, transient=True)

        if 200 <= response.status_code < 300:
            return response

        raise UploadError(
            f"Upload failed with status {response.status_code}",
            url=self.url,
            status_code=response.status_code,
            response_text=response.text,
            transient=self.retry_policy.is_transient_status(response.status_code),
        )

    def deliver(self, payload: Any, name: str = "") -> DeliveryResult:
        """
        Upload the payload.

        Raises:
            UploadError: Non-2xx response or transport failure after the
                allowed attempts; carries status code and response body
        """
        body = to_json(payload).rstrip("\n").encode("utf-8")
        label = name or self.url
        attempt = 0

        while True:
            attempt += 1
            try:
                response = self._post_once(body)
            except UploadError as e:
                if not e.transient or attempt > self.retry_policy.max_retries:
                    logger.error(f"Upload of {label} failed after {attempt} attempt(s): {e}")
                    raise
                delay = self.retry_policy.delay_for(attempt)
                logger.warning(f"Upload of {label} failed ({e.message}), retrying in {delay:.1f}s")
                self._sleep(delay)
                continue

            logger.info(f"Uploaded {label} ({response.status_code})")
            logger.debug(f"Upload response: {response.text}")
            return DeliveryResult(
                target=self.url,
                status_code=response.status_code,
                response_text=response.text,
                attempts=attempt,
                record_count=self.count_records(payload),
            )
