"""
Custom exceptions for the TSEC scraper.

All application-specific exceptions inherit from ScraperError.
"""

from __future__ import annotations

from typing import Optional, Any


class ScraperError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details (for debugging)
        recoverable: Whether the error can potentially be recovered from
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(ScraperError):
    """
    Invalid or missing configuration.

    Examples:
        - Empty upload endpoint
        - Unparseable S3 destination
    """

    def __init__(self, message: str, config_key: Optional[str] = None):
        details = {"config_key": config_key} if config_key else None
        super().__init__(message, details=details, recoverable=False)


class ContainerNotFoundError(ScraperError):
    """
    The page does not contain the structure an extractor needs.

    Terminal for the page: nothing is exported or uploaded.
    """

    def __init__(self, message: str, selector: Optional[str] = None):
        details = {"selector": selector} if selector else None
        super().__init__(message, details=details, recoverable=False)


class InvalidInputError(ScraperError):
    """Operator-supplied identifier is not a positive integer."""

    def __init__(self, message: str, field_name: Optional[str] = None, field_value: Optional[Any] = None):
        details = {}
        if field_name:
            details["field_name"] = field_name
        if field_value is not None:
            details["field_value"] = str(field_value)[:100]
        super().__init__(message, details=details, recoverable=False)


class OperationCancelledError(ScraperError):
    """The operator cancelled a prompt; the whole operation is abandoned."""

    def __init__(self, message: str = "Operation cancelled by user"):
        super().__init__(message, recoverable=True)


class FetchError(ScraperError):
    """
    Failed to fetch a page.

    Examples:
        - Connection refused / DNS failure
        - Non-2xx status for a detail page
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        details = {}
        if url:
            details["url"] = url
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details=details, recoverable=True)
        self.url = url
        self.status_code = status_code


class UploadError(ScraperError):
    """
    The ingestion endpoint rejected a payload or could not be reached.

    Transient failures (transport errors, 429, 5xx) may be retried when a
    retry policy allows it; everything else is permanent.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None,
        transient: bool = False
    ):
        details = {}
        if url:
            details["url"] = url
        if status_code is not None:
            details["status_code"] = status_code
        if response_text:
            # Truncate long responses
            details["response_preview"] = response_text[:500]
        super().__init__(message, details=details, recoverable=transient)
        self.url = url
        self.status_code = status_code
        self.response_text = response_text
        self.transient = transient


class UnknownReportTypeError(ScraperError):
    """A crawl trigger names a report type with no known request mode."""

    def __init__(self, report_type: str):
        super().__init__(
            f"Unknown report type: {report_type!r}",
            details={"report_type": report_type},
            recoverable=True,
        )
        self.report_type = report_type
