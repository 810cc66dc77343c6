"""
Delivery layer.

Sinks that move extracted data out of the process: files on disk,
HTTP ingestion endpoints and S3.
"""

from .base import DeliverySink
from .console import ConsoleSink
from .file_export import FileExportSink, to_csv, to_json, write_xlsx
from .http_upload import HttpUploadSink, RetryPolicy
from .s3_export import parse_s3_url, upload_export

__all__ = [
    "DeliverySink",
    "ConsoleSink",
    "FileExportSink",
    "HttpUploadSink",
    "RetryPolicy",
    "to_csv",
    "to_json",
    "write_xlsx",
    "parse_s3_url",
    "upload_export",
]
