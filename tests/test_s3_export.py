import pytest

from tsec_scraper.config import S3Config
from tsec_scraper.delivery import parse_s3_url, upload_export
from tsec_scraper.exceptions import ConfigurationError, ScraperError


class FakeS3Client:
    def __init__(self, error=None):
        self.error = error
        self.uploads = []

    def upload_file(self, filename, bucket, key, ExtraArgs=None):
        if self.error:
            raise self.error
        self.uploads.append((filename, bucket, key, ExtraArgs))


def test_parse_s3_url_formats():
    assert parse_s3_url("s3://exports/tsec/") == ("exports", "tsec/")
    assert parse_s3_url("s3://exports") == ("exports", "")
    assert parse_s3_url("https://exports.s3.ap-south-1.amazonaws.com/tsec/a.json") == ("exports", "tsec/a.json")
    assert parse_s3_url("https://s3.ap-south-1.amazonaws.com/exports/tsec/") == ("exports", "tsec/")


def test_parse_s3_url_rejects_other_urls():
    with pytest.raises(ConfigurationError):
        parse_s3_url("https://example.org/exports")


def test_upload_to_prefix_appends_file_name(tmp_path):
    path = tmp_path / "eenadu-results-2025-12-12.json"
    path.write_text("[]\n")
    client = FakeS3Client()

    result = upload_export(path, "s3://exports/tsec/", S3Config(), client=client)

    assert client.uploads == [
        (str(path), "exports", "tsec/eenadu-results-2025-12-12.json", {"ContentType": "application/json"}),
    ]
    assert result.target == "s3://exports/tsec/eenadu-results-2025-12-12.json"


def test_upload_to_explicit_key(tmp_path):
    path = tmp_path / "ps.json"
    path.write_text("[]\n")
    client = FakeS3Client()

    upload_export(path, "s3://exports/latest/ps.json", S3Config(), client=client)

    assert client.uploads[0][2] == "latest/ps.json"


def test_upload_failure_raises(tmp_path):
    path = tmp_path / "ps.json"
    path.write_text("[]\n")

    with pytest.raises(ScraperError):
        upload_export(path, "s3://exports/", S3Config(), client=FakeS3Client(error=RuntimeError("denied")))
