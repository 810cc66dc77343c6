import pytest

from tsec_scraper.exceptions import ContainerNotFoundError
from tsec_scraper.extractors import ContestantsExtractor, parse_ward_banner
from tsec_scraper.utils.html import parse_html

from conftest import load_fixture


def test_parse_ward_banner():
    banner = parse_ward_banner("WARD Name : 12 , Reserved for : BC (Women) , Total Contestants : 2")
    assert banner.ward_no == 12
    assert banner.reservation == "BC (Women)"

    empty = parse_ward_banner("Contestants list")
    assert empty.ward_no is None
    assert empty.reservation == ""


def test_banner_context_carries_to_following_rows():
    result = ContestantsExtractor().run(load_fixture("ulb_contestants.html"))

    assert [(r.name, r.ward_no, r.reservation, r.party_affiliation) for r in result.records] == [
        ("Anitha Rao", 12, "BC (Women)", "INC"),
        ("Sravani Goud", 12, "BC (Women)", "Independent"),
        ("Ravi Kumar", 13, "General", "BRS"),
    ]
    # Nameless candidate row
    assert result.skipped == 1


def test_upload_payload_tags_village():
    extractor = ContestantsExtractor()
    result = extractor.run(load_fixture("ulb_contestants.html"))

    payload = extractor.upload_payload(result, village_id=42)

    assert payload[0] == {
        "name": "Anitha Rao",
        "ward_no": 12,
        "reservation": "BC (Women)",
        "party_affiliation": "INC",
        "village_id": 42,
    }
    assert all(row["village_id"] == 42 for row in payload)


def test_rows_before_any_banner_have_no_ward():
    doc = parse_html("""
        <table id="GridView1">
          <tr><td>1</td><td>Early Bird</td><td>INC</td></tr>
        </table>
    """)

    result = ContestantsExtractor().run(doc)

    assert result.records[0].ward_no is None
    assert result.records[0].reservation == ""


def test_missing_grid_raises():
    with pytest.raises(ContainerNotFoundError):
        ContestantsExtractor().run(parse_html("<p>No data</p>"))
