import pytest

from tsec_scraper.exceptions import ContainerNotFoundError
from tsec_scraper.extractors import VoterListExtractor, detect_language
from tsec_scraper.extractors.voters import (
    SUMMARY_MARKERS,
    TELUGU_PAGE_MARKERS,
    WARD_LABEL_TE,
)
from tsec_scraper.models import VoterUploadPayload
from tsec_scraper.utils.html import parse_html

from conftest import load_fixture

VOTER_BOX = """
<table class="bl bb br bt">
  <tr><td>1</td><td>A.C No.:-116 PS No.: -61 SLNo.: -1</td></tr>
  <tr><td>-</td><td>: <b>SUNITHA</b></td></tr>
  <tr><td>-</td><td>: <b>RAJU</b></td></tr>
  <tr><td colspan="2"><table><tr><td>: 41</td><td>: F</td></tr></table></td></tr>
  <tr><td>-</td><td>: <b>4-5</b></td></tr>
  <tr><td colspan="2"><b>TEL0000001</b></td></tr>
</table>
"""

TELUGU_PAGE = f"""
<html><body>
<h3>{TELUGU_PAGE_MARKERS[0]}</h3>
<div id="printArea">
  <table>
    <tr><td>
      <table>
        <tr><td>{WARD_LABEL_TE}</td><td>: 5</td></tr>
        <tr><td>{SUMMARY_MARKERS[1]}</td><td>3</td><td>4</td><td>-</td><td>7</td></tr>
      </table>
    </td></tr>
  </table>
  {VOTER_BOX}
</div>
</body></html>
"""


def test_english_voter_list():
    result = VoterListExtractor().run(load_fixture("ward_voters_en.html"))

    assert result.extras == {"ward_no": 3, "language": "en"}
    assert result.summary.to_dict() == {"men": 10, "women": 12, "other": 0, "total": 22}

    first, second = result.records
    assert first.to_dict() == {
        "serial_no": "1",
        "ac_no": "116",
        "ps_no": "60",
        "sl_no": "1",
        "name": "RAMESH K",
        "relation_type": "Father Name",
        "relation_name": "KRISHNA K",
        "age": "34",
        "sex": "M",
        "door_no": "1-23",
        "epic_no": "ABC1234567",
    }
    assert second.name == "LATHA K"
    assert second.relation_type == "Husband Name"
    assert second.age == "29"
    assert second.sex == "F"


def test_short_and_nameless_boxes_are_skipped():
    result = VoterListExtractor().run(load_fixture("ward_voters_en.html"))

    assert len(result) == 2
    assert result.skipped == 2


def test_telugu_voter_list():
    result = VoterListExtractor().run(parse_html(TELUGU_PAGE))

    assert result.extras == {"ward_no": 5, "language": "te"}
    # Unparseable counts become 0
    assert result.summary.to_dict() == {"men": 3, "women": 4, "other": 0, "total": 7}
    assert result.records[0].name == "SUNITHA"
    assert result.records[0].age == "41"
    assert result.records[0].sex == "F"
    assert result.records[0].ps_no == "61"


def test_detect_language():
    assert detect_language(parse_html(TELUGU_PAGE)) == "te"
    assert detect_language(load_fixture("ward_voters_en.html")) == "en"


def test_missing_summary_defaults_to_zero():
    doc = parse_html(f'<div id="printArea">{VOTER_BOX}</div>')

    result = VoterListExtractor().run(doc)

    assert result.summary.to_dict() == {"men": 0, "women": 0, "other": 0, "total": 0}
    assert result.extras["ward_no"] is None


def test_no_voter_tables_raises():
    with pytest.raises(ContainerNotFoundError, match="No voter tables found!"):
        VoterListExtractor().run(parse_html('<div id="printArea"><table></table></div>'))


def test_upload_payload():
    result = VoterListExtractor().run(load_fixture("ward_voters_en.html"))

    payload = VoterUploadPayload.from_extraction(result, village_id=42).to_dict()

    assert payload["village_id"] == 42
    assert payload["ward_no"] == 3
    assert payload["language"] == "en"
    assert (payload["total_men"], payload["total_women"], payload["total_other"], payload["total_votes"]) == (
        10, 12, 0, 22,
    )
    assert [v["epic_no"] for v in payload["voters"]] == ["ABC1234567", "XYZ7654321"]


def test_voter_record_from_dict_normalizes():
    from tsec_scraper.models import VoterRecord

    voter = VoterRecord.from_dict({"name": "RAMESH K", "sex": " m ", "epic_no": "abc1", "unknown": 1})

    assert voter.sex == "M"
    assert voter.epic_no == "ABC1"
    assert voter.has_primary_key
