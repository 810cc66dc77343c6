"""
Page extractors.

One extractor per supported page:
- PollingStationExtractor: ULB ward -> polling station grid (tsec.gov.in)
- ResultsExtractor: panchayat winners per mandal (eenadu.net)
- ContestantsExtractor: ULB ward contestants (tsec.gov.in)
- VoterListExtractor: ward voter list (finalgprolls.tsec.gov.in)
"""

from .base import BaseExtractor
from .polling_stations import PollingStationExtractor
from .results import ResultsExtractor, parse_mandal_name
from .contestants import ContestantsExtractor, parse_ward_banner
from .voters import VoterListExtractor, detect_language

__all__ = [
    "BaseExtractor",
    "PollingStationExtractor",
    "ResultsExtractor",
    "ContestantsExtractor",
    "VoterListExtractor",
    "parse_mandal_name",
    "parse_ward_banner",
    "detect_language",
]
