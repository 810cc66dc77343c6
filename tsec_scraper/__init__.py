"""
TSEC Scraper

Extracts election and voter tables from Telangana State Election
Commission and Eenadu results pages, and exports them as files or uploads
them to an ingestion API.
"""

__version__ = '1.0.0'
