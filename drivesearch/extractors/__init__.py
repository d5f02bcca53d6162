"""
Text Extractors

Format-specific extractors that flatten fetched documents into plain text.
Each extractor implements the same contract (BaseExtractor) and is selected
by the candidate's format tag.

Available Extractors:
- DocumentExtractor: documents with nested tabs
- SpreadsheetExtractor: spreadsheets with multiple grids
- PresentationExtractor: slide decks with shapes, tables and notes
"""

from typing import Dict

from ..common.drive_client import DriveClient
from ..common.schemas import FileFormat
from .base import BaseExtractor, ExtractionError
from .document import DocumentExtractor
from .spreadsheet import SpreadsheetExtractor
from .presentation import PresentationExtractor, NO_SLIDES_NOTICE


def build_extractors(
    client: DriveClient,
    scan_rows: int = 1000,
    scan_columns: int = 52,
) -> Dict[FileFormat, BaseExtractor]:
    """Create one extractor per supported format, keyed by format tag."""
    return {
        FileFormat.DOCUMENT: DocumentExtractor(client),
        FileFormat.SPREADSHEET: SpreadsheetExtractor(client, scan_rows=scan_rows, scan_columns=scan_columns),
        FileFormat.PRESENTATION: PresentationExtractor(client),
    }


__all__ = [
    "BaseExtractor",
    "ExtractionError",
    "DocumentExtractor",
    "SpreadsheetExtractor",
    "PresentationExtractor",
    "NO_SLIDES_NOTICE",
    "build_extractors",
]
