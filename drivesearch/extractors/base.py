"""
Base Extractor

Abstract base class for format-specific text extractors.
Provides a common interface for converting fetched documents to plain text.
"""

import re
from abc import ABC, abstractmethod

from ..common.drive_client import DriveClient, DriveError
from ..common.schemas import CandidateFile, FileFormat

_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


class ExtractionError(DriveError):
    """Raised when a fetched payload cannot be used at all."""
    pass


def collapse_blank_lines(text: str) -> str:
    """Collapse runs of blank lines to a single blank line."""
    return _EXCESS_BLANK_LINES.sub("\n\n", text)


def join_cells(cells) -> str:
    """Render one table row as pipe-separated cells."""
    return " | ".join(cells)


def require_payload(payload, file_id: str, operation: str) -> dict:
    """Reject fetched payloads that are not JSON objects."""
    if not isinstance(payload, dict):
        raise ExtractionError(
            f"{operation}: malformed payload for {file_id} ({type(payload).__name__})",
            operation=operation,
        )
    return payload


class BaseExtractor(ABC):
    """
    Abstract base class for text extractors.

    Each extractor must implement:
    - extract_text: Fetch a file by id and flatten it to plain text

    Missing sub-elements become empty text at their position. Only
    retrieval-level faults (not found, access revoked) raise.
    """

    file_format: FileFormat

    def __init__(self, client: DriveClient):
        """
        Initialize extractor.

        Args:
            client: Drive client used to fetch document payloads
        """
        self._client = client

    async def extract(self, candidate: CandidateFile) -> str:
        """
        Extract normalized plain text for a search candidate.

        Args:
            candidate: Candidate file from the retriever

        Returns:
            Extracted text (may be empty)
        """
        return await self.extract_text(candidate.id)

    @abstractmethod
    async def extract_text(self, file_id: str) -> str:
        """
        Fetch a file and flatten it to plain text.

        Args:
            file_id: File store identifier

        Returns:
            Extracted text (may be empty)
        """
        pass
