"""
Candidate Retriever

Asks the file store for rich documents whose name or indexed full text
matches a query. This is a cheap pre-filter: candidates are ranked later
by actually reading their content.
"""

import logging
from typing import Any, Dict, List, Optional

from ..common.config import MAX_CANDIDATES_CEILING
from ..common.drive_client import DriveClient
from ..common.schemas import CandidateFile, EDITOR_URLS, FORMAT_BY_MIME_TYPE, MIME_TYPES

logger = logging.getLogger("drivesearch.retriever.candidate_retriever")


def escape_query_literal(value: str) -> str:
    """Escape a value for use inside a single-quoted Drive query string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_search_query(query: str) -> str:
    """Build the Drive query expression for a free-text search."""
    literal = escape_query_literal(query)
    mime_filter = " or ".join(f"mimeType='{mime}'" for mime in MIME_TYPES.values())
    return (
        f"(name contains '{literal}' or fullText contains '{literal}')"
        f" and ({mime_filter}) and trashed=false"
    )


def to_candidate(entry: Dict[str, Any]) -> Optional[CandidateFile]:
    """Convert a files.list entry to a candidate, or None if unsupported."""
    file_id = entry.get("id")
    file_format = FORMAT_BY_MIME_TYPE.get(entry.get("mimeType", ""))
    if not file_id or file_format is None:
        return None
    return CandidateFile(
        id=file_id,
        name=entry.get("name", ""),
        file_format=file_format,
        link=entry.get("webViewLink") or EDITOR_URLS[file_format].format(id=file_id),
        modified_time=entry.get("modifiedTime", ""),
    )


class CandidateRetriever:
    """
    Retrieves candidate files for content analysis.

    Over-fetches twice the requested result count (bounded by the fan-out
    ceiling) so ranking has material to reorder.
    """

    def __init__(self, client: DriveClient, max_candidates: int = MAX_CANDIDATES_CEILING):
        """
        Initialize candidate retriever.

        Args:
            client: Drive client used for files.list
            max_candidates: Upper bound on candidates per request (<= 20)
        """
        self._client = client
        self.max_candidates = max(1, min(max_candidates, MAX_CANDIDATES_CEILING))

    def page_size(self, max_results: int) -> int:
        wanted = max(1, min(max_results, self.max_candidates))
        return min(wanted * 2, self.max_candidates)

    async def retrieve(self, query: str, max_results: int) -> List[CandidateFile]:
        """
        Find candidate files matching a query.

        Args:
            query: Free-text query
            max_results: Caller's requested number of results

        Returns:
            Candidates ordered by last-modified time, most recent first

        Raises:
            DriveError: If the file store request fails
        """
        page_size = self.page_size(max_results)
        entries = await self._client.list_files(q=build_search_query(query), page_size=page_size)

        candidates = []
        for entry in entries:
            candidate = to_candidate(entry)
            if candidate is None:
                logger.debug("Skipping unsupported file entry: %s", entry.get("id"))
                continue
            candidates.append(candidate)

        # RFC 3339 timestamps in UTC sort lexicographically
        candidates.sort(key=lambda c: c.modified_time, reverse=True)
        logger.info("Retrieved %d candidates for query %r", len(candidates), query)
        return candidates[:page_size]
