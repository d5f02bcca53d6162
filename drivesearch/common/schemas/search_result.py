"""
Search Result Schemas

Request-scoped value types for content-aware search:
candidates from the file store, scored results, and the ranked response.
Nothing here is persisted or cached across requests.
"""

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Enums
# ============================================================================

class FileFormat(str, Enum):
    """Rich document formats eligible for content analysis"""
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"


MIME_TYPES = {
    FileFormat.DOCUMENT: "application/vnd.google-apps.document",
    FileFormat.SPREADSHEET: "application/vnd.google-apps.spreadsheet",
    FileFormat.PRESENTATION: "application/vnd.google-apps.presentation",
}

FORMAT_BY_MIME_TYPE = {mime: fmt for fmt, mime in MIME_TYPES.items()}

EDITOR_URLS = {
    FileFormat.DOCUMENT: "https://docs.google.com/document/d/{id}/edit",
    FileFormat.SPREADSHEET: "https://docs.google.com/spreadsheets/d/{id}/edit",
    FileFormat.PRESENTATION: "https://docs.google.com/presentation/d/{id}/edit",
}

# Type tag reported for candidates whose content could not be analysed
ERROR_TYPE = "Error"


# ============================================================================
# Models
# ============================================================================

class CandidateFile(BaseModel):
    """File metadata that matched a query well enough to be scored"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    file_format: FileFormat
    link: str
    modified_time: str = Field(default="", description="RFC 3339 last-modified timestamp")


class ScoredResult(BaseModel):
    """One ranked file, as returned to the caller"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    link: str
    type: str = Field(..., description="Format tag, or 'Error' when extraction failed")
    modified_time: str = Field(default="", alias="modifiedTime")
    relevance_score: int = Field(default=0, ge=0, alias="relevanceScore")
    summary: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class RankedResponse(BaseModel):
    """Results for one query, sorted by relevance score (descending)"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    query: str
    total_count: int = Field(default=0, alias="totalCount")
    results: List[ScoredResult] = Field(default_factory=list)

    @classmethod
    def from_results(cls, query: str, results: List[ScoredResult]) -> "RankedResponse":
        return cls(query=query, total_count=len(results), results=list(results))

    def to_payload(self) -> Dict[str, Any]:
        """Render the wire shape returned by the search tool"""
        return {
            "status": "success",
            "query": self.query,
            "totalCount": self.total_count,
            "results": [r.to_payload() for r in self.results],
        }
