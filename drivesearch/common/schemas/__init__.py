"""
Drive Search Schemas

Value types shared by the retriever, extractors and server.
"""

from .search_result import (
    CandidateFile,
    ScoredResult,
    RankedResponse,
    FileFormat,
    MIME_TYPES,
    FORMAT_BY_MIME_TYPE,
    EDITOR_URLS,
    ERROR_TYPE,
)

__all__ = [
    "CandidateFile",
    "ScoredResult",
    "RankedResponse",
    "FileFormat",
    "MIME_TYPES",
    "FORMAT_BY_MIME_TYPE",
    "EDITOR_URLS",
    "ERROR_TYPE",
]
