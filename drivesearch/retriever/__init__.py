"""
Retriever - Content-Aware Search

Finds candidate files, reads their content and ranks them by relevance.

Key Components:
- CandidateRetriever: Name/full-text pre-filter against the file store
- score_relevance: Term-based relevance heuristics
- Summarizer: Extractive summaries of extracted text
- Ranker: Concurrent extract-score-summarize fan-out and sort

Pipeline:
1. Retrieve up to twice the requested count of candidate files
2. Extract plain text from every candidate concurrently
3. Score and summarize each text
4. Sort by relevance score (stable)
"""

from .candidate_retriever import CandidateRetriever, build_search_query
from .scorer import ScoreWeights, score_relevance
from .summarizer import Summarizer, SummaryWeights
from .ranker import Ranker, UNAVAILABLE_SUMMARY, build_ranker

__all__ = [
    "CandidateRetriever",
    "build_search_query",
    "ScoreWeights",
    "score_relevance",
    "Summarizer",
    "SummaryWeights",
    "Ranker",
    "UNAVAILABLE_SUMMARY",
    "build_ranker",
]
