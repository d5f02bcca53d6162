"""
Ranker

Orchestrates content-aware search: retrieve candidates, extract and score
each one concurrently, then sort by relevance.

A candidate whose content cannot be fetched is never dropped. It is
reported with a zero score and an error type so the caller still sees it.
"""

import asyncio
import logging
from typing import Dict, Optional

from ..common.config import DriveSearchConfig
from ..common.drive_client import DriveClient
from ..common.schemas import CandidateFile, ERROR_TYPE, FileFormat, RankedResponse, ScoredResult
from ..extractors import BaseExtractor, build_extractors
from .candidate_retriever import CandidateRetriever
from .scorer import DEFAULT_SCORE_WEIGHTS, ScoreWeights, score_relevance
from .summarizer import Summarizer

logger = logging.getLogger("drivesearch.retriever.ranker")

UNAVAILABLE_SUMMARY = "Content could not be retrieved for analysis."


class Ranker:
    """
    Ranks candidate files by what they actually contain.

    Usage:
        ranker = build_ranker(client, config)
        response = await ranker.rank_search("project plan", max_results=10)
    """

    def __init__(
        self,
        retriever: CandidateRetriever,
        extractors: Dict[FileFormat, BaseExtractor],
        summarizer: Optional[Summarizer] = None,
        score_weights: ScoreWeights = DEFAULT_SCORE_WEIGHTS,
        candidate_timeout: Optional[float] = 30.0,
    ):
        """
        Initialize ranker.

        Args:
            retriever: Candidate retriever
            extractors: Extractor per format tag
            summarizer: Summary builder (default limits when omitted)
            score_weights: Relevance point values
            candidate_timeout: Seconds allowed per candidate (None disables)
        """
        self._retriever = retriever
        self._extractors = extractors
        self._summarizer = summarizer or Summarizer()
        self._weights = score_weights
        self.candidate_timeout = candidate_timeout

    async def rank_search(self, query: str, max_results: int) -> RankedResponse:
        """
        Search and rank files by content relevance.

        Args:
            query: Free-text query
            max_results: Caller's requested number of results

        Returns:
            RankedResponse sorted by relevance score, highest first

        Raises:
            DriveError: If candidate retrieval fails
        """
        candidates = await self._retriever.retrieve(query, max_results)
        if not candidates:
            return RankedResponse.from_results(query, [])

        results = await asyncio.gather(
            *(self._score_candidate(query, candidate) for candidate in candidates)
        )

        # sorted() is stable: equal scores keep retrieval order
        ranked = sorted(results, key=lambda r: r.relevance_score, reverse=True)
        return RankedResponse.from_results(query, ranked)

    async def _score_candidate(self, query: str, candidate: CandidateFile) -> ScoredResult:
        try:
            if self.candidate_timeout:
                return await asyncio.wait_for(
                    self._analyze(query, candidate), timeout=self.candidate_timeout
                )
            return await self._analyze(query, candidate)
        except asyncio.TimeoutError:
            logger.warning(
                "Timed out after %.1fs analysing %s (%s)",
                self.candidate_timeout, candidate.name, candidate.id,
            )
        except Exception as e:
            logger.warning("Failed to analyse %s (%s): %s", candidate.name, candidate.id, e)
        return unavailable_result(candidate)

    async def _analyze(self, query: str, candidate: CandidateFile) -> ScoredResult:
        extractor = self._extractors[candidate.file_format]
        text = await extractor.extract(candidate)
        return ScoredResult(
            id=candidate.id,
            name=candidate.name,
            link=candidate.link,
            type=candidate.file_format.value,
            modified_time=candidate.modified_time,
            relevance_score=score_relevance(query, candidate.name, text, self._weights),
            summary=self._summarizer.summarize(text, candidate.name),
        )


def unavailable_result(candidate: CandidateFile) -> ScoredResult:
    """Placeholder for a candidate whose content could not be analysed."""
    return ScoredResult(
        id=candidate.id,
        name=candidate.name,
        link=candidate.link,
        type=ERROR_TYPE,
        modified_time=candidate.modified_time,
        relevance_score=0,
        summary=UNAVAILABLE_SUMMARY,
    )


def build_ranker(client: DriveClient, config: DriveSearchConfig) -> Ranker:
    """Wire a Ranker from a Drive client and loaded configuration."""
    search = config.search
    return Ranker(
        retriever=CandidateRetriever(client, max_candidates=search.max_candidates),
        extractors=build_extractors(
            client, scan_rows=search.scan_rows, scan_columns=search.scan_columns
        ),
        summarizer=Summarizer.from_config(config.summary),
        score_weights=DEFAULT_SCORE_WEIGHTS.with_overrides(config.scoring.weights),
        candidate_timeout=search.candidate_timeout,
    )
