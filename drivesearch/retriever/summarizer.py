"""
Summarizer

Extractive summaries of extracted document text.

Short texts are returned as-is. Longer texts are split into sentences, each
sentence is scored with independent heuristics (length, position, digits,
capitalized words, punctuation, clause markers, ...), and the best few are
returned in their original order.
"""

import logging
import re
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Optional, Tuple

from ..common.config import SummaryConfig

logger = logging.getLogger("drivesearch.retriever.summarizer")

EMPTY_CONTENT_NOTICE = 'No extractable text content in "{name}".'
ELLIPSIS = "..."
SENTENCE_SEPARATOR = ". "

_TERMINATORS = ".!?。！？"
_SENTENCE_PATTERN = re.compile(rf"[^{re.escape(_TERMINATORS)}]+[{re.escape(_TERMINATORS)}]*")


@dataclass(frozen=True)
class SummaryWeights:
    """Point values for sentence-selection heuristics"""
    ideal_length: Tuple[int, int] = (20, 150)
    ideal_length_points: int = 10
    acceptable_length: Tuple[int, int] = (10, 200)
    acceptable_length_points: int = 5
    edge_position_points: int = 15  # first or last sentence
    early_position_points: int = 10
    early_fraction: float = 0.3
    digit_points: int = 3
    capitalized_word_points: int = 1
    capitalized_word_cap: int = 8
    punctuation_chars: str = ",;、，；"
    punctuation_min: int = 2
    punctuation_points: int = 3
    emphasis_chars: str = "?!？！"
    emphasis_points: int = 5
    parenthesis_chars: str = "()（）"
    parenthesis_points: int = 2
    colon_arrow_glyphs: Tuple[str, ...] = (":", "：", "→", "⇒", "->", "=>")
    colon_arrow_points: int = 3
    clause_particles: str = "はがをにでと"
    clause_words: Tuple[str, ...] = ("and", "but", "because", "which", "that", "while", "when", "although", "if")
    clause_marker_min: int = 3
    clause_marker_points: int = 2
    alphanumeric_points: int = 3

    def with_overrides(self, overrides: Optional[Dict[str, Any]]) -> "SummaryWeights":
        known = {f.name for f in fields(self)}
        values = {}
        for key, value in (overrides or {}).items():
            if key not in known:
                logger.warning("Ignoring unknown summary weight: %s", key)
                continue
            values[key] = tuple(value) if isinstance(value, list) else value
        return replace(self, **values)


DEFAULT_SUMMARY_WEIGHTS = SummaryWeights()


@dataclass
class Sentence:
    """A sentence and the terminator that closed it"""
    text: str
    terminator: str


def split_sentences(text: str) -> List[Sentence]:
    """Split text after sentence terminators, dropping empty fragments."""
    sentences = []
    for match in _SENTENCE_PATTERN.finditer(text):
        raw = match.group()
        body = raw.rstrip(_TERMINATORS)
        stripped = body.strip()
        if stripped:
            sentences.append(Sentence(stripped, raw[len(body):]))
    return sentences


def _has_alphanumeric_token(tokens: List[str]) -> bool:
    return any(
        any(c.isalpha() for c in token) and any(c.isdigit() for c in token)
        for token in tokens
    )


def score_sentence(sentence: Sentence, index: int, total: int, weights: SummaryWeights = DEFAULT_SUMMARY_WEIGHTS) -> int:
    """Sum the heuristic points for one sentence."""
    text = sentence.text
    length = len(text)
    tokens = text.split()
    score = 0

    if weights.ideal_length[0] <= length <= weights.ideal_length[1]:
        score += weights.ideal_length_points
    elif weights.acceptable_length[0] <= length <= weights.acceptable_length[1]:
        score += weights.acceptable_length_points

    if index == 0 or index == total - 1:
        score += weights.edge_position_points
    elif index < total * weights.early_fraction:
        score += weights.early_position_points

    if any(c.isdigit() for c in text):
        score += weights.digit_points

    capitalized = sum(1 for token in tokens if token[0].isupper())
    score += min(capitalized * weights.capitalized_word_points, weights.capitalized_word_cap)

    if sum(text.count(c) for c in weights.punctuation_chars) >= weights.punctuation_min:
        score += weights.punctuation_points

    if any(c in weights.emphasis_chars for c in text + sentence.terminator):
        score += weights.emphasis_points

    if any(c in weights.parenthesis_chars for c in text):
        score += weights.parenthesis_points

    if any(glyph in text for glyph in weights.colon_arrow_glyphs):
        score += weights.colon_arrow_points

    lowered = [token.strip(",;:").lower() for token in tokens]
    markers = sum(text.count(p) for p in weights.clause_particles)
    markers += sum(1 for token in lowered if token in weights.clause_words)
    if markers >= weights.clause_marker_min:
        score += weights.clause_marker_points

    if _has_alphanumeric_token(tokens):
        score += weights.alphanumeric_points

    return score


class Summarizer:
    """
    Builds extractive summaries from document text.

    Independent of relevance scoring: the same text always yields the
    same summary regardless of the query.
    """

    def __init__(
        self,
        weights: SummaryWeights = DEFAULT_SUMMARY_WEIGHTS,
        config: Optional[SummaryConfig] = None,
    ):
        """
        Initialize summarizer.

        Args:
            weights: Heuristic point values
            config: Length limits (defaults from SummaryConfig)
        """
        self.weights = weights
        self.config = config or SummaryConfig()

    @classmethod
    def from_config(cls, config: SummaryConfig) -> "Summarizer":
        return cls(weights=DEFAULT_SUMMARY_WEIGHTS.with_overrides(config.weights), config=config)

    def summarize(self, text: str, file_name: str) -> str:
        """
        Summarize extracted text.

        Args:
            text: Extracted plain text
            file_name: Display name, used in the empty-content notice

        Returns:
            Summary string
        """
        stripped = (text or "").strip()
        if not stripped:
            return EMPTY_CONTENT_NOTICE.format(name=file_name)

        if len(stripped) <= self.config.verbatim_limit:
            return stripped

        sentences = [
            s for s in split_sentences(stripped)
            if len(s.text) >= self.config.min_sentence_length
        ]
        if not sentences:
            return stripped[:self.config.fallback_length] + ELLIPSIS

        total = len(sentences)
        ranked = sorted(
            enumerate(sentences),
            key=lambda item: (-score_sentence(item[1], item[0], total, self.weights), item[0]),
        )
        selected = sorted(ranked[:self.config.max_sentences], key=lambda item: item[0])

        summary = SENTENCE_SEPARATOR.join(sentence.text for _, sentence in selected)
        if len(summary) > self.config.max_length:
            summary = summary[:self.config.max_length] + ELLIPSIS
        return summary
