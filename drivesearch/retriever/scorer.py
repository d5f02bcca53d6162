"""
Relevance Scorer

Scores a (query, file name, extracted text) triple with term heuristics.

Scoring per lowercase query term:
- file name contains the term: name_hit
- every literal occurrence in the text: occurrence (no word boundaries)
- file name equals the term, or a multi-term query appears verbatim in the
  text: exact_bonus

Scores are not normalized by document length: more occurrences count as
more evidence of relevance.
"""

from dataclasses import dataclass, fields, replace
from typing import Dict, Optional


@dataclass(frozen=True)
class ScoreWeights:
    """Point values for relevance heuristics"""
    name_hit: int = 10
    occurrence: int = 2
    exact_bonus: int = 20

    def with_overrides(self, overrides: Optional[Dict[str, int]]) -> "ScoreWeights":
        known = {f.name for f in fields(self)}
        return replace(self, **{k: int(v) for k, v in (overrides or {}).items() if k in known})


DEFAULT_SCORE_WEIGHTS = ScoreWeights()


def score_relevance(
    query: str,
    file_name: str,
    text: str,
    weights: ScoreWeights = DEFAULT_SCORE_WEIGHTS,
) -> int:
    """
    Compute the relevance score of one candidate.

    Args:
        query: Free-text query
        file_name: Candidate display name
        text: Extracted plain text
        weights: Point values

    Returns:
        Non-negative integer score (0 when nothing matches)
    """
    terms = query.lower().split()
    if not terms:
        return 0

    name = file_name.lower()
    body = text.lower()
    phrase = query.lower().strip()
    phrase_in_text = len(terms) > 1 and phrase in body

    score = 0
    for term in terms:
        if term in name:
            score += weights.name_hit
        score += weights.occurrence * body.count(term)
        if name == term or phrase_in_text:
            score += weights.exact_bonus
    return score
