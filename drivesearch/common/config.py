"""
Configuration Management for Drive Search

Loads configuration from ~/.drivesearch/config.json and environment variables.
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict

logger = logging.getLogger("drivesearch.common.config")

# Default config paths
CONFIG_DIR = Path.home() / ".drivesearch"
CONFIG_PATH = CONFIG_DIR / "config.json"

# Upper bound on candidates examined per request (fan-out width)
MAX_CANDIDATES_CEILING = 20


@dataclass
class GoogleConfig:
    """Google credential locations"""
    credentials_file: str = ""  # service account JSON
    token_file: str = ""  # authorized-user token JSON
    delegated_user: str = ""  # domain-wide delegation subject


@dataclass
class SearchConfig:
    """Candidate retrieval and ranking configuration"""
    default_max_results: int = 10
    max_candidates: int = MAX_CANDIDATES_CEILING
    candidate_timeout: float = 30.0  # seconds per candidate extraction
    scan_rows: int = 1000  # spreadsheet scan window
    scan_columns: int = 52


@dataclass
class ScoringConfig:
    """Overrides for relevance score weights"""
    weights: Dict[str, int] = field(default_factory=dict)


@dataclass
class SummaryConfig:
    """Extractive summary limits and heuristic weight overrides"""
    verbatim_limit: int = 300
    max_length: int = 400
    fallback_length: int = 200
    max_sentences: int = 3
    min_sentence_length: int = 10
    weights: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DriveSearchConfig:
    """Main Drive Search configuration"""
    google: GoogleConfig = field(default_factory=GoogleConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)


def _parse_google_config(data: dict) -> GoogleConfig:
    """Parse google section from config dict"""
    google_data = data.get("google", {})
    return GoogleConfig(
        credentials_file=google_data.get("credentials_file", ""),
        token_file=google_data.get("token_file", ""),
        delegated_user=google_data.get("delegated_user", ""),
    )


def _parse_search_config(data: dict) -> SearchConfig:
    """Parse search section from config dict"""
    search_data = data.get("search", {})
    return SearchConfig(
        default_max_results=search_data.get("default_max_results", 10),
        max_candidates=_clamp_candidates(
            search_data.get("max_candidates", MAX_CANDIDATES_CEILING)
        ),
        candidate_timeout=search_data.get("candidate_timeout", 30.0),
        scan_rows=search_data.get("scan_rows", 1000),
        scan_columns=search_data.get("scan_columns", 52),
    )


def _parse_scoring_config(data: dict) -> ScoringConfig:
    """Parse scoring section from config dict"""
    scoring_data = data.get("scoring", {})
    return ScoringConfig(weights=dict(scoring_data.get("weights", {})))


def _parse_summary_config(data: dict) -> SummaryConfig:
    """Parse summary section from config dict"""
    summary_data = data.get("summary", {})
    return SummaryConfig(
        verbatim_limit=summary_data.get("verbatim_limit", 300),
        max_length=summary_data.get("max_length", 400),
        fallback_length=summary_data.get("fallback_length", 200),
        max_sentences=summary_data.get("max_sentences", 3),
        min_sentence_length=summary_data.get("min_sentence_length", 10),
        weights=dict(summary_data.get("weights", {})),
    )


def _clamp_candidates(value: int) -> int:
    return max(1, min(int(value), MAX_CANDIDATES_CEILING))


def _config_path() -> Path:
    override = os.getenv("DRIVESEARCH_CONFIG")
    if override:
        return Path(override).expanduser()
    return CONFIG_PATH


def load_config() -> DriveSearchConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (~/.drivesearch/config.json or $DRIVESEARCH_CONFIG)
    3. Default values
    """
    config = DriveSearchConfig()

    path = _config_path()
    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)

            config.google = _parse_google_config(data)
            config.search = _parse_search_config(data)
            config.scoring = _parse_scoring_config(data)
            config.summary = _parse_summary_config(data)
        except (json.JSONDecodeError, IOError, TypeError, ValueError) as e:
            logger.warning("Failed to load config file %s: %s", path, e)
            config = DriveSearchConfig()

    # Environment variable overrides
    if os.getenv("GOOGLE_APPLICATION_CREDENTIALS"):
        config.google.credentials_file = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    if os.getenv("GOOGLE_TOKEN_FILE"):
        config.google.token_file = os.getenv("GOOGLE_TOKEN_FILE")
    if os.getenv("GOOGLE_DELEGATED_USER"):
        config.google.delegated_user = os.getenv("GOOGLE_DELEGATED_USER")

    if os.getenv("DRIVESEARCH_MAX_RESULTS"):
        config.search.default_max_results = int(os.getenv("DRIVESEARCH_MAX_RESULTS"))
    if os.getenv("DRIVESEARCH_MAX_CANDIDATES"):
        config.search.max_candidates = _clamp_candidates(os.getenv("DRIVESEARCH_MAX_CANDIDATES"))
    if os.getenv("DRIVESEARCH_CANDIDATE_TIMEOUT"):
        config.search.candidate_timeout = float(os.getenv("DRIVESEARCH_CANDIDATE_TIMEOUT"))

    return config
