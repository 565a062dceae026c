"""
Search configuration for BM25 and hybrid ranking.

Values come from SearchOptions(...) directly or from environment variables
via load_search_options(). Environment loading follows the usual layering:
.env.local (local dev) first, then .env, then the process environment.

Environment variables (all optional):
    BM25_DEFAULT_NUM_RESULTS   default top_k for searches (default: 10)
    BM25_MIN_THRESHOLD         minimum score kept by callers (default: unset)
    BM25_HYBRID_WEIGHT         vector weight, clamped to [0, 1] (default: 0.5)
    BM25_K1                    term frequency saturation (default: 1.2)
    BM25_B                     length normalization (default: 0.75)
    BM25_NORMALIZATION_FACTOR  BM25 divisor for hybrid scores (default: 10.0)
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

ENV_PREFIX = "BM25_"

_ENV_FIELDS = {
    "DEFAULT_NUM_RESULTS": "default_num_results",
    "MIN_THRESHOLD": "min_threshold",
    "HYBRID_WEIGHT": "hybrid_weight",
    "K1": "k1",
    "B": "b",
    "NORMALIZATION_FACTOR": "bm25_normalization_factor",
}


class SearchOptions(BaseModel):
    """
    Immutable search options.

    hybrid_weight is clamped to [0, 1] once, at construction, and
    bm25_normalization_factor must be positive. Other values are taken as
    given: k1, b and min_threshold are tuning knobs, not validated ranges.
    """
    model_config = ConfigDict(frozen=True)

    default_num_results: int = Field(default=10, description="Default number of results (top_k <= 0 returns nothing)")
    min_threshold: Optional[float] = Field(
        default=None,
        description="Minimum score threshold. Not enforced by the index; callers filter with it."
    )
    hybrid_weight: float = Field(
        default=0.5,
        description="Vector weight in hybrid search (0.0-1.0). BM25 weight is 1 - hybrid_weight."
    )
    k1: float = Field(default=1.2, description="BM25 term frequency saturation")
    b: float = Field(default=0.75, description="BM25 length normalization")
    bm25_normalization_factor: float = Field(
        default=10.0,
        gt=0.0,
        description="BM25 scores are divided by this value and clamped to 0-1 for hybrid search"
    )

    @field_validator("hybrid_weight", mode="before")
    @classmethod
    def clamp_hybrid_weight(cls, value):
        weight = float(value)
        return max(0.0, min(1.0, weight))

    @property
    def bm25_weight(self) -> float:
        return 1.0 - self.hybrid_weight


def load_env_file(env_file: Optional[Union[str, Path]] = None, base_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Load environment variables from a dotenv file.

    Args:
        env_file: Explicit file to load (skips discovery)
        base_dir: Directory searched for .env.local / .env (default: cwd)

    Returns:
        Path of the loaded file, or None if nothing was found
    """
    if env_file is not None:
        path = Path(env_file)
        if not path.exists():
            logger.warning(f"Env file not found: {path}")
            return None
        load_dotenv(path, override=True)
        return path

    base_dir = base_dir or Path.cwd()
    for candidate in (base_dir / ".env.local", base_dir / ".env"):
        if candidate.exists():
            logger.info(f"Loading environment from: {candidate}")
            load_dotenv(candidate, override=True)
            return candidate

    logger.debug("No .env.local or .env file found - using system environment variables only")
    return None


def load_search_options(env_file: Optional[Union[str, Path]] = None, base_dir: Optional[Path] = None) -> SearchOptions:
    """
    Build SearchOptions from the environment.

    Unset (or empty) variables keep their defaults. Unparsable numbers and a
    non-positive BM25_NORMALIZATION_FACTOR raise pydantic.ValidationError;
    BM25_HYBRID_WEIGHT is clamped.
    """
    load_env_file(env_file, base_dir)

    values = {}
    for suffix, field in _ENV_FIELDS.items():
        raw = os.getenv(ENV_PREFIX + suffix)
        if raw is None or raw.strip() == "":
            continue
        values[field] = raw.strip()

    options = SearchOptions(**values)
    logger.info(
        f"Search options: k1={options.k1}, b={options.b}, hybrid_weight={options.hybrid_weight}, "
        f"normalization_factor={options.bm25_normalization_factor}, "
        f"default_num_results={options.default_num_results}"
    )
    return options
