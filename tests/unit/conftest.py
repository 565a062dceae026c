"""Unit test configuration - environment isolation"""

import pytest

BM25_ENV_VARS = [
    "BM25_DEFAULT_NUM_RESULTS",
    "BM25_MIN_THRESHOLD",
    "BM25_HYBRID_WEIGHT",
    "BM25_K1",
    "BM25_B",
    "BM25_NORMALIZATION_FACTOR",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_bm25_env(monkeypatch):
    """
    Remove BM25_* and LOG_LEVEL variables for each unit test.
    
    A developer's .env.local or shell exports must not change defaults
    the tests assert on.
    """
    for name in BM25_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
