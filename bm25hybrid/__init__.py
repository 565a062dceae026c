"""
bm25hybrid - BM25 lexical scoring and BM25 + vector hybrid ranking.

Usage:
    from bm25hybrid import BM25Index, Document, load_search_options

    options = load_search_options()
    index = BM25Index.from_options(
        [Document("a", "Kubernetes deployment guide"), Document("b", "Docker basics")],
        options,
    )
    index.insert(Document("c", "Rolling deployment strategies"))

    for document, score in index.search("deployment"):
        ...

    # vector similarities come from the caller's embedding model
    results = index.hybrid_search("deployment", {"a": 0.82, "c": 0.64})
"""

from .bm25 import (
    BM25Scorer,
    CorpusStatistics,
    fuse_hybrid,
    hybrid_score,
    normalize_bm25,
    tokenize,
)
from .config import SearchOptions, load_search_options
from .exceptions import BM25Error, DuplicateDocumentError
from .index import BM25Index
from .locking import ReadWriteLock
from .logging_config import setup_logging
from .models import Document, HybridResult, SearchResult

__version__ = "0.1.0"

__all__ = [
    "BM25Index",
    "BM25Scorer",
    "CorpusStatistics",
    "Document",
    "SearchResult",
    "HybridResult",
    "SearchOptions",
    "load_search_options",
    "hybrid_score",
    "normalize_bm25",
    "fuse_hybrid",
    "tokenize",
    "ReadWriteLock",
    "BM25Error",
    "DuplicateDocumentError",
    "setup_logging",
]
