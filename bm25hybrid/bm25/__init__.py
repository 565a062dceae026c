"""
BM25 (Best Match 25) ranking algorithm for hybrid search.

Components:
- tokenizer: Case/diacritic-insensitive tokenization for indexing and queries
- corpus: Incremental corpus statistics (df, document lengths, avgdl)
- scorer: BM25 scoring with signed global IDF and the ranking policy
- fusion: Hybrid combination of BM25 and vector similarity scores

The statistics object is owned by the caller (normally BM25Index) and
passed to the scorer explicitly; nothing here keeps module-level state.
"""

from .tokenizer import tokenize, strip_diacritics
from .corpus import CorpusStatistics
from .scorer import BM25Scorer
from .fusion import hybrid_score, normalize_bm25, fuse_hybrid

__all__ = [
    "tokenize",
    "strip_diacritics",
    "CorpusStatistics",
    "BM25Scorer",
    "hybrid_score",
    "normalize_bm25",
    "fuse_hybrid",
]
