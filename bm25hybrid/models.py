"""
Value types shared by the index, scorer and hybrid fusion.
"""

from dataclasses import dataclass
from typing import Hashable, Iterator, Union


@dataclass(frozen=True)
class Document:
    """Indexed document: opaque unique id + raw text"""
    id: Hashable
    text: str


@dataclass(frozen=True)
class SearchResult:
    """Single BM25 hit with its raw score"""
    document: Document
    score: float

    def __iter__(self) -> Iterator[Union[Document, float]]:
        # Allows `for doc, score in index.search(...)`
        yield self.document
        yield self.score


@dataclass(frozen=True)
class HybridResult:
    """Single hybrid hit with both input signals and the combined score"""
    document: Document
    score: float         # Combined score (0-1 when inputs are in range)
    bm25_score: float    # Raw BM25 score (0.0 if not a BM25 hit)
    vector_score: float  # Externally supplied similarity (0.0 if missing)
