"""
Hybrid score fusion: BM25 + vector similarity.

BM25 scores are unbounded (and negative for over-common terms), vector
similarities are expected in [0, 1]. The BM25 score is scaled by a fixed
normalization factor and clamped into [0, 1] before the weighted sum:

    normalized_bm25 = clamp(bm25 / normalization_factor, 0, 1)
    hybrid = weight × vector + (1 - weight) × normalized_bm25

Where:
    weight = vector weight (0-1); BM25 weight is (1 - weight)
    normalization_factor = tuning knob (default: 10.0), not derived from the corpus

With vector in [0, 1] and weight in [0, 1] the result is always in [0, 1].
"""

from typing import Dict, Hashable, List, Sequence, Tuple

from ..models import Document, HybridResult


def clamp(value: float, low: float, high: float) -> float:
    """Clamp a value to [low, high]"""
    return max(low, min(high, value))


def normalize_bm25(bm25_score: float, normalization_factor: float = 10.0) -> float:
    """
    Map a raw BM25 score into [0, 1].

    Examples:
        >>> normalize_bm25(5.0)
        0.5
        >>> normalize_bm25(-1.2)   # common-term penalty floors at 0
        0.0
        >>> normalize_bm25(42.0)   # very high scores cap at 1
        1.0
    """
    return clamp(bm25_score / normalization_factor, 0.0, 1.0)


def hybrid_score(
    vector_score: float,
    bm25_score: float,
    weight: float = 0.5,
    normalization_factor: float = 10.0
) -> float:
    """
    Combine a vector similarity and a BM25 score into one ranking value.

    Args:
        vector_score: Similarity from the embedding side, expected in [0, 1]
            (not clamped here)
        bm25_score: Raw BM25 score (any real number)
        weight: Vector weight in [0, 1]; already clamped by SearchOptions
        normalization_factor: Divisor applied to the BM25 score before clamping

    Returns:
        Combined score

    Example:
        >>> hybrid_score(0.8, 5.0, weight=0.5)
        0.65
    """
    normalized = normalize_bm25(bm25_score, normalization_factor)
    return weight * vector_score + (1 - weight) * normalized


def fuse_hybrid(
    bm25_results: Sequence[Tuple[Document, float]],
    vector_scores: Dict[Hashable, float],
    documents: Dict[Hashable, Document],
    weight: float = 0.5,
    normalization_factor: float = 10.0,
    top_k: int = 10
) -> List[HybridResult]:
    """
    Merge a BM25 ranking with vector similarities into a hybrid ranking.

    Documents found by only one side get 0.0 for the missing signal. Order
    of first appearance (BM25 hits first, then vector-only ids) breaks ties.

    Args:
        bm25_results: (document, bm25_score) pairs from BM25 search
        vector_scores: doc_id → vector similarity for the query
        documents: doc_id → Document lookup for vector-only hits
            (ids missing here are skipped)
        weight: Vector weight in [0, 1]
        normalization_factor: BM25 normalization divisor
        top_k: Maximum number of results

    Returns:
        List of HybridResult sorted by combined score (descending)

    Example:
        >>> fused = fuse_hybrid(
        ...     [(doc_a, 8.0)],
        ...     {"b": 0.9, "a": 0.2},
        ...     {"a": doc_a, "b": doc_b},
        ... )
        >>> [(r.document.id, r.score) for r in fused]
        [('a', 0.5), ('b', 0.45)]
    """
    if top_k <= 0:
        return []

    bm25_by_id: Dict[Hashable, float] = {}
    candidates: Dict[Hashable, Document] = {}

    for document, score in bm25_results:
        bm25_by_id[document.id] = score
        candidates.setdefault(document.id, document)

    for doc_id in vector_scores:
        if doc_id not in candidates and doc_id in documents:
            candidates[doc_id] = documents[doc_id]

    fused = [
        HybridResult(
            document=document,
            score=hybrid_score(
                vector_scores.get(doc_id, 0.0),
                bm25_by_id.get(doc_id, 0.0),
                weight=weight,
                normalization_factor=normalization_factor,
            ),
            bm25_score=bm25_by_id.get(doc_id, 0.0),
            vector_score=vector_scores.get(doc_id, 0.0),
        )
        for doc_id, document in candidates.items()
    ]

    fused.sort(key=lambda r: r.score, reverse=True)
    return fused[:top_k]
