"""
BM25 scorer with global IDF from corpus statistics.

BM25 (Best Match 25) is a probabilistic ranking function used for information retrieval.

Formula:
    score(d) = Σ_{t in Q} idf(t) × (tf × (k1 + 1)) / (tf + k1 × (1 - b + b × dl/avgdl))
    idf(t)   = ln((N - df(t) + 0.5) / (df(t) + 0.5))

Where:
    tf = occurrences of term t in document d
    df = number of documents containing t
    N = number of documents in the corpus
    k1 = term frequency saturation parameter (default: 1.2)
    b = length normalization parameter (default: 0.75)
    dl = document length (number of tokens)
    avgdl = average document length across the corpus

IDF is signed: a term present in more than half of the corpus gets a
negative weight and pulls the document score down. Query terms are not
deduplicated, so a repeated query term counts once per occurrence.

Ranking policy (score()):
    1. Score every document
    2. Stable sort by score, descending
    3. Truncate to top_k
    4. Drop scores that are not strictly positive
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence, Tuple

from ..models import Document
from .corpus import CorpusStatistics

logger = logging.getLogger(__name__)


class BM25Scorer:
    """
    BM25 scoring over a CorpusStatistics instance.

    The scorer only reads the statistics; callers that mutate them
    concurrently must hold the index write lock.
    """

    def __init__(
        self,
        statistics: CorpusStatistics,
        k1: float = 1.2,
        b: float = 0.75,
        max_workers: int = 1
    ):
        """
        Initialize BM25 scorer.

        Args:
            statistics: Corpus statistics to score against (shared, read-only)

            k1: Term frequency saturation parameter
                Higher = more weight to term frequency
                Default: 1.2 (standard)

            b: Length normalization parameter
                Higher = more penalty for long documents
                Range: 0.0 - 1.0
                Default: 0.75 (standard)

            max_workers: Threads used to score documents in parallel
                1 = score sequentially in the calling thread
        """
        self.statistics = statistics
        self.k1 = k1
        self.b = b
        self.max_workers = max(1, max_workers)

    def idf(self, term: str) -> float:
        """
        Robertson-Sparck Jones IDF, signed (not clamped at zero).

        Examples:
            N=3, df=2 → ln(1.5 / 2.5) ≈ -0.5108
            N=4, df=1 → ln(3.5 / 1.5) ≈ 0.8473
        """
        n = self.statistics.total_documents()
        df = self.statistics.document_frequency(term)
        return math.log((n - df + 0.5) / (df + 0.5))

    def _length_norm(self, doc_id) -> float:
        """1 - b + b × dl/avgdl, with dl/avgdl taken as 0 for an empty corpus"""
        avgdl = self.statistics.average_length()
        ratio = self.statistics.length(doc_id) / avgdl if avgdl > 0 else 0.0
        return 1.0 - self.b + self.b * ratio

    def score_term(self, term: str, doc_id) -> float:
        """BM25 contribution of a single query term to one document"""
        tf = self.statistics.term_frequency(doc_id, term)
        if tf == 0:
            return 0.0

        numerator = tf * (self.k1 + 1)
        denominator = tf + self.k1 * self._length_norm(doc_id)
        return self.idf(term) * (numerator / denominator)

    def score_document(self, query_terms: Sequence[str], doc_id) -> float:
        """
        Compute the raw BM25 score for one document.

        Args:
            query_terms: Tokenized query (duplicates are scored each time)
            doc_id: Id of an indexed document

        Returns:
            Raw BM25 score; 0.0 when no query term occurs in the document,
            negative when only over-common terms match
        """
        score = 0.0
        for term in query_terms:
            score += self.score_term(term, doc_id)
        return score

    def upper_bound(self, term: str) -> float:
        """
        Upper bound on a single term's contribution: (k1 + 1) × idf.

        Only meaningful for positive idf; 0.0 otherwise.
        """
        idf = self.idf(term)
        if idf <= 0:
            return 0.0
        return (self.k1 + 1) * idf

    def score_all(
        self,
        query_terms: Sequence[str],
        documents: Sequence[Document]
    ) -> List[float]:
        """Raw scores for every document, in the order given"""
        if self.max_workers > 1 and len(documents) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                # map() keeps input order
                return list(executor.map(
                    lambda doc: self.score_document(query_terms, doc.id),
                    documents
                ))
        return [self.score_document(query_terms, doc.id) for doc in documents]

    def score(
        self,
        query_terms: Sequence[str],
        documents: Sequence[Document],
        top_k: int = 10,
        filter_before_truncate: bool = False
    ) -> List[Tuple[Document, float]]:
        """
        Score and rank documents for a tokenized query.

        Args:
            query_terms: Tokenized query
            documents: Documents to rank, in insertion order (ties keep this order)
            top_k: Maximum number of results
            filter_before_truncate: Drop non-positive scores before truncating
                instead of after (default False: truncate, then filter)

        Returns:
            List of (document, score) tuples, best first, all scores > 0
        """
        if top_k <= 0 or not documents:
            return []

        scores = self.score_all(query_terms, documents)

        # sorted() is stable, reverse=True included
        ranked = sorted(zip(documents, scores), key=lambda pair: pair[1], reverse=True)

        if filter_before_truncate:
            results = [pair for pair in ranked if pair[1] > 0][:top_k]
        else:
            results = [pair for pair in ranked[:top_k] if pair[1] > 0]

        logger.debug(
            f"BM25 scored {len(documents)} documents for {len(query_terms)} query terms: "
            f"{len(results)} results (top_k={top_k})"
        )
        return results
