"""
BM25 index for hybrid text/vector search.

BM25Index owns the document list and the corpus statistics, and guards them
with a ReadWriteLock:
- insert() takes the write side (exclusive against inserts and searches)
- search() / hybrid_search() take the read side (concurrent)

Vector similarities are never computed here: hybrid_search() accepts the
similarities the caller already obtained from its embedding model.
"""

import logging
from typing import Dict, Hashable, Iterable, List, Optional

from .bm25 import BM25Scorer, CorpusStatistics, fuse_hybrid, tokenize
from .config import SearchOptions
from .locking import ReadWriteLock
from .models import Document, HybridResult, SearchResult

logger = logging.getLogger(__name__)


class BM25Index:
    """
    In-memory BM25 index that grows by insertion.

    BM25 parameters come either from k1/b or from a SearchOptions instance;
    giving both raises TypeError.

    Example:
        >>> index = BM25Index([Document(1, "cat dog"), Document(2, "cat fish"), Document(3, "parrot")])
        >>> [(r.document.id, round(r.score, 3)) for r in index.search("parrot")]
        [(3, 0.611)]
    """

    def __init__(
        self,
        documents: Iterable[Document] = (),
        k1: Optional[float] = None,
        b: Optional[float] = None,
        options: Optional[SearchOptions] = None,
        max_workers: int = 1,
        filter_before_truncate: bool = False
    ):
        """
        Build the index from an initial batch of documents.

        Args:
            documents: Initial documents (ids must be unique)
            k1: BM25 term frequency saturation (default: 1.2)
            b: BM25 length normalization (default: 0.75)
            options: Search options; k1/b/hybrid settings are taken from here
                (mutually exclusive with k1 and b)
            max_workers: Threads used to score documents during search
            filter_before_truncate: Rank with filter-then-truncate instead of
                the default truncate-then-filter

        Raises:
            DuplicateDocumentError: two documents share an id
            TypeError: k1 or b passed together with options
        """
        if options is None:
            defaults = SearchOptions()
            options = SearchOptions(
                k1=defaults.k1 if k1 is None else k1,
                b=defaults.b if b is None else b
            )
        elif k1 is not None or b is not None:
            raise TypeError("Pass k1 and b through options, not alongside it")
        self.options = options
        self.filter_before_truncate = filter_before_truncate

        self._lock = ReadWriteLock()
        self._documents: List[Document] = list(documents)
        self._by_id: Dict[Hashable, Document] = {}
        self.statistics = CorpusStatistics(self._documents)
        for document in self._documents:
            self._by_id[document.id] = document

        self.scorer = BM25Scorer(
            self.statistics,
            k1=options.k1,
            b=options.b,
            max_workers=max_workers
        )
        logger.info(
            f"BM25 index built: {len(self._documents)} documents, "
            f"avgdl={self.statistics.average_length():.2f}, k1={options.k1}, b={options.b}"
        )

    @classmethod
    def from_options(cls, documents: Iterable[Document], options: SearchOptions, **kwargs) -> "BM25Index":
        return cls(documents, options=options, **kwargs)

    @property
    def k1(self) -> float:
        return self.options.k1

    @property
    def b(self) -> float:
        return self.options.b

    def insert(self, document: Document) -> None:
        """
        Add a document, updating df, lengths and the average length.

        Blocks until in-flight searches finish.

        Raises:
            DuplicateDocumentError: id already indexed (index unchanged)
        """
        with self._lock.write_locked():
            self.statistics.insert(document)
            self._documents.append(document)
            self._by_id[document.id] = document
            total = len(self._documents)
        logger.info(f"Added document {document.id!r} (total={total})")

    add_document = insert

    def get_document(self, doc_id: Hashable) -> Optional[Document]:
        with self._lock.read_locked():
            return self._by_id.get(doc_id)

    @property
    def documents(self) -> List[Document]:
        """Copy of the indexed documents in insertion order"""
        with self._lock.read_locked():
            return list(self._documents)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._documents)

    def __contains__(self, doc_id: Hashable) -> bool:
        with self._lock.read_locked():
            return doc_id in self._by_id

    def search(self, query: str, top_k: Optional[int] = None) -> List[SearchResult]:
        """
        BM25 search.

        Args:
            query: Raw query text (tokenized like document text)
            top_k: Maximum results (None = options.default_num_results)

        Returns:
            SearchResult list, best first, all scores > 0. May be shorter
            than top_k: non-positive scores inside the top_k window are
            dropped, not replaced.
        """
        if top_k is None:
            top_k = self.options.default_num_results

        query_terms = tokenize(query)

        with self._lock.read_locked():
            ranked = self.scorer.score(
                query_terms,
                self._documents,
                top_k=top_k,
                filter_before_truncate=self.filter_before_truncate
            )

        logger.debug(f"BM25 search query={query!r} terms={query_terms}: {len(ranked)} results")
        return [SearchResult(document=doc, score=score) for doc, score in ranked]

    def hybrid_search(
        self,
        query: str,
        vector_scores: Dict[Hashable, float],
        top_k: Optional[int] = None
    ) -> List[HybridResult]:
        """
        Combine BM25 hits with caller-supplied vector similarities.

        BM25 is evaluated over the whole corpus (positive scores only), then
        each candidate gets hybrid_score(vector, bm25) with the configured
        weight and normalization factor.

        Args:
            query: Raw query text
            vector_scores: doc_id → similarity in [0, 1] for this query
                (unknown ids are ignored)
            top_k: Maximum results (None = options.default_num_results)

        Returns:
            HybridResult list sorted by combined score (descending)
        """
        if top_k is None:
            top_k = self.options.default_num_results

        query_terms = tokenize(query)

        with self._lock.read_locked():
            bm25_results = self.scorer.score(
                query_terms,
                self._documents,
                top_k=len(self._documents)
            )
            fused = fuse_hybrid(
                bm25_results,
                vector_scores,
                self._by_id,
                weight=self.options.hybrid_weight,
                normalization_factor=self.options.bm25_normalization_factor,
                top_k=top_k
            )

        logger.debug(
            f"Hybrid search query={query!r}: {len(bm25_results)} BM25 hits, "
            f"{len(vector_scores)} vector scores, {len(fused)} results"
        )
        return fused
