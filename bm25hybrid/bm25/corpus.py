"""
Corpus statistics for BM25 scoring.

Holds everything the scorer needs to know about the current document set:
- document frequency per term (distinct documents containing the term)
- token length per document
- document count and running average document length
- cached term -> count table per document

Statistics only grow: documents are added through initialize() / insert()
and never removed.
"""

import logging
from collections import Counter
from typing import Dict, Hashable, Iterable, List

from ..exceptions import DuplicateDocumentError
from ..models import Document
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


class CorpusStatistics:
    """
    Incrementally maintained BM25 corpus statistics.

    Not thread-safe on its own: BM25Index serializes insert() against
    readers with a ReadWriteLock.
    """

    def __init__(self, documents: Iterable[Document] = ()):
        self._document_frequency: Dict[str, int] = {}
        self._document_length: Dict[Hashable, int] = {}
        self._term_frequencies: Dict[Hashable, Counter] = {}
        self._total_length = 0
        self._average_length = 0.0
        self.initialize(documents)

    def initialize(self, documents: Iterable[Document]) -> None:
        """
        Reset statistics and build them from a batch of documents.

        Each document is tokenized once; the average length is computed a
        single time over the whole batch.

        Args:
            documents: Documents to index (ids must be unique)

        Raises:
            DuplicateDocumentError: two documents share an id (previous
                statistics are kept)
        """
        documents = list(documents)
        seen = set()
        for document in documents:
            if document.id in seen:
                raise DuplicateDocumentError(document.id)
            seen.add(document.id)

        self._document_frequency = {}
        self._document_length = {}
        self._term_frequencies = {}
        self._total_length = 0

        for document in documents:
            self._add(document)

        self._recompute_average()
        logger.debug(f"Initialized corpus statistics: {self.snapshot()}")

    def insert(self, document: Document) -> None:
        """
        Add one document and update every statistic.

        Cost is linear in the document's token count; prefer initialize()
        for large batches.

        Raises:
            DuplicateDocumentError: document id already indexed
        """
        self._add(document)
        self._recompute_average()
        logger.debug(
            f"Inserted document {document.id!r}: length={self._document_length[document.id]}, "
            f"total_documents={self.total_documents()}, avgdl={self._average_length:.4f}"
        )

    def _add(self, document: Document) -> None:
        if document.id in self._document_length:
            raise DuplicateDocumentError(document.id)

        tokens = tokenize(document.text)
        term_counts = Counter(tokens)

        self._document_length[document.id] = len(tokens)
        self._term_frequencies[document.id] = term_counts
        self._total_length += len(tokens)

        # Counter keys are the distinct terms: one df increment per document
        for term in term_counts:
            self._document_frequency[term] = self._document_frequency.get(term, 0) + 1

    def _recompute_average(self) -> None:
        count = len(self._document_length)
        self._average_length = self._total_length / count if count > 0 else 0.0

    def document_frequency(self, term: str) -> int:
        """Number of documents containing term at least once (0 if unseen)"""
        return self._document_frequency.get(term, 0)

    def length(self, doc_id: Hashable) -> int:
        """Token count of a document (0 if unknown)"""
        return self._document_length.get(doc_id, 0)

    def average_length(self) -> float:
        """Average document length; 0.0 for an empty corpus"""
        return self._average_length

    def total_documents(self) -> int:
        return len(self._document_length)

    def term_frequency(self, doc_id: Hashable, term: str) -> int:
        """Occurrences of term in a document's tokenized text (0 if absent)"""
        counts = self._term_frequencies.get(doc_id)
        if counts is None:
            return 0
        return counts.get(term, 0)

    def vocabulary(self) -> List[str]:
        return list(self._document_frequency)

    def snapshot(self) -> dict:
        """Summary of the current statistics (for logging and debugging)"""
        return {
            "total_documents": self.total_documents(),
            "average_document_length": self._average_length,
            "vocabulary_size": len(self._document_frequency),
        }

    def __contains__(self, doc_id: Hashable) -> bool:
        return doc_id in self._document_length

    def __len__(self) -> int:
        return self.total_documents()
