"""Exceptions raised by the BM25 index."""


class BM25Error(Exception):
    """Base class for index errors"""


class DuplicateDocumentError(BM25Error, ValueError):
    """Raised when a document id is already present in the index"""

    def __init__(self, doc_id):
        self.doc_id = doc_id
        super().__init__(f"Document already indexed: {doc_id!r}")
