"""
Exceptions raised by the index rotator
"""


class IndexRotatorError(Exception):
    """Base class for rotator errors"""


class MissingPrimaryIndex(IndexRotatorError):
    """Configuration index or primary pointer document is not available"""


class PrimaryIndexCopyFailure(IndexRotatorError):
    """Primary could not be copied to a secondary entry after all retries"""


class TransientStoreError(IndexRotatorError):
    """
    Store call failed for a reason expected to clear up on its own
    (5xx response, connection refused, timeout)
    """


class DocumentNotFound(IndexRotatorError):
    """Requested document does not exist in the store"""

    def __init__(self, index: str, doc_id: str):
        super().__init__(f"Document {doc_id!r} not found in {index!r}")
        self.index = index
        self.doc_id = doc_id
