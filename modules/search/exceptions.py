"""
Search exceptions.
"""
from shared.domain.exceptions import DomainException


class SearchIndexUnavailableError(DomainException):
    """Raised when the search index cannot serve a request."""

    def __init__(self, message: str = 'Search index is unavailable', operation: str = None):
        super().__init__(message=message, code='SEARCH_INDEX_UNAVAILABLE')
        self.operation = operation
