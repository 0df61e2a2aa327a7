"""
Exception hierarchy for faqsearch.

Callers catch by type instead of inspecting messages. Storage failures are
always StorageError (or a subclass) with the underlying sqlite3 error chained.
"""


class FaqSearchError(Exception):
    """Base exception for all faqsearch errors."""
    pass


class StorageError(FaqSearchError):
    """
    Error reading from or writing to the embedding store.

    Raised when:
    - The database file cannot be opened
    - Schema creation fails
    - An insert or its commit fails
    - A read fails while enumerating records
    """

    def __init__(self, message: str, operation: str = None):
        super().__init__(message)
        self.operation = operation


class VectorDecodeError(StorageError):
    """A stored vector blob could not be decoded into float32 values."""

    def __init__(self, message: str, byte_length: int = None):
        super().__init__(message, operation="decode")
        self.byte_length = byte_length


class EmbeddingProviderError(FaqSearchError):
    """
    Error obtaining an embedding from a provider.

    Raised when:
    - The provider is unreachable or times out
    - The provider returns a non-200 response
    - The response body has no embedding values
    - An API key is required but missing
    """

    def __init__(self, message: str, provider: str = None, status_code: int = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class FaqFormatError(FaqSearchError):
    """The FAQ source file is missing or unreadable."""
    pass


class ConfigurationError(FaqSearchError):
    """A configuration value is missing or out of its valid range."""
    pass
