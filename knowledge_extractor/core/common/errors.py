# File: knowledge_extractor/core/common/errors.py


class KnowledgeExtractorError(Exception):
    """Base class for every error raised by the application."""


class ClientInputError(KnowledgeExtractorError):
    """Malformed or missing request fields. Maps to HTTP 400, never retried."""


class ProviderError(KnowledgeExtractorError):
    """
    Transport, status or parse failure from an analysis provider.
    Absorbed by the resilience wrapper when a fallback exists.
    """


class PersistenceError(KnowledgeExtractorError):
    """Connection, write or read failure in the storage layer. Always surfaced."""


class DecodingError(KnowledgeExtractorError):
    """Stored array data could not be decoded."""
