"""
Error taxonomy for the mind map pipeline.

Every error that may reach the HTTP layer derives from MindMapError and
carries the status code and public message it maps to.
"""

from typing import Optional


class MindMapError(Exception):
    """Base class for all pipeline errors."""

    status_code: int = 500
    error: str = "Failed to process content"


class ValidationError(MindMapError):
    """Request content is missing or blank."""

    status_code = 400
    error = "Content is required"


class ConfigError(MindMapError):
    """The LLM credential is not configured."""

    error = "Server configuration error"


class ProviderError(MindMapError):
    """The LLM provider call failed (network, auth, quota, bad request)."""

    def __init__(self, provider: str, cause: Exception):
        self.provider = provider
        self.cause_type = type(cause).__name__
        self.details = str(cause)
        super().__init__(f"{provider} call failed: {self.details}")


class ExtractionError(MindMapError):
    """Page content could not be fetched or extracted from a URL."""


class ParseError(MindMapError):
    """An LLM response could not be parsed into a topic tree."""

    def __init__(self, message: str, raw: Optional[str] = None):
        self.raw = raw
        super().__init__(message)
