"""
CrisisAI Responder - Exception Hierarchy

Structured exceptions for consistent error handling across the service.
All exceptions carry an error code and HTTP status for API responses.
The classifier itself never raises; these are raised by the ingress layer.
"""

from typing import Optional


class CrisisResponderError(Exception):
    """Base exception for all CrisisAI Responder errors."""

    code: str = "UNKNOWN_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(CrisisResponderError):
    """Client input validation error."""
    code = "VALIDATION_ERROR"
    status_code = 400


class MissingInputError(ValidationError):
    """Neither a message nor any image was provided."""
    code = "MISSING_INPUT"


class MissingTranscriptError(ValidationError):
    """Voice submission without a transcript."""
    code = "MISSING_TRANSCRIPT"


class TooManyFilesError(ValidationError):
    """More uploaded files than allowed per request."""
    code = "TOO_MANY_FILES"


class UnsupportedFileTypeError(ValidationError):
    """Uploaded file is not an accepted image type."""
    code = "UNSUPPORTED_FILE_TYPE"
    status_code = 415


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds the size limit."""
    code = "FILE_TOO_LARGE"
    status_code = 413


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(CrisisResponderError):
    """Configuration error."""
    code = "CONFIGURATION_ERROR"
    status_code = 500
