"""Credential strategy resolution for AWS clients.

Public API:
- validate() → ValidationResult (every violation, never raises)
- resolve() → credential descriptor, or ConfigurationError
- get_session() / build_session() → boto3.Session
- AuthParameters (settings), Strategy (enum of auth strategies)
- ConfigurationError, CredentialProviderError, Violation, ViolationKind
"""

from .config import AuthParameters, Strategy
from .errors import (
    ConfigurationError,
    CredentialProviderError,
    Violation,
    ViolationKind,
)
from .factory import build_session, get_session
from .models import ValidationResult
from .resolver import resolve, validate

__all__ = [
    "AuthParameters",
    "Strategy",
    "ConfigurationError",
    "CredentialProviderError",
    "Violation",
    "ViolationKind",
    "ValidationResult",
    "build_session",
    "get_session",
    "resolve",
    "validate",
]
