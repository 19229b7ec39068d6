"""
PDF Factory - Rewrite, de-brand and secure PDF documents.

This library re-emits existing PDFs into fresh containers with neutral
metadata while preserving, replacing or removing their encryption, and
authors new password-protected documents from plain text.

Quick Start:
    >>> from pdf_factory import RewriteEngine, RewriteSpec
    >>> engine = RewriteEngine()
    >>> outcome = engine.rewrite_existing(RewriteSpec("input.pdf", "output.pdf"))
    >>> outcome.success
    True

Main Classes:
    - RewriteEngine: Rewrite, secure and create operations
    - EncryptionPolicy: Maps requested or inherited strength to a cipher mode

Data Classes:
    - PermissionSet: Eight user capabilities
    - SecurityProfile: Protection state of a document
    - RewriteSpec: Rewrite request
    - SecuritySettings: Security built from scratch
    - RewriteOutcome: Result of every engine operation

Exceptions:
    - PDFFactoryException: Base exception
    - SourceUnreadableError: Missing, corrupted or locked source
    - MissingRequiredCredentialError: Owner password missing
    - EncodingMalformedError: Upload is not valid Base64
    - SecurityApplicationError: Encryption could not be applied
    - OutputFinalizeError: Output could not be written

For CLI usage, use the 'pdf-factory' command after installation.
"""

# Core classes
from pdf_factory.rewriter import RewriteEngine, create_secured_pdf, decode_upload, rewrite_pdf
from pdf_factory.policy import EncryptionPolicy, resolve_cipher, resolve_cipher_from_profile
from pdf_factory.reader import extract_security_profile

# Data types
from pdf_factory.permissions import PermissionSet, decode, encode, is_affirmative
from pdf_factory.types import (
    CipherMode,
    EncryptionAlgorithm,
    EncryptionLevel,
    RewriteOutcome,
    RewriteSpec,
    RewriteStage,
    SecurityDisposition,
    SecurityProfile,
    SecuritySettings,
)
from pdf_factory.config import RewriterSettings
from pdf_factory.observers import LoggingObserver, RecordingObserver, SecurityObserver

# Exceptions
from pdf_factory.exceptions import (
    PDFFactoryException,
    SourceUnreadableError,
    MissingRequiredCredentialError,
    EncodingMalformedError,
    SecurityApplicationError,
    OutputFinalizeError,
)

__version__ = "1.0.0"
__author__ = "PDF Factory Contributors"
__license__ = "MIT"

__all__ = [
    # Main classes
    "RewriteEngine",
    "EncryptionPolicy",
    "RewriterSettings",
    # Operations
    "create_secured_pdf",
    "decode_upload",
    "extract_security_profile",
    "resolve_cipher",
    "resolve_cipher_from_profile",
    "rewrite_pdf",
    # Permissions
    "PermissionSet",
    "decode",
    "encode",
    "is_affirmative",
    # Data types
    "CipherMode",
    "EncryptionAlgorithm",
    "EncryptionLevel",
    "RewriteOutcome",
    "RewriteSpec",
    "RewriteStage",
    "SecurityDisposition",
    "SecurityProfile",
    "SecuritySettings",
    # Observers
    "LoggingObserver",
    "RecordingObserver",
    "SecurityObserver",
    # Exceptions
    "PDFFactoryException",
    "SourceUnreadableError",
    "MissingRequiredCredentialError",
    "EncodingMalformedError",
    "SecurityApplicationError",
    "OutputFinalizeError",
    # Version info
    "__version__",
]
