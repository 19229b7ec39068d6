"""
Custom exceptions for PDF Factory.

Every failure the engine can report is one of these. Public engine operations
convert them into a failed :class:`~pdf_factory.types.RewriteOutcome` at the
operation boundary, so callers of the engine only see them when they use the
lower level helpers directly.
"""


class PDFFactoryException(Exception):
    """Base exception for all PDF Factory errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF Factory error occurred."


class SourceUnreadableError(PDFFactoryException):
    """Raised when a source PDF is missing, corrupted or the password is wrong."""

    @property
    def default_message(self) -> str:
        return "Source PDF could not be read."


class MissingRequiredCredentialError(PDFFactoryException):
    """Raised when an owner password is required but was not supplied."""

    @property
    def default_message(self) -> str:
        return "An owner password is required to secure a PDF."


class EncodingMalformedError(PDFFactoryException):
    """Raised when an uploaded document is not valid Base64."""

    @property
    def default_message(self) -> str:
        return "Uploaded PDF is not valid Base64."


class SecurityApplicationError(PDFFactoryException):
    """Raised when the codec refuses to apply an encryption profile."""

    @property
    def default_message(self) -> str:
        return "Security settings could not be applied."


class OutputFinalizeError(PDFFactoryException):
    """Raised when the output document cannot be finalized or written."""

    @property
    def default_message(self) -> str:
        return "Output PDF could not be finalized."
