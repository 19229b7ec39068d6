"""Backend abstractions for PDF Factory."""

from .base import CipherInfo, DocumentInfo, OutputDocument, PageSize, PDFBackend, SourceDocument
from .pypdf_backend import PypdfBackend, PypdfDocument, PypdfOutput

__all__ = [
    "CipherInfo",
    "DocumentInfo",
    "OutputDocument",
    "PDFBackend",
    "PageSize",
    "PypdfBackend",
    "PypdfDocument",
    "PypdfOutput",
    "SourceDocument",
]
