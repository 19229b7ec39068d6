"""Backend protocol for PDF codec operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from ..types import CipherMode


@dataclass(frozen=True)
class PageSize:
    """Page geometry as a PDF rectangle in points."""

    left: float
    bottom: float
    right: float
    top: float

    @classmethod
    def from_dimensions(cls, width: float, height: float) -> "PageSize":
        return cls(0.0, 0.0, float(width), float(height))

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.left, self.bottom, self.right, self.top)


@dataclass(frozen=True)
class CipherInfo:
    """Raw description of a standard security handler."""

    version: int
    revision: int
    length: Optional[int] = None
    method: Optional[str] = None


@dataclass(frozen=True)
class DocumentInfo:
    """Entries of the document information dictionary."""

    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None


@dataclass
class SourceDocument:
    """Represents an opened source PDF with backend-specific helpers."""

    num_pages: int
    is_encrypted: bool = False
    permission_mask: int = -1
    cipher: Optional[CipherInfo] = None
    pdf_version: str = ""
    user_password_required: bool = False
    info: DocumentInfo = field(default_factory=DocumentInfo)

    def page_size(self, number: int) -> PageSize:
        """Return the geometry of 1-indexed page ``number``."""
        raise NotImplementedError


class OutputDocument:
    """A new PDF being assembled. Usable once: :meth:`finalize` ends it."""

    page_size: PageSize

    def set_metadata(
        self,
        *,
        title: Optional[str] = None,
        author: Optional[str] = None,
        subject: Optional[str] = None,
        creator: Optional[str] = None,
        producer: Optional[str] = None,
    ) -> None:
        raise NotImplementedError

    def import_page(self, source: SourceDocument, number: int) -> None:
        raise NotImplementedError

    def add_paragraphs(self, paragraphs: Sequence[str], *, title: Optional[str] = None) -> int:
        raise NotImplementedError

    def apply_security(
        self,
        owner_password: str,
        user_password: Optional[str],
        permission_mask: int,
        cipher: CipherMode,
    ) -> None:
        raise NotImplementedError

    def finalize(self) -> bytes:
        raise NotImplementedError


class PDFBackend(Protocol):
    """Protocol defining the codec operations the engine drives."""

    def load(self, data: bytes, password: Optional[str] = None, *, name: str = "<memory>") -> SourceDocument:
        """Open a PDF from bytes, decrypting it with ``password`` when needed."""

    def new_output(self, page_size: PageSize) -> OutputDocument:
        """Return an empty output document targeting ``page_size``."""
