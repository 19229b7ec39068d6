"""pypdf backend implementation for PDF Factory."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from pypdf import PasswordType, PdfReader, PdfWriter
from pypdf.errors import DependencyError, PdfReadError
from pypdf.generic import DictionaryObject, RectangleObject

from ..exceptions import OutputFinalizeError, SecurityApplicationError, SourceUnreadableError
from ..permissions import to_signed32
from ..types import CipherMode
from .authoring import render_paragraphs
from .base import CipherInfo, DocumentInfo, OutputDocument, PageSize, PDFBackend, SourceDocument


def _resolve(obj: Any) -> Any:
    return obj.get_object() if hasattr(obj, "get_object") else obj


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _read_cipher(encrypt_dict: DictionaryObject) -> CipherInfo:
    version = int(encrypt_dict.get("/V", 0))
    revision = int(encrypt_dict.get("/R", 0))
    length = encrypt_dict.get("/Length")

    method = None
    filters = _resolve(encrypt_dict.get("/CF"))
    stream_filter = encrypt_dict.get("/StmF")
    if filters is not None and stream_filter is not None:
        crypt_filter = _resolve(filters.get(stream_filter))
        if crypt_filter is not None and crypt_filter.get("/CFM") is not None:
            method = str(crypt_filter["/CFM"])
        if length is None and crypt_filter is not None:
            length = crypt_filter.get("/Length")

    return CipherInfo(
        version=version,
        revision=revision,
        length=int(length) if length is not None else None,
        method=method,
    )


@dataclass
class PypdfDocument(SourceDocument):
    reader: Optional[PdfReader] = None

    def page_size(self, number: int) -> PageSize:
        if number < 1 or number > self.num_pages:
            raise SourceUnreadableError(
                f"Page {number} is out of bounds. PDF has {self.num_pages} pages."
            )
        box = self.reader.pages[number - 1].mediabox
        return PageSize(float(box.left), float(box.bottom), float(box.right), float(box.top))

    def get_page(self, number: int) -> Any:
        return self.reader.pages[number - 1]


class PypdfOutput(OutputDocument):
    """Output document assembled with :class:`pypdf.PdfWriter`."""

    def __init__(self, page_size: PageSize) -> None:
        self.page_size = page_size
        self.writer = PdfWriter()
        self._finalized = False

    def set_metadata(
        self,
        *,
        title: Optional[str] = None,
        author: Optional[str] = None,
        subject: Optional[str] = None,
        creator: Optional[str] = None,
        producer: Optional[str] = None,
    ) -> None:
        entries = {
            "/Title": title,
            "/Author": author,
            "/Subject": subject,
            "/Creator": creator,
            "/Producer": producer,
        }
        self.writer.add_metadata({key: value for key, value in entries.items() if value is not None})

    def import_page(self, source: SourceDocument, number: int) -> None:
        if not isinstance(source, PypdfDocument):
            raise TypeError("PypdfOutput can only import pages from PypdfDocument sources")
        page = self.writer.add_page(source.get_page(number))
        # every output page takes the target geometry
        page.mediabox = RectangleObject(self.page_size.as_tuple())

    def add_paragraphs(self, paragraphs: Sequence[str], *, title: Optional[str] = None) -> int:
        rendered = PdfReader(io.BytesIO(render_paragraphs(paragraphs, self.page_size, title=title)))
        for page in rendered.pages:
            self.writer.add_page(page)
        return len(rendered.pages)

    def apply_security(
        self,
        owner_password: str,
        user_password: Optional[str],
        permission_mask: int,
        cipher: CipherMode,
    ) -> None:
        try:
            self.writer.encrypt(
                user_password=user_password or "",
                owner_password=owner_password,
                permissions_flag=permission_mask,
                algorithm=cipher.codec_name,
            )
        except DependencyError as exc:
            raise SecurityApplicationError(
                f"{cipher.codec_name} encryption needs the 'cryptography' package: {exc}"
            ) from exc
        except Exception as exc:  # pragma: no cover - pypdf exceptions vary
            raise SecurityApplicationError(f"Unable to apply {cipher.codec_name} encryption: {exc}") from exc

    def finalize(self) -> bytes:
        if self._finalized:
            raise OutputFinalizeError("Output PDF has already been finalized")
        self._finalized = True
        buffer = io.BytesIO()
        try:
            self.writer.write(buffer)
        except Exception as exc:
            raise OutputFinalizeError(f"Unable to write output PDF: {exc}") from exc
        return buffer.getvalue()


class PypdfBackend(PDFBackend):
    """Backend implementation that uses `pypdf` under the hood."""

    def load(self, data: bytes, password: Optional[str] = None, *, name: str = "<memory>") -> PypdfDocument:
        try:
            reader = PdfReader(io.BytesIO(data))
        except PdfReadError as exc:
            raise SourceUnreadableError(f"Corrupted or invalid PDF file: {name}. Error: {exc}") from exc
        except Exception as exc:
            raise SourceUnreadableError(f"Unexpected error reading PDF: {name}. Error: {exc}") from exc

        encrypted = bool(reader.is_encrypted)
        permission_mask = -1
        cipher = None
        user_password_required = False

        if encrypted:
            try:
                encrypt_dict = _resolve(reader.trailer["/Encrypt"])
                permission_mask = to_signed32(int(encrypt_dict.get("/P", -1)))
                cipher = _read_cipher(encrypt_dict)
                user_password_required = reader.decrypt("") == PasswordType.NOT_DECRYPTED
                if password:
                    if reader.decrypt(password) == PasswordType.NOT_DECRYPTED:
                        raise SourceUnreadableError(f"Incorrect password for encrypted PDF: {name}")
                elif user_password_required:
                    raise SourceUnreadableError(
                        f"PDF is encrypted. Supply a password to process this file: {name}"
                    )
            except SourceUnreadableError:
                raise
            except DependencyError as exc:
                raise SourceUnreadableError(
                    f"Decrypting {name} needs the 'cryptography' package: {exc}"
                ) from exc
            except Exception as exc:
                raise SourceUnreadableError(f"Unable to decrypt PDF: {name}. Error: {exc}") from exc

        try:
            num_pages = len(reader.pages)
            metadata = reader.metadata
        except Exception as exc:
            raise SourceUnreadableError(f"Unable to read PDF structure: {name}. Error: {exc}") from exc

        if num_pages == 0:
            raise SourceUnreadableError(f"PDF has no pages: {name}")

        info = DocumentInfo(
            title=_text(metadata.title) if metadata else None,
            author=_text(metadata.author) if metadata else None,
            subject=_text(metadata.subject) if metadata else None,
            creator=_text(metadata.creator) if metadata else None,
            producer=_text(metadata.producer) if metadata else None,
        )
        version = (reader.pdf_header or "").replace("%PDF-", "").strip()

        return PypdfDocument(
            num_pages=num_pages,
            is_encrypted=encrypted,
            permission_mask=permission_mask,
            cipher=cipher,
            pdf_version=version,
            user_password_required=user_password_required,
            info=info,
            reader=reader,
        )

    def new_output(self, page_size: PageSize) -> PypdfOutput:
        return PypdfOutput(page_size)
