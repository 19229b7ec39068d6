"""Reading source documents and extracting their security profile."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from .backends import PypdfBackend
from .backends.base import CipherInfo, PDFBackend, SourceDocument
from .exceptions import SourceUnreadableError
from .observers import LoggingObserver, SecurityObserver
from .permissions import decode
from .types import EncryptionAlgorithm, EncryptionLevel, SecurityProfile


def read_source_bytes(locator: str | Path) -> bytes:
    """Read a source PDF fully into memory; the file handle is closed on return."""

    path = Path(locator).expanduser()
    if not path.exists() or not path.is_file():
        raise SourceUnreadableError(f"PDF file not found: {locator}")
    try:
        return path.read_bytes()
    except OSError as exc:
        raise SourceUnreadableError(f"Unable to read PDF file: {locator}. Error: {exc}") from exc


def describe_cipher(cipher: Optional[CipherInfo]) -> Tuple[Optional[EncryptionLevel], EncryptionAlgorithm]:
    """Map a raw security handler description to a key length and cipher family."""

    if cipher is None:
        return None, EncryptionAlgorithm.NONE

    method = (cipher.method or "").lstrip("/").upper()
    if method == "AESV3" or cipher.version == 5:
        return EncryptionLevel.BITS_256, EncryptionAlgorithm.AES
    if method == "AESV2":
        return EncryptionLevel.BITS_128, EncryptionAlgorithm.AES
    if cipher.version == 1:
        return EncryptionLevel.BITS_40, EncryptionAlgorithm.RC4
    if cipher.version in (2, 3, 4):
        length = cipher.length if cipher.length is not None else (128 if cipher.version == 4 else 40)
        # crypt filters state /Length in bytes, the encryption dictionary in bits
        if length <= 32:
            length *= 8
        if length <= 40:
            return EncryptionLevel.BITS_40, EncryptionAlgorithm.RC4
        return EncryptionLevel.BITS_128, EncryptionAlgorithm.RC4
    return EncryptionLevel.BITS_128, EncryptionAlgorithm.RC4


def build_security_profile(document: SourceDocument) -> SecurityProfile:
    """Build the profile of an opened document without modifying it."""

    info = document.info
    if not document.is_encrypted:
        return SecurityProfile(
            encrypted=False,
            pdf_version=document.pdf_version,
            creator=info.creator or "Unknown",
            producer=info.producer or "Unknown",
        )

    level, algorithm = describe_cipher(document.cipher)
    return SecurityProfile(
        encrypted=True,
        encryption_level=level,
        algorithm=algorithm,
        permissions=decode(document.permission_mask, True),
        permission_mask=document.permission_mask,
        owner_password_present=True,
        user_password_present=document.user_password_required,
        pdf_version=document.pdf_version,
        creator=info.creator or "Unknown",
        producer=info.producer or "Unknown",
    )


def open_document(
    locator: str | Path,
    password: Optional[str] = None,
    *,
    backend: Optional[PDFBackend] = None,
) -> SourceDocument:
    """Open ``locator`` with ``password`` through ``backend``."""

    data = read_source_bytes(locator)
    return (backend or PypdfBackend()).load(data, password, name=str(locator))


def extract_security_profile(
    locator: str | Path,
    password: Optional[str] = None,
    *,
    backend: Optional[PDFBackend] = None,
    observer: Optional[SecurityObserver] = None,
) -> SecurityProfile:
    """
    Read the security profile of the PDF at ``locator``.

    Args:
        locator: Path of the PDF
        password: Owner or user password, if the document needs one
        backend: Codec backend, :class:`PypdfBackend` by default
        observer: Receives the ``profile_extracted`` event

    Returns:
        The document's :class:`SecurityProfile`

    Raises:
        SourceUnreadableError: If the file is missing, corrupted or the password is wrong
    """
    document = open_document(locator, password, backend=backend)
    profile = build_security_profile(document)
    (observer or LoggingObserver()).profile_extracted(str(locator), profile)
    return profile


__all__ = [
    "build_security_profile",
    "describe_cipher",
    "extract_security_profile",
    "open_document",
    "read_source_bytes",
]
