"""PDF rewriting built around a pluggable :class:`PDFBackend`.

The engine reads a source document, re-emits its pages into a new container
with de-branded metadata and re-applies, replaces or drops its encryption.
Every public operation returns a :class:`RewriteOutcome`; errors never escape.
"""

from __future__ import annotations

import base64
import binascii
import tempfile
from pathlib import Path
from typing import Optional

from .backends import PypdfBackend
from .backends.authoring import DEFAULT_PAGE_SIZE, split_paragraphs
from .backends.base import OutputDocument, PDFBackend, SourceDocument
from .config import RewriterSettings
from .exceptions import (
    EncodingMalformedError,
    MissingRequiredCredentialError,
    OutputFinalizeError,
    PDFFactoryException,
)
from .observers import LoggingObserver, SecurityObserver
from .permissions import encode
from .policy import EncryptionPolicy
from .reader import build_security_profile, read_source_bytes
from .types import (
    RewriteOutcome,
    RewriteSpec,
    RewriteStage,
    SecurityDisposition,
    SecurityProfile,
    SecuritySettings,
)
from .utils import safe_filename

UPLOAD_DEFAULT_NAME = "upload.pdf"


class _StageTracker:
    """Remembers the last stage an operation reached."""

    def __init__(self, operation: str, observer: SecurityObserver) -> None:
        self.operation = operation
        self.observer = observer
        self.stage = RewriteStage.STARTED

    def advance(self, stage: RewriteStage) -> None:
        self.stage = stage
        self.observer.stage_reached(self.operation, stage)


class RewriteEngine:
    """High-level rewrite and secure operations.

    The engine keeps no per-document state, so one instance may serve
    concurrent calls on distinct files.
    """

    def __init__(
        self,
        backend: Optional[PDFBackend] = None,
        *,
        observer: Optional[SecurityObserver] = None,
        settings: Optional[RewriterSettings] = None,
    ) -> None:
        self.backend: PDFBackend = backend or PypdfBackend()
        self.observer: SecurityObserver = observer or LoggingObserver()
        self.settings = settings or RewriterSettings()
        self.policy = EncryptionPolicy(self.observer)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def extract_security_profile(self, locator: str | Path, password: Optional[str] = None) -> SecurityProfile:
        """Read the security profile of ``locator``; raises :class:`SourceUnreadableError`."""

        document = self.backend.load(read_source_bytes(locator), password, name=str(locator))
        profile = build_security_profile(document)
        self.observer.profile_extracted(str(locator), profile)
        return profile

    # ------------------------------------------------------------------
    # Rewrite of existing documents
    # ------------------------------------------------------------------
    def rewrite_existing(self, spec: RewriteSpec) -> RewriteOutcome:
        """Rewrite ``spec.input_path`` with de-branded metadata.

        Returns the output bytes, or writes them to ``spec.output_path`` when
        one is given and reports the re-read profile of the written file.
        """

        tracker = _StageTracker("rewrite", self.observer)
        try:
            data = read_source_bytes(spec.input_path)
            document = self.backend.load(data, spec.source_password, name=str(spec.input_path))
            tracker.advance(RewriteStage.OPENED)

            original = build_security_profile(document)
            self.observer.profile_extracted(str(spec.input_path), original)
            tracker.advance(RewriteStage.PROFILE_EXTRACTED)

            pdf_bytes = self._process_rewrite(document, spec, original, tracker)

            output_path: Optional[Path] = None
            if spec.output_path is not None:
                output_path = self._write_output(pdf_bytes, spec.output_path)
        except Exception as exc:
            return self._failure("PDF rewrite", tracker, exc)

        verify_password = self._output_owner_password(spec, original)
        new_info = self._read_back(pdf_bytes, verify_password, str(output_path or "<memory>"))

        self.observer.operation_finalized(tracker.operation, len(pdf_bytes))
        return RewriteOutcome(
            success=True,
            message="PDF rewritten successfully",
            pdf_bytes=None if output_path is not None else pdf_bytes,
            output_path=str(output_path) if output_path is not None else None,
            original_security_info=original,
            new_security_info=new_info,
        )

    def _process_rewrite(
        self,
        document: SourceDocument,
        spec: RewriteSpec,
        profile: SecurityProfile,
        tracker: _StageTracker,
    ) -> bytes:
        """Copy every page of ``document`` into a new container and finalize it.

        The first page's geometry is applied to every output page; documents
        with mixed page sizes are not treated specially.
        """

        output = self.backend.new_output(document.page_size(1))
        info = document.info
        output.set_metadata(
            creator=self.settings.rewrite_creator,
            producer=self.settings.producer,
            title=info.title or self.settings.default_title,
            author=info.author or "",
            subject=info.subject or "",
        )
        tracker.advance(RewriteStage.OUTPUT_CREATED)

        if spec.security_disposition is SecurityDisposition.PRESERVE and profile.encrypted:
            self._reapply_security(output, spec, profile)
        tracker.advance(RewriteStage.SECURITY_APPLIED)

        return self._copy_pages_and_finalize(output, document, tracker)

    def upload_and_rewrite(
        self,
        pdf_base64: str,
        file_name: Optional[str] = None,
        *,
        owner_password: Optional[str] = None,
        user_password: Optional[str] = None,
        preserve_security: bool = True,
    ) -> RewriteOutcome:
        """Decode a Base64 upload, stage it to a temporary file and rewrite it."""

        tracker = _StageTracker("upload-and-rewrite", self.observer)
        staging_dir: Optional[Path] = None
        staged: Optional[Path] = None
        try:
            data = decode_upload(pdf_base64)
            staging_dir = Path(tempfile.mkdtemp(prefix="pdf-factory-"))
            staged = staging_dir / safe_filename(file_name, UPLOAD_DEFAULT_NAME)
            staged.write_bytes(data)

            return self.rewrite_existing(
                RewriteSpec(
                    input_path=staged,
                    owner_password=owner_password,
                    user_password=user_password,
                    preserve_security=preserve_security,
                )
            )
        except Exception as exc:
            return self._failure("PDF upload and rewrite", tracker, exc)
        finally:
            self._cleanup(staged, staging_dir)

    # ------------------------------------------------------------------
    # Security built from scratch
    # ------------------------------------------------------------------
    def apply_security(self, source: bytes | str | Path, settings: SecuritySettings) -> RewriteOutcome:
        """Encrypt ``source`` with a freshly built security profile."""

        tracker = _StageTracker("apply-security", self.observer)
        try:
            owner_password = self._require_owner_password(settings)
            if isinstance(source, (bytes, bytearray)):
                data, name = bytes(source), "<memory>"
            else:
                data, name = read_source_bytes(source), str(source)

            document = self.backend.load(data, owner_password, name=name)
            tracker.advance(RewriteStage.OPENED)
            original = build_security_profile(document)
            self.observer.profile_extracted(name, original)
            tracker.advance(RewriteStage.PROFILE_EXTRACTED)

            output = self.backend.new_output(document.page_size(1))
            info = document.info
            output.set_metadata(
                creator=self.settings.security_creator,
                producer=self.settings.producer,
                title=info.title,
                author=info.author,
                subject=info.subject,
            )
            tracker.advance(RewriteStage.OUTPUT_CREATED)

            self._apply_new_security(output, settings, owner_password)
            tracker.advance(RewriteStage.SECURITY_APPLIED)

            pdf_bytes = self._copy_pages_and_finalize(output, document, tracker)
        except Exception as exc:
            return self._failure("Applying security settings", tracker, exc)

        new_info = self._read_back(pdf_bytes, owner_password, "<memory>")
        self.observer.operation_finalized(tracker.operation, len(pdf_bytes))
        return RewriteOutcome(
            success=True,
            message="Security settings applied successfully",
            pdf_bytes=pdf_bytes,
            original_security_info=original,
            new_security_info=new_info,
        )

    def create_secured(
        self,
        title: Optional[str],
        content: Optional[str],
        settings: SecuritySettings,
    ) -> RewriteOutcome:
        """Author a new document from ``title`` and ``content`` and encrypt it.

        An owner password is mandatory; without one the request is rejected
        before any document is created.
        """

        tracker = _StageTracker("create-secured", self.observer)
        try:
            owner_password = self._require_owner_password(settings)
            document_title = title or self.settings.secured_title
            paragraphs = split_paragraphs(content or self.settings.secured_content)

            output = self.backend.new_output(DEFAULT_PAGE_SIZE)
            output.set_metadata(
                title=document_title,
                creator=self.settings.security_creator,
                producer=self.settings.producer,
            )
            tracker.advance(RewriteStage.OUTPUT_CREATED)

            self._apply_new_security(output, settings, owner_password)
            tracker.advance(RewriteStage.SECURITY_APPLIED)

            output.add_paragraphs(paragraphs, title=document_title)
            tracker.advance(RewriteStage.PAGES_COPIED)

            pdf_bytes = output.finalize()
            tracker.advance(RewriteStage.FINALIZED)
        except Exception as exc:
            return self._failure("Creating secured PDF", tracker, exc)

        new_info = self._read_back(pdf_bytes, owner_password, "<memory>")
        self.observer.operation_finalized(tracker.operation, len(pdf_bytes))
        return RewriteOutcome(
            success=True,
            message="Secured PDF created successfully",
            pdf_bytes=pdf_bytes,
            new_security_info=new_info,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _copy_pages_and_finalize(
        self, output: OutputDocument, document: SourceDocument, tracker: _StageTracker
    ) -> bytes:
        for number in range(1, document.num_pages + 1):
            output.import_page(document, number)
        tracker.advance(RewriteStage.PAGES_COPIED)

        pdf_bytes = output.finalize()
        tracker.advance(RewriteStage.FINALIZED)
        return pdf_bytes

    def _output_owner_password(self, spec: RewriteSpec, profile: SecurityProfile) -> Optional[str]:
        owner_password = spec.output_owner_password
        if owner_password:
            return owner_password
        if spec.security_disposition is SecurityDisposition.PRESERVE and profile.encrypted:
            return self.settings.default_owner_password
        return None

    def _reapply_security(self, output: OutputDocument, spec: RewriteSpec, profile: SecurityProfile) -> None:
        owner_password = spec.output_owner_password
        if not owner_password:
            self.observer.owner_password_substituted("rewrite")
            owner_password = self.settings.default_owner_password

        cipher = self.policy.resolve_from_profile(profile)
        # the source mask is reused as-is, reserved bits included
        output.apply_security(owner_password, spec.output_user_password, profile.permission_mask, cipher)

    def _apply_new_security(self, output: OutputDocument, settings: SecuritySettings, owner_password: str) -> None:
        mask = encode(settings.permissions)
        cipher = self.policy.resolve(settings.encryption_type)
        output.apply_security(owner_password, settings.user_password, mask, cipher)

    @staticmethod
    def _require_owner_password(settings: SecuritySettings) -> str:
        if not settings.owner_password:
            raise MissingRequiredCredentialError("Owner password must not be empty")
        return settings.owner_password

    def _write_output(self, pdf_bytes: bytes, destination: str | Path) -> Path:
        path = Path(destination).expanduser()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as handle:
                handle.write(pdf_bytes)
        except OSError as exc:
            self._remove_quietly(path)
            raise OutputFinalizeError(f"Unable to write PDF to {path}: {exc}") from exc
        return path

    def _read_back(self, pdf_bytes: bytes, password: Optional[str], target: str) -> Optional[SecurityProfile]:
        try:
            document = self.backend.load(pdf_bytes, password, name=target)
            return build_security_profile(document)
        except Exception as exc:
            self.observer.verification_skipped(target, exc)
            return None

    def _failure(self, action: str, tracker: _StageTracker, exc: Exception) -> RewriteOutcome:
        self.observer.operation_failed(tracker.operation, tracker.stage, exc)
        message = exc.message if isinstance(exc, PDFFactoryException) else str(exc)
        return RewriteOutcome(
            success=False,
            message=f"{action} failed after stage '{tracker.stage.value}': {message}",
            error_type=type(exc).__name__,
        )

    def _cleanup(self, staged: Optional[Path], staging_dir: Optional[Path]) -> None:
        if staging_dir is None:
            return
        # only the staged file inside the private directory is ever removed
        if staged is not None and staged.resolve().parent != staging_dir.resolve():
            staged = None
        for target, remove in ((staged, Path.unlink), (staging_dir, Path.rmdir)):
            if target is None or not target.exists():
                continue
            try:
                remove(target)
            except OSError as exc:
                self.observer.cleanup_failed(str(target), exc)

    def _remove_quietly(self, path: Path) -> None:
        try:
            if path.exists():
                path.unlink()
        except OSError as exc:
            self.observer.cleanup_failed(str(path), exc)


def decode_upload(pdf_base64: Optional[str]) -> bytes:
    """Strictly decode a Base64 payload, ignoring embedded whitespace."""

    if not pdf_base64 or not isinstance(pdf_base64, str):
        raise EncodingMalformedError("Uploaded PDF payload is empty")
    try:
        data = base64.b64decode("".join(pdf_base64.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise EncodingMalformedError(f"Uploaded PDF is not valid Base64: {exc}") from exc
    if not data:
        raise EncodingMalformedError("Uploaded PDF payload is empty")
    return data


def rewrite_pdf(
    input_path: str | Path,
    output_path: str | Path | None = None,
    **options,
) -> RewriteOutcome:
    """Convenience wrapper around :meth:`RewriteEngine.rewrite_existing`."""

    return RewriteEngine().rewrite_existing(RewriteSpec(input_path=input_path, output_path=output_path, **options))


def create_secured_pdf(
    title: Optional[str],
    content: Optional[str],
    settings: SecuritySettings,
) -> RewriteOutcome:
    """Convenience wrapper around :meth:`RewriteEngine.create_secured`."""

    return RewriteEngine().create_secured(title, content, settings)


__all__ = [
    "RewriteEngine",
    "create_secured_pdf",
    "decode_upload",
    "rewrite_pdf",
]
