from __future__ import annotations

from pathlib import Path
from typing import Callable
import sys

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdf_factory.observers import RecordingObserver  # noqa: E402
from pdf_factory.permissions import PermissionSet, encode  # noqa: E402
from pdf_factory.rewriter import RewriteEngine  # noqa: E402

SOURCE_METADATA = {
    "/Title": "Quarterly Report",
    "/Author": "Finance Team",
    "/Subject": "Q3 figures",
    "/Creator": "Acme Writer",
    "/Producer": "Acme PDF Library",
}

PRINT_AND_SCREEN_READERS = PermissionSet(allow_printing=True, allow_screen_readers=True)

PdfBuilder = Callable[..., Path]


@pytest.fixture()
def build_pdf(tmp_path: Path) -> PdfBuilder:
    def _build(
        filename: str,
        *,
        pages: int = 3,
        sizes: list[tuple[float, float]] | None = None,
        metadata: dict[str, str] | None = None,
        owner_password: str | None = None,
        user_password: str = "",
        permissions: PermissionSet | None = None,
        algorithm: str = "AES-128",
    ) -> Path:
        path = tmp_path / filename
        writer = PdfWriter()
        for width, height in sizes or [(300, 400)] * pages:
            writer.add_blank_page(width=width, height=height)
        if metadata:
            writer.add_metadata(metadata)
        if owner_password is not None:
            writer.encrypt(
                user_password=user_password,
                owner_password=owner_password,
                permissions_flag=encode(permissions or PermissionSet()),
                algorithm=algorithm,
            )
        with path.open("wb") as handle:
            writer.write(handle)
        return path

    return _build


@pytest.fixture()
def plain_pdf(build_pdf: PdfBuilder) -> Path:
    return build_pdf("plain.pdf", metadata=SOURCE_METADATA)


@pytest.fixture()
def encrypted_pdf(build_pdf: PdfBuilder) -> Path:
    """Three AES-128 pages, owner password ``pw1``, print and screen readers only."""
    return build_pdf(
        "encrypted.pdf",
        metadata=SOURCE_METADATA,
        owner_password="pw1",
        permissions=PRINT_AND_SCREEN_READERS,
    )


@pytest.fixture()
def user_locked_pdf(build_pdf: PdfBuilder) -> Path:
    return build_pdf(
        "locked.pdf",
        pages=2,
        owner_password="owner-secret",
        user_password="open-me",
        permissions=PermissionSet(allow_copy=True),
        algorithm="RC4-128",
    )


@pytest.fixture()
def recorder() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture()
def engine(recorder: RecordingObserver) -> RewriteEngine:
    return RewriteEngine(observer=recorder)
