"""Paragraph layout for documents authored from plain text."""

from __future__ import annotations

import io
from typing import Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from .base import PageSize

DEFAULT_PAGE_SIZE = PageSize.from_dimensions(*A4)
MARGIN = 36


def split_paragraphs(content: str) -> list[str]:
    """Split ``content`` on blank lines, keeping single newlines as line breaks."""

    blocks = [block.strip() for block in content.replace("\r\n", "\n").split("\n\n")]
    return [block for block in blocks if block]


def render_paragraphs(
    paragraphs: Sequence[str],
    page_size: PageSize = DEFAULT_PAGE_SIZE,
    *,
    title: Optional[str] = None,
) -> bytes:
    """Lay out ``paragraphs`` on pages of ``page_size`` and return the PDF bytes."""

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=(page_size.width, page_size.height),
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=title or "",
    )
    styles = getSampleStyleSheet()

    story = []
    for text in paragraphs:
        markup = escape(text).replace("\n", "<br/>")
        story.append(Paragraph(markup, styles["Normal"]))
        story.append(Spacer(1, 6))
    if not story:
        # at least one page
        story.append(Spacer(1, 1))

    doc.build(story)
    return buffer.getvalue()


__all__ = ["DEFAULT_PAGE_SIZE", "render_paragraphs", "split_paragraphs"]
