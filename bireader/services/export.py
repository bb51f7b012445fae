"""Export of the open document in several formats."""

from __future__ import annotations

import html
import io
import re
from datetime import date
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from docx import Document as DocxDocument
from docx.enum.section import WD_ORIENT
from docx.shared import Inches, Pt

from bireader.exc import UnknownExportFormat
from bireader.models import ParagraphKind
from bireader.services.logs import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from docx.document import Document as DocumentObject

    from bireader.models import Paragraph

logger = get_logger(__name__)

#: Upload extensions stripped from the document name in export file names.
UPLOAD_SUFFIX: Final[re.Pattern[str]] = re.compile(r"\.(pdf|txt|docx)$", re.IGNORECASE)
#: Separator between entries of a bilingual text export.
RULE: Final[str] = "-" * 40
#: Shown in place of a translation that has not arrived yet.
PENDING_PLACEHOLDER: Final[str] = "[...]"


class ExportFormat(StrEnum):
    TXT = "txt"
    HTML = "html"
    MD = "md"
    DOCX = "docx"


class ExportMode(StrEnum):
    """Which side(s) of the document to export."""

    BILINGUAL = "bilingual"
    TRANSLATION_ONLY = "translation-only"
    SOURCE_ONLY = "source-only"


def export_filename(document_name: str, fmt: ExportFormat | str) -> str:
    """
    Suggested file name for an export.

    Args:
        document_name: The display name of the document
        fmt: The export format

    Returns:
        ``<name without upload extension>_translation.<fmt>``

    """
    base = UPLOAD_SUFFIX.sub("", document_name)
    return f"{base}_translation.{_format(fmt).value}"


def _format(fmt: ExportFormat | str) -> ExportFormat:
    try:
        return ExportFormat(fmt)
    except ValueError:
        raise UnknownExportFormat(str(fmt)) from None


def _mode(mode: ExportMode | str) -> ExportMode:
    try:
        return ExportMode(mode)
    except ValueError:
        raise UnknownExportFormat(str(mode)) from None


def _target_text(paragraph: Paragraph) -> str:
    return PENDING_PLACEHOLDER if paragraph.is_pending else paragraph.target_text


class ExportService:
    """
    Renders the abstract and body paragraphs of a document to text, HTML,
    Markdown or a Word document.

    Headings, author lines and the like are not exported, except that the
    Markdown heading is taken from the title paragraph.  Exported paragraphs
    are numbered from 1.

    Keyword Args:
        today: The date stamped on exports; defaults to the current date

    """

    def __init__(self, today: date | None = None) -> None:
        self.today = today

    @property
    def date_label(self) -> str:
        return (self.today or date.today()).isoformat()  # noqa: DTZ011

    @staticmethod
    def exported_paragraphs(paragraphs: Sequence[Paragraph]) -> list[Paragraph]:
        """The paragraphs that take part in an export, in order."""
        return [
            p
            for p in paragraphs
            if p.kind in (ParagraphKind.ABSTRACT, ParagraphKind.BODY)
        ]

    def export(
        self,
        paragraphs: Sequence[Paragraph],
        mode: ExportMode | str,
        fmt: ExportFormat | str,
        document_name: str,
    ) -> str | bytes:
        """
        Render an export.

        Args:
            paragraphs: All paragraphs of the document
            mode: Which side(s) to export
            fmt: The output format
            document_name: The display name of the document

        Raises:
            UnknownExportFormat: ``mode`` or ``fmt`` is not supported

        Returns:
            The rendered text, or the bytes of the Word document

        """
        mode = _mode(mode)
        fmt = _format(fmt)
        if fmt == ExportFormat.TXT:
            return self.to_text(paragraphs, mode, document_name)
        if fmt == ExportFormat.HTML:
            return self.to_html(paragraphs, mode, document_name)
        if fmt == ExportFormat.MD:
            return self.to_markdown(paragraphs, mode, document_name)
        buffer = io.BytesIO()
        self.to_docx(paragraphs, mode, document_name).save(buffer)
        return buffer.getvalue()

    def save(  # noqa: PLR0913
        self,
        output_path: Path,
        paragraphs: Sequence[Paragraph],
        mode: ExportMode | str,
        fmt: ExportFormat | str,
        document_name: str,
    ) -> bool:
        """
        Render an export and write it to ``output_path``.

        Raises:
            UnknownExportFormat: ``mode`` or ``fmt`` is not supported

        Returns:
            True if successful, False otherwise

        """
        content = self.export(paragraphs, mode, fmt, document_name)
        try:
            if isinstance(content, bytes):
                output_path.write_bytes(content)
            else:
                output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error("export failed", path=str(output_path), error=str(e))
            return False
        logger.info("document exported", path=str(output_path), format=str(fmt))
        return True

    # ------------------------------------------------------------
    # Renderers
    # ------------------------------------------------------------

    def to_text(
        self, paragraphs: Sequence[Paragraph], mode: ExportMode, document_name: str
    ) -> str:
        """Plain text, one numbered block per paragraph."""
        banner = "=" * 50
        out = [
            f"{banner}\nBilingual translation\nDocument: {document_name}\n"
            f"Date: {self.date_label}\n{banner}\n"
        ]
        for n, p in enumerate(self.exported_paragraphs(paragraphs), start=1):
            if mode == ExportMode.BILINGUAL:
                out.append(
                    f"[{n}] Original\n{p.source_text}\n\n"
                    f"[{n}] Translation\n{_target_text(p)}\n\n{RULE}\n"
                )
            elif mode == ExportMode.TRANSLATION_ONLY:
                out.append(f"[{n}]\n{_target_text(p)}\n")
            else:
                out.append(f"[{n}]\n{p.source_text}\n")
        return "\n".join(out)

    def to_html(
        self, paragraphs: Sequence[Paragraph], mode: ExportMode, document_name: str
    ) -> str:
        """A standalone HTML page with a one or two column table."""
        exported = self.exported_paragraphs(paragraphs)
        rows = []
        for p in exported:
            source = html.escape(p.source_text)
            target = html.escape(_target_text(p))
            if mode == ExportMode.BILINGUAL:
                rows.append(
                    f'<tr><td class="source">{source}</td>'
                    f'<td class="target">{target}</td></tr>'
                )
            elif mode == ExportMode.TRANSLATION_ONLY:
                rows.append(f'<tr><td class="target">{target}</td></tr>')
            else:
                rows.append(f'<tr><td class="source">{source}</td></tr>')
        if mode == ExportMode.BILINGUAL:
            headers = "<th>Original</th><th>Translation</th>"
        elif mode == ExportMode.TRANSLATION_ONLY:
            headers = "<th>Translation</th>"
        else:
            headers = "<th>Original</th>"
        name = html.escape(document_name)
        return (
            "<!DOCTYPE html>\n"
            '<html>\n<head>\n<meta charset="UTF-8">\n'
            f"<title>{name} - translation</title>\n"
            "<style>\n"
            "  body { font-family: system-ui, sans-serif; margin: 24px; }\n"
            "  table { width: 100%; border-collapse: collapse; }\n"
            "  th, td { padding: 12px 16px; text-align: left; vertical-align: top;"
            " border-bottom: 1px solid #e5e7eb; line-height: 1.8; }\n"
            "  td.target { background: #f8f9ff; }\n"
            "</style>\n</head>\n<body>\n"
            f"<h1>{name}</h1>\n"
            f"<p>Date: {self.date_label} &middot; {len(exported)} paragraphs</p>\n"
            f"<table>\n<thead><tr>{headers}</tr></thead>\n"
            f"<tbody>\n{chr(10).join(rows)}\n</tbody>\n</table>\n"
            "</body>\n</html>\n"
        )

    def to_markdown(
        self, paragraphs: Sequence[Paragraph], mode: ExportMode, document_name: str
    ) -> str:
        """
        Markdown, headed by the title paragraph (its translation in
        translation-only mode), or by the document name if there is no title.
        """
        exported = self.exported_paragraphs(paragraphs)
        title = next((p for p in paragraphs if p.kind == ParagraphKind.TITLE), None)
        if title is None:
            heading = document_name
        elif mode == ExportMode.TRANSLATION_ONLY:
            heading = title.target_text
        else:
            heading = title.source_text
        out = (
            f"# {heading}\n\n"
            f"> **Document:** {document_name}  \n"
            f"> **Date:** {self.date_label}  \n"
            f"> **{len(exported)} paragraphs**\n\n---\n\n"
        )
        for n, p in enumerate(exported, start=1):
            if mode == ExportMode.BILINGUAL:
                out += (
                    f"### Paragraph {n}\n\n**Original:**\n\n{p.source_text}\n\n"
                    f"**Translation:**\n\n{_target_text(p)}\n\n---\n\n"
                )
            elif mode == ExportMode.TRANSLATION_ONLY:
                out += f"{_target_text(p)}\n\n"
            else:
                out += f"{p.source_text}\n\n"
        return out

    def to_docx(
        self, paragraphs: Sequence[Paragraph], mode: ExportMode, document_name: str
    ) -> DocumentObject:
        """
        A Word document.  Bilingual exports are a two column table on
        landscape pages; single-side exports are numbered paragraphs.
        """
        doc: DocumentObject = DocxDocument()
        style = doc.styles["Normal"]
        style.font.size = Pt(11)  # type: ignore[attr-defined]
        doc.add_heading(document_name, level=1)
        doc.add_paragraph(f"Date: {self.date_label}")
        exported = self.exported_paragraphs(paragraphs)

        if mode != ExportMode.BILINGUAL:
            for n, p in enumerate(exported, start=1):
                text = (
                    _target_text(p)
                    if mode == ExportMode.TRANSLATION_ONLY
                    else p.source_text
                )
                para = doc.add_paragraph()
                para.add_run(f"[{n}] ").bold = True
                para.add_run(text)
            return doc

        # In python-docx, to swap to landscape we must swap height and width
        section = doc.sections[0]
        section.page_width, section.page_height = section.page_height, section.page_width
        section.orientation = WD_ORIENT.LANDSCAPE
        section.top_margin = Inches(0.5)
        section.bottom_margin = Inches(0.5)
        section.left_margin = Inches(0.5)
        section.right_margin = Inches(0.5)

        table = doc.add_table(rows=1, cols=2)
        table.autofit = False
        # Page width is 11 inches, margins 0.5 each -> 10 inches available
        col_width = Inches(5.0)
        header = table.rows[0].cells
        for cell, label in zip(header, ("Original", "Translation"), strict=True):
            cell.width = col_width
            cell.paragraphs[0].add_run(label).bold = True
        for p in exported:
            cells = table.add_row().cells
            cells[0].width = col_width
            cells[1].width = col_width
            cells[0].paragraphs[0].add_run(p.source_text)
            target_run = cells[1].paragraphs[0].add_run(_target_text(p))
            if p.is_pending:
                target_run.font.italic = True
        return doc
