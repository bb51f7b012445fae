"""Turning uploaded files into documents."""

from __future__ import annotations

import io
import json
import re
import uuid
import zipfile
from functools import cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

import docx
from docx.opc.exceptions import PackageNotFoundError

from bireader.exc import FileTooLarge, UnsupportedFileType
from bireader.models import (
    PENDING_TRANSLATION,
    Document,
    DocumentKind,
    Paragraph,
    ParagraphKind,
)
from bireader.services.logs import get_logger
from bireader.utils import get_resource_path

if TYPE_CHECKING:
    from bireader.models import DocumentSummary

logger = get_logger(__name__)

#: File extensions that can be uploaded.
ACCEPTED_SUFFIXES: Final[tuple[str, ...]] = (".pdf", ".txt", ".docx")
#: Largest accepted upload, in bytes.
MAX_UPLOAD_BYTES: Final[int] = 50 * 1024 * 1024
#: Paragraphs this short or shorter are dropped from plain text input.
MIN_PARAGRAPH_LENGTH: Final[int] = 10
#: Paragraph separator in plain text: one or more blank lines.
PARAGRAPH_BREAK: Final[re.Pattern[str]] = re.compile(r"\n\n+")
#: Shown in both panes when a history entry's content is gone.
UNAVAILABLE_TEXT: Final[str] = (
    "The content of this document is no longer in memory. "
    "Upload the file again to view its translation."
)
#: Id of the bundled article that is open at startup.
SAMPLE_DOCUMENT_ID: Final[str] = "demo-llm-2024"


@cache
def _sample_data() -> dict[str, Any]:
    with get_resource_path("data/sample_article.json").open(encoding="utf-8") as fh:
        return json.load(fh)


def demo_history() -> list[dict[str, Any]]:
    """
    The bundled demo history entries.  ``age_minutes`` says how long before
    "now" each was uploaded.
    """
    return [dict(entry) for entry in _sample_data()["demo_history"]]


def demo_document_ids() -> frozenset[str]:
    """Ids of the demo documents, which always open the bundled article."""
    return frozenset(entry["id"] for entry in _sample_data()["demo_history"])


def sample_document(
    document_id: str = SAMPLE_DOCUMENT_ID,
    display_name: str | None = None,
    *,
    translated: bool = True,
    size_bytes: int = 0,
) -> Document:
    """
    Build a fresh copy of the bundled article.

    Args:
        document_id: Id for the new document
        display_name: Name to show; defaults to the article's file name

    Keyword Args:
        translated: If ``False``, every paragraph is pending
        size_bytes: Recorded upload size

    Returns:
        A new document

    """
    data = _sample_data()
    paragraphs = [Paragraph.from_dict(p) for p in data["paragraphs"]]
    if not translated:
        for paragraph in paragraphs:
            paragraph.target_text = PENDING_TRANSLATION
    return Document(
        id=document_id,
        display_name=display_name or data["display_name"],
        paragraphs=paragraphs,
        size_bytes=size_bytes,
        kind=DocumentKind.from_filename(display_name or data["display_name"]),
    )


def new_document_id() -> str:
    """A fresh, opaque document id."""
    return f"doc-{uuid.uuid4().hex}"


def validate_upload(filename: str, size: int) -> DocumentKind:
    """
    Check that a file may be uploaded.

    Args:
        filename: The file name
        size: The file size in bytes

    Raises:
        UnsupportedFileType: The extension is not accepted
        FileTooLarge: The file is larger than :data:`MAX_UPLOAD_BYTES`

    Returns:
        The document kind

    """
    if not filename.lower().endswith(ACCEPTED_SUFFIXES):
        raise UnsupportedFileType(filename, ACCEPTED_SUFFIXES)
    if size > MAX_UPLOAD_BYTES:
        raise FileTooLarge(filename, size, MAX_UPLOAD_BYTES)
    return DocumentKind.from_filename(filename)


def split_paragraphs(text: str) -> list[str]:
    """
    Split plain text on blank lines, keeping trimmed paragraphs longer than
    :data:`MIN_PARAGRAPH_LENGTH` characters.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    chunks = (chunk.strip() for chunk in PARAGRAPH_BREAK.split(text))
    return [chunk for chunk in chunks if len(chunk) > MIN_PARAGRAPH_LENGTH]


def _docx_paragraphs(data: bytes) -> list[str]:
    document = docx.Document(io.BytesIO(data))
    texts = (p.text.strip() for p in document.paragraphs)
    return [text for text in texts if len(text) > MIN_PARAGRAPH_LENGTH]


def _body_document(
    document_id: str, name: str, texts: list[str], size: int, kind: DocumentKind
) -> Document:
    return Document(
        id=document_id,
        display_name=name,
        paragraphs=[
            Paragraph(id=i, kind=ParagraphKind.BODY, source_text=text)
            for i, text in enumerate(texts, start=1)
        ],
        size_bytes=size,
        kind=kind,
    )


def ingest_bytes(name: str, data: bytes, document_id: str | None = None) -> Document:
    """
    Build a document from uploaded file contents.

    - Plain text is split on blank lines into ``body`` paragraphs
    - Word documents contribute one ``body`` paragraph per non-trivial
      paragraph
    - Anything else is shown as the bundled stand-in article

    Every target text starts out pending.  Input that cannot be read, or that
    contains no usable paragraph, falls back to the stand-in article.

    Args:
        name: The file name
        data: The file contents

    Keyword Args:
        document_id: Id for the document; generated when omitted

    Returns:
        The new document

    """
    document_id = document_id or new_document_id()
    kind = DocumentKind.from_filename(name)
    texts: list[str] = []
    try:
        if kind == DocumentKind.TXT:
            texts = split_paragraphs(data.decode("utf-8"))
        elif kind == DocumentKind.DOCX:
            texts = _docx_paragraphs(data)
        else:
            return sample_document(
                document_id, name, translated=False, size_bytes=len(data)
            )
    except (UnicodeDecodeError, PackageNotFoundError, zipfile.BadZipFile, KeyError) as e:
        logger.warning(
            "could not read upload, showing stand-in content",
            filename=name,
            error=str(e),
        )
        return sample_document(document_id, name, translated=False, size_bytes=len(data))
    if not texts:
        logger.warning("upload has no usable paragraphs", filename=name)
        return sample_document(document_id, name, translated=False, size_bytes=len(data))
    logger.info("upload ingested", filename=name, paragraphs=len(texts))
    return _body_document(document_id, name, texts, len(data), kind)


def ingest(path: Path) -> Document:
    """
    Validate and ingest a file from disk.

    Args:
        path: The file

    Raises:
        UnsupportedFileType: The extension is not accepted
        FileTooLarge: The file is too large

    Returns:
        The new document

    """
    path = Path(path)
    validate_upload(path.name, path.stat().st_size)
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.warning("could not read upload", path=str(path), error=str(e))
        return sample_document(new_document_id(), path.name, translated=False)
    return ingest_bytes(path.name, data)


def unavailable_document(summary: DocumentSummary) -> Document:
    """
    The placeholder shown for a history entry whose content is gone.

    Args:
        summary: The history entry

    Returns:
        A single-paragraph document with the same id and name

    """
    return Document(
        id=summary.id,
        display_name=summary.name,
        paragraphs=[
            Paragraph(
                id=1,
                kind=ParagraphKind.BODY,
                source_text=UNAVAILABLE_TEXT,
                target_text=UNAVAILABLE_TEXT,
            )
        ],
        size_bytes=summary.size,
        kind=DocumentKind(summary.kind),
    )
