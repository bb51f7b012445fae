"""Document history model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from bireader.db import Base
from bireader.utils import utc_now


class DocumentSummary(Base):
    """
    A history entry for a previously opened document.

    Summaries are persisted independently of paragraph bodies, so an entry can
    outlive the content it describes.
    """

    __tablename__ = "document_history"

    #: The document id.
    id: Mapped[str] = mapped_column(String, primary_key=True)
    #: The display name.
    name: Mapped[str] = mapped_column(String, nullable=False)
    #: When the document was uploaded (naive UTC).
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
    #: Size of the uploaded file in bytes.
    size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    #: ``pdf``, ``txt``, ``docx`` or ``other``.
    kind: Mapped[str] = mapped_column(String, default="other", nullable=False)
    #: Estimated page count.
    page_count: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    #: Number of paragraphs.
    paragraph_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    #: Whether this is one of the bundled demo documents.
    is_demo: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    #: Recency order; higher is newer.  Maintained by the history service.
    sequence: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<DocumentSummary {self.id!r} {self.name!r}>"
