"""Paragraph model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

#: Reserved target text meaning "not yet translated".  Distinct from an empty
#: or failed translation.
PENDING_TRANSLATION: Final[str] = "[[pending-translation]]"


class Side(StrEnum):
    """One of the two panes."""

    SOURCE = "source"
    TARGET = "target"

    @property
    def opposite(self) -> Side:
        """The other pane."""
        return Side.TARGET if self == Side.SOURCE else Side.SOURCE


class ParagraphKind(StrEnum):
    """The structural role of a paragraph in a document."""

    TITLE = "title"
    AUTHORS = "authors"
    AFFILIATION = "affiliation"
    KEYWORDS_LABEL = "keywords-label"
    KEYWORDS = "keywords"
    ABSTRACT_LABEL = "abstract-label"
    ABSTRACT = "abstract"
    SECTION = "section"
    BODY = "body"

    @property
    def is_navigable(self) -> bool:
        """
        Whether clicking a paragraph of this kind navigates to its counterpart.

        Only abstract and body paragraphs participate in click navigation.
        """
        return self in (ParagraphKind.ABSTRACT, ParagraphKind.BODY)


@dataclass
class Paragraph:
    """
    One paragraph of a document, in both languages.

    A paragraph has these characteristics:

    - An ``id``: 1-based, unique and stable within its document.  Ids define
      the vertical order shared by both panes.
    - A ``kind`` (see :class:`ParagraphKind`)
    - The ``source_text``
    - The ``target_text``, which may be :data:`PENDING_TRANSLATION`
    """

    #: 1-based paragraph id.
    id: int
    #: Structural role.
    kind: ParagraphKind
    #: Text in the source language.
    source_text: str
    #: Text in the target language, or :data:`PENDING_TRANSLATION`.
    target_text: str = PENDING_TRANSLATION

    def __post_init__(self) -> None:
        if self.id < 1:
            msg = f"Paragraph ids are 1-based, got {self.id}"
            raise ValueError(msg)
        self.kind = ParagraphKind(self.kind)

    @property
    def is_pending(self) -> bool:
        """Whether the translation has not been produced yet."""
        return self.target_text == PENDING_TRANSLATION

    @property
    def is_navigable(self) -> bool:
        """Whether clicks on this paragraph trigger navigation."""
        return self.kind.is_navigable

    def resolve(self, text: str) -> bool:
        """
        Replace the pending sentinel with the final translation.

        A paragraph transitions at most once: calling this on a paragraph that
        already has its translation does nothing.

        Args:
            text: The final translated text

        Returns:
            ``True`` if the paragraph changed, ``False`` otherwise

        """
        if not self.is_pending or text == PENDING_TRANSLATION:
            return False
        self.target_text = text
        return True

    def text_for(self, side: Side) -> str:
        """
        Return the text shown in the pane for ``side``.

        Args:
            side: Which pane

        Returns:
            The source text or the target text

        """
        return self.source_text if side == Side.SOURCE else self.target_text

    def to_dict(self) -> dict[str, str | int]:
        """Serialize the paragraph to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "source": self.source_text,
            "target": self.target_text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Paragraph:
        """
        Build a paragraph from :meth:`to_dict` output.

        A missing ``target`` key yields a pending paragraph.
        """
        return cls(
            id=int(data["id"]),
            kind=ParagraphKind(data["kind"]),
            source_text=data["source"],
            target_text=data.get("target", PENDING_TRANSLATION),
        )
