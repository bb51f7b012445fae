"""Word gloss lookup."""

from __future__ import annotations

import json
import string
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from bireader.services.logs import get_logger
from bireader.utils import get_resource_path

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

logger = get_logger(__name__)

#: Characters stripped from both ends of a selection before lookup.
STRIP_CHARS = string.punctuation + string.whitespace + "“”‘’«»"


@dataclass(frozen=True)
class DictionaryEntry:
    """A gloss for a word or phrase."""

    #: Pronunciation, e.g. ``/ðə/``.
    phonetic: str = ""
    #: Part of speech, e.g. ``art.``.
    part_of_speech: str = ""
    #: The translation.
    translation: str = ""
    #: An example sentence, if any.
    example: str | None = None


class Dictionary(Protocol):
    """Anything that can look up a gloss for a text span."""

    def lookup(self, text: str) -> DictionaryEntry | None: ...


def normalize_term(text: str) -> str:
    """
    Normalize a selection for lookup: trim surrounding punctuation and
    whitespace, collapse inner whitespace and lower-case.
    """
    return " ".join(text.strip(STRIP_CHARS).split()).lower()


class GlossaryDictionary:
    """
    An in-memory glossary, by default loaded from the bundled JSON file.

    Args:
        entries: Map of term to entry

    """

    def __init__(self, entries: Mapping[str, DictionaryEntry] | None = None):
        self._entries: dict[str, DictionaryEntry] = {
            normalize_term(term): entry for term, entry in (entries or {}).items()
        }

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def from_json(cls, path: Path | None = None) -> GlossaryDictionary:
        """
        Load a glossary from a JSON object of ``term -> entry fields``.

        Keyword Args:
            path: The JSON file; defaults to the bundled glossary

        Returns:
            The glossary

        """
        path = path or get_resource_path("data/glossary.json")
        with path.open(encoding="utf-8") as fh:
            raw = json.load(fh)
        entries = {
            term: DictionaryEntry(
                phonetic=fields.get("phonetic", ""),
                part_of_speech=fields.get("part_of_speech", ""),
                translation=fields["translation"],
                example=fields.get("example"),
            )
            for term, fields in raw.items()
        }
        logger.debug("glossary loaded", path=str(path), entries=len(entries))
        return cls(entries)

    def add(self, term: str, entry: DictionaryEntry) -> None:
        """Add or replace an entry."""
        self._entries[normalize_term(term)] = entry

    def lookup(self, text: str) -> DictionaryEntry | None:
        """
        Look up a word or phrase.

        Args:
            text: The selected text

        Returns:
            The entry, or ``None`` if there is none

        """
        term = normalize_term(text)
        if not term:
            return None
        return self._entries.get(term)
