"""Spoken pronunciation of looked-up words."""

from __future__ import annotations

from typing import Final

from PySide6.QtCore import QLocale, QObject
from PySide6.QtTextToSpeech import QTextToSpeech

from bireader.services.logs import get_logger

logger = get_logger(__name__)

#: Locale words are spoken in.
SPEECH_LOCALE: Final[str] = "en_US"


class Pronouncer(QObject):
    """
    Speaks words with the platform's text-to-speech engine.

    The engine is created on first use, so windows that never pronounce a word
    never load a speech backend.

    Args:
        parent: The parent object (optional)

    """

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._engine: QTextToSpeech | None = None

    @staticmethod
    def available() -> bool:
        """Whether any speech engine is installed."""
        return bool(QTextToSpeech.availableEngines())

    @property
    def engine(self) -> QTextToSpeech:
        """The speech engine, created on first access."""
        if self._engine is None:
            self._engine = QTextToSpeech(self)
            self._engine.setLocale(QLocale(SPEECH_LOCALE))
        return self._engine

    def speak(self, text: str) -> bool:
        """
        Say ``text`` aloud, interrupting anything still being spoken.

        Args:
            text: The word or phrase

        Returns:
            Whether the text was handed to the engine

        """
        text = text.strip()
        if not text:
            return False
        engine = self.engine
        if engine.state() == QTextToSpeech.State.Error:
            logger.warning("speech engine unavailable", error=engine.errorString())
            return False
        engine.stop()
        engine.say(text)
        logger.debug("pronouncing", text=text)
        return True
