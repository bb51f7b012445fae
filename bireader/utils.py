"""Utility functions for Bilingual Reader."""

import math
import os
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Final

#: Environment variable overriding the application data directory.
DATA_PATH_ENV: Final[str] = "BIREADER_DATA_PATH"


def get_resource_path(relative_path: str) -> Path:
    """
    Get resource path for bundled application or development.

    Args:
        relative_path: Relative path from the ``bireader`` package directory

    Returns:
        Path to resource file

    """
    if getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS"):
        # Running in PyInstaller bundle
        base_path = Path(sys._MEIPASS) / "bireader"
    else:
        base_path = Path(__file__).parent
    return base_path / relative_path


def get_app_data_path() -> Path:
    """
    Get the path to the application data directory.

    - If ``BIREADER_DATA_PATH`` is set, use it.
    - On Windows, use ``AppData/Local/bireader``.
    - On macOS, use ``~/Library/Application Support/bireader``.
    - On Linux, use ``~/.config/bireader``.
    - If the platform is not supported, raise a ValueError.

    Returns:
        Path to the (created) data directory

    """
    override = os.environ.get(DATA_PATH_ENV)
    if override:
        data_path = Path(override)
    elif sys.platform == "win32":
        data_path = Path.home() / "AppData" / "Local" / "bireader"
    elif sys.platform == "darwin":
        data_path = Path.home() / "Library" / "Application Support" / "bireader"
    elif sys.platform == "linux":
        data_path = Path.home() / ".config" / "bireader"
    else:
        msg = f"Unsupported platform: {sys.platform}"
        raise ValueError(msg)
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path


def utc_now() -> datetime:
    """
    Return the current time as a naive UTC datetime, the form stored in SQLite.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def estimate_page_count(paragraph_count: int, per_page: int = 6) -> int:
    """
    Estimate a page count from a paragraph count.

    Args:
        paragraph_count: Number of paragraphs in the document

    Keyword Args:
        per_page: Paragraphs assumed per page

    Returns:
        At least 1

    """
    return max(1, math.ceil(paragraph_count / per_page))


def format_file_size(size: int) -> str:
    """
    Format a byte count for display.

    Args:
        size: Size in bytes

    Returns:
        ``"512 B"``, ``"1.5 KB"`` or ``"3.4 MB"``

    """
    if size < 1024:  # noqa: PLR2004
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / 1024 / 1024:.1f} MB"


def relative_time(then: datetime, now: datetime | None = None) -> str:
    """
    Describe how long ago ``then`` was.

    Args:
        then: Naive UTC datetime

    Keyword Args:
        now: Naive UTC "now"; defaults to the current time

    Returns:
        A short human readable description

    """
    now = now or utc_now()
    seconds = (now - then).total_seconds()
    if seconds < 60:  # noqa: PLR2004
        return "just now"
    if seconds < 3600:  # noqa: PLR2004
        return f"{int(seconds // 60)} min ago"
    if seconds < 86400:  # noqa: PLR2004
        return f"{int(seconds // 3600)} h ago"
    if seconds < 86400 * 2:
        return "yesterday"
    if seconds < 86400 * 7:
        return f"{int(seconds // 86400)} days ago"
    return then.strftime("%Y-%m-%d")
