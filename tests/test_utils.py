"""Tests for utility functions."""

from datetime import datetime, timedelta

import pytest

from bireader.utils import (
    estimate_page_count,
    format_file_size,
    get_app_data_path,
    relative_time,
)

NOW = datetime(2024, 5, 10, 15, 0, 0)


@pytest.mark.parametrize(
    ("size", "expected"),
    [(0, "0 B"), (512, "512 B"), (1536, "1.5 KB"), (3 * 1024 * 1024, "3.0 MB")],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


@pytest.mark.parametrize(
    ("age", "expected"),
    [
        (timedelta(seconds=10), "just now"),
        (timedelta(minutes=5), "5 min ago"),
        (timedelta(hours=3), "3 h ago"),
        (timedelta(hours=30), "yesterday"),
        (timedelta(days=4), "4 days ago"),
        (timedelta(days=40), "2024-03-31"),
    ],
)
def test_relative_time(age, expected):
    assert relative_time(NOW - age, NOW) == expected


@pytest.mark.parametrize(("paragraphs", "pages"), [(0, 1), (6, 1), (7, 2), (20, 4)])
def test_estimate_page_count(paragraphs, pages):
    assert estimate_page_count(paragraphs) == pages


def test_app_data_path_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("BIREADER_DATA_PATH", str(tmp_path / "data"))
    path = get_app_data_path()
    assert path == tmp_path / "data"
    assert path.is_dir()
