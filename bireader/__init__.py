"""Bilingual Reader: side-by-side source and translation viewer."""

__version__ = "0.4.0"
