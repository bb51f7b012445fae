"""User interface for Bilingual Reader."""
