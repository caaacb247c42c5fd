"""Content extraction and markup-to-text normalization."""
