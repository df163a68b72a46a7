"""PhotoShelf: a small, locally persisted gallery of PNG and JPEG images."""

__version__ = "0.1.0"
