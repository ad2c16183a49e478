"""Subtitle listings for a movie, and subtitle archives unpacked to plain text."""

__version__ = "0.3.0"
