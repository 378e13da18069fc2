"""Gather every raw file a CoD4 asset depends on into a mod folder or zip archive."""

__version__ = "1.0.3"