"""Rebuild editorial summary trees from flat scraper output."""

__version__ = "0.1.0"
