"""Emblemic: app-icon composition and export engine."""

__version__ = "0.1.0"
