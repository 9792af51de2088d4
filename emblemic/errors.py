"""Exception taxonomy. Missing content is never an error; see renderers."""

from __future__ import annotations


class EmblemicError(Exception):
    """Base class for failures scoped to a single operation."""


class AssetDecodeError(EmblemicError, ValueError):
    """An uploaded asset or intermediate glyph bitmap could not be decoded."""


class UnsupportedFormatError(EmblemicError, ValueError):
    """Requested export format is not one of png, jpg, webp, svg."""
