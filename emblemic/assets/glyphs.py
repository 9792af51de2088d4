"""Glyph provider: resolves a glyph name to a vector drawable.

``lookup`` returns None for unknown names; callers render nothing.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from emblemic.errors import AssetDecodeError
from emblemic.svg.parser import SVG_NS, Glyph, parse_glyph
from emblemic.svg.serializer import attr_string, fmt

logger = logging.getLogger(__name__)

# Outline glyphs on a 24-unit canvas, drawn with a 1.5 stroke.
_OUTLINE_ROOT = (
    f'<svg xmlns="{SVG_NS}" viewBox="0 0 24 24" fill="none" stroke="currentColor" '
    'stroke-width="1.5" stroke-linecap="round" stroke-linejoin="round">{body}</svg>'
)

BUILTIN_GLYPHS: dict[str, str] = {
    "Plane": (
        '<path d="M17.8 19.2 16 11l3.5-3.5C21 6 21.5 4 21 3c-1-.5-3 0-4.5 1.5L13 8 4.8 6.2'
        "c-.5-.1-.9.1-1.1.5l-.3.5c-.2.5-.1 1 .3 1.3L9 12l-2 3H4l-1 1 3 2 2 3 1-1v-3l3-2 3.5 5.3"
        'c.3.4.8.5 1.3.3l.5-.2c.4-.3.6-.7.5-1.2z"/>'
    ),
    "Heart": (
        '<path d="M19 14c1.49-1.46 3-3.21 3-5.5A5.5 5.5 0 0 0 16.5 3c-1.76 0-3 .5-4.5 2'
        '-1.5-1.5-2.74-2-4.5-2A5.5 5.5 0 0 0 2 8.5c0 2.3 1.5 4.05 3 5.5l7 7Z"/>'
    ),
    "Star": '<polygon points="12 2 15.09 8.26 22 9.27 17 14.14 18.18 21.02 12 17.77 5.82 21.02 7 14.14 2 9.27 8.91 8.26 12 2"/>',
    "Zap": '<polygon points="13 2 3 14 12 14 11 22 21 10 12 10 13 2"/>',
    "Circle": '<circle cx="12" cy="12" r="10"/>',
    "Square": '<rect width="18" height="18" x="3" y="3" rx="2"/>',
    "Smile": (
        '<circle cx="12" cy="12" r="10"/><path d="M8 14s1.5 2 4 2 4-2 4-2"/>'
        '<line x1="9" x2="9.01" y1="9" y2="9"/><line x1="15" x2="15.01" y1="9" y2="9"/>'
    ),
    "Home": (
        '<path d="M15 21v-8a1 1 0 0 0-1-1h-4a1 1 0 0 0-1 1v8"/>'
        '<path d="M3 10a2 2 0 0 1 .709-1.528l7-5.999a2 2 0 0 1 2.582 0l7 5.999A2 2 0 0 1 21 10v9'
        'a2 2 0 0 1-2 2H5a2 2 0 0 1-2-2z"/>'
    ),
    "BarChart": (
        '<line x1="18" x2="18" y1="20" y2="10"/><line x1="12" x2="12" y1="20" y2="4"/>'
        '<line x1="6" x2="6" y1="20" y2="14"/>'
    ),
}

# Icon search returns at most this many names.
MAX_SEARCH_RESULTS = 100


class GlyphProvider(Protocol):
    def lookup(self, name: str) -> Glyph | None: ...

    def names(self) -> list[str]: ...


class BuiltinGlyphProvider:
    """Glyphs bundled with the package."""

    def __init__(self) -> None:
        self._cache: dict[str, Glyph] = {}

    def names(self) -> list[str]:
        return sorted(BUILTIN_GLYPHS)

    def lookup(self, name: str) -> Glyph | None:
        if name in self._cache:
            return self._cache[name]
        body = BUILTIN_GLYPHS.get(name)
        if body is None:
            return None
        glyph = parse_glyph(name, _OUTLINE_ROOT.format(body=body))
        self._cache[name] = glyph
        return glyph


class DirectoryGlyphProvider:
    """Glyphs loaded from ``<dir>/<Name>.svg``."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self._cache: dict[str, Glyph | None] = {}

    def names(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob("*.svg"))

    def lookup(self, name: str) -> Glyph | None:
        if name in self._cache:
            return self._cache[name]
        path = self.directory / f"{name}.svg"
        glyph: Glyph | None = None
        if path.is_file() and path.parent == self.directory:
            try:
                glyph = parse_glyph(name, path.read_text(encoding="utf-8"))
            except (OSError, AssetDecodeError) as e:
                logger.warning("Glyph %s could not be loaded: %s", path, e)
        self._cache[name] = glyph
        return glyph


class ChainGlyphProvider:
    """First provider that knows a name wins."""

    def __init__(self, *providers: GlyphProvider) -> None:
        self.providers = providers

    def names(self) -> list[str]:
        seen: set[str] = set()
        for provider in self.providers:
            seen.update(provider.names())
        return sorted(seen)

    def lookup(self, name: str) -> Glyph | None:
        for provider in self.providers:
            glyph = provider.lookup(name)
            if glyph is not None:
                return glyph
        return None


def search_glyphs(provider: GlyphProvider, query: str) -> list[str]:
    q = query.lower()
    return [n for n in provider.names() if q in n.lower()][:MAX_SEARCH_RESULTS]


def recolor(text: str, color: str) -> str:
    return text.replace("currentColor", color)


def glyph_svg(glyph: Glyph, color: str, size: float, x: float | None = None, y: float | None = None) -> str:
    """Glyph markup as an <svg> of ``size``, recoloured to ``color``.

    With x/y it is a nested viewport for embedding, otherwise a standalone
    document suitable for rasterisation.
    """
    attrs: dict[str, str] = {}
    if x is None or y is None:
        attrs["xmlns"] = SVG_NS
    else:
        attrs["x"] = fmt(x)
        attrs["y"] = fmt(y)
    attrs["width"] = fmt(size)
    attrs["height"] = fmt(size)
    attrs["viewBox"] = " ".join(fmt(v) for v in glyph.view_box)
    attrs["color"] = color
    attrs.update({k: recolor(v, color) for k, v in glyph.attributes.items()})
    return f"<svg {attr_string(attrs)}>{recolor(glyph.body, color)}</svg>"


def default_glyph_provider(glyph_dir: str = "") -> GlyphProvider:
    if glyph_dir:
        return ChainGlyphProvider(DirectoryGlyphProvider(glyph_dir), BuiltinGlyphProvider())
    return BuiltinGlyphProvider()
