"""Resolve a font family + weight to a Pillow font for raster text."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from PIL import ImageFont

from emblemic.constants import primary_family

logger = logging.getLogger(__name__)

_FONT_SUFFIXES = (".ttf", ".otf", ".ttc")

# Weight name fragments commonly found in font file names.
_WEIGHT_NAMES = {
    100: ("thin", "hairline"),
    200: ("extralight", "ultralight"),
    300: ("light",),
    400: ("regular", "book", "normal"),
    500: ("medium",),
    600: ("semibold", "demibold"),
    700: ("bold",),
    800: ("extrabold", "ultrabold"),
    900: ("black", "heavy"),
}


def _normalize(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch.isalnum())


def _candidates(font_dirs: tuple[str, ...], family: str) -> list[Path]:
    key = _normalize(family)
    found: list[Path] = []
    for directory in font_dirs:
        root = Path(directory)
        if not root.is_dir():
            continue
        for path in root.rglob("*"):
            if path.suffix.lower() in _FONT_SUFFIXES and _normalize(path.stem).startswith(key):
                found.append(path)
    return found


@lru_cache(maxsize=64)
def find_font_file(font_dirs: tuple[str, ...], family: str, weight: int) -> Path | None:
    """Best file for family/weight: exact weight name, then regular, then any."""
    paths = _candidates(font_dirs, primary_family(family))
    if not paths:
        return None

    def _score(path: Path) -> int:
        stem = _normalize(path.stem)
        for name in _WEIGHT_NAMES.get(weight, ()):
            if stem.endswith(name):
                return 0
        if any(stem.endswith(n) for n in _WEIGHT_NAMES[400]) or stem == _normalize(family):
            return 1
        return 2

    return sorted(paths, key=lambda p: (_score(p), len(p.name)))[0]


def load_font(family: str, weight: str, size: float, font_dirs: list[str] | None = None):
    """Pillow font at ``size`` px. Falls back to Pillow's bundled font."""
    px = max(1, int(round(size)))
    path = find_font_file(tuple(font_dirs or ()), family, int(weight))
    if path is not None:
        try:
            return ImageFont.truetype(str(path), px)
        except OSError as e:
            logger.warning("Font %s could not be opened: %s", path, e)
    logger.debug("No font file for %r, using default", family)
    return ImageFont.load_default(size=px)
