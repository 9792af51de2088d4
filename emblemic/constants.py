"""Design-space constants, background presets and the font registry."""

from __future__ import annotations

from dataclasses import dataclass

# Fixed logical canvas. All sizes/offsets are authored here and scaled
# uniformly by export_size / DESIGN_SIZE on export.
DESIGN_SIZE = 512
DESIGN_CENTER = DESIGN_SIZE / 2

# Rounded-square clip radius as a fraction of the side (iOS-like).
SQUIRCLE_RADIUS_RATIO = 0.22

# Glare: radial white highlight anchored at top-center.
GLARE_RADIUS_RATIO = 0.8

# Pixel grid bounds (always square).
DEFAULT_GRID_SIZE = 12
MIN_GRID_SIZE = 4
MAX_GRID_SIZE = 64

# Text metrics are not measured for the vector bbox; these approximate an
# average glyph box as a fraction of the font size.
TEXT_WIDTH_RATIO = 0.6
TEXT_HEIGHT_RATIO = 1.2

# Whitespace-crop analyzer thresholds.
WHITESPACE_MIN_RATIO = 0.08
WHITESPACE_MIN_MARGIN_PX = 6

DEFAULT_EXPORT_SIZE = 1024
MIN_EXPORT_SIZE = 16
MAX_EXPORT_SIZE = 4096


def clamp_export_size(value) -> int:
    size = int(round(float(value)))
    return max(MIN_EXPORT_SIZE, min(MAX_EXPORT_SIZE, size))


@dataclass(frozen=True)
class Preset:
    name: str
    kind: str
    solid_color: str
    gradient_start: str
    gradient_end: str
    gradient_angle: float


PRESETS: list[Preset] = [
    Preset("Midnight", "linear", "#000000", "#0f172a", "#334155", 135),
    Preset("Sunset", "linear", "#000000", "#f59e0b", "#ec4899", 45),
    Preset("Oceanic", "radial", "#000000", "#0ea5e9", "#1e3a8a", 0),
    Preset("Vercel", "solid", "#000000", "#000000", "#000000", 0),
    Preset("Forest", "linear", "#000000", "#10b981", "#064e3b", 180),
    Preset("Berry", "radial", "#000000", "#a855f7", "#4c1d95", 0),
    Preset("Peach", "linear", "#000000", "#ffedd5", "#fdba74", 135),
    Preset("Mint", "linear", "#000000", "#ccfbf1", "#2dd4bf", 135),
    Preset("Aurora", "linear", "#000000", "#818cf8", "#22d3ee", 90),
    Preset("Volcano", "radial", "#000000", "#7f1d1d", "#000000", 0),
    Preset("Gunmetal", "linear", "#52525b", "#27272a", "#52525b", 180),
    Preset("Candy", "linear", "#000000", "#f472b6", "#a78bfa", 45),
]


@dataclass(frozen=True)
class FontOption:
    name: str
    family: str  # CSS family list; the first entry is the font name


FONTS: list[FontOption] = [
    FontOption("Inter", "'Inter', sans-serif"),
    FontOption("Roboto Mono", "'Roboto Mono', monospace"),
    FontOption("Space Grotesk", "'Space Grotesk', sans-serif"),
    FontOption("Righteous", "'Righteous', cursive"),
    FontOption("Bangers", "'Bangers', cursive"),
    FontOption("Fredoka", "'Fredoka', sans-serif"),
]


def get_preset(name: str) -> Preset | None:
    for preset in PRESETS:
        if preset.name.lower() == name.lower():
            return preset
    return None


def primary_family(family: str) -> str:
    """First family of a CSS font list, unquoted: "'Inter', sans-serif" -> "Inter"."""
    return family.split(",")[0].strip().strip("'\"")
