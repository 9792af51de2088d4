"""Write clean SVG markup from element definitions."""

from __future__ import annotations

from typing import Any
from xml.sax.saxutils import escape, quoteattr

from emblemic.svg.parser import SVG_NS


def fmt(value: float) -> str:
    """Compact number: 3 decimals max, no trailing zeros."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _attr_value(value: Any) -> str:
    if isinstance(value, float):
        return fmt(value)
    return str(value)


def attr_string(attrs: dict[str, Any]) -> str:
    return " ".join(f"{k}={quoteattr(_attr_value(v))}" for k, v in attrs.items() if v is not None)


def element(tag: str, attrs: dict[str, Any] | None = None, children: str | None = None) -> str:
    attr_str = attr_string(attrs or {})
    head = f"<{tag} {attr_str}" if attr_str else f"<{tag}"
    if children is None:
        return f"{head} />"
    return f"{head}>{children}</{tag}>"


def text_node(text: str) -> str:
    return escape(text)


def serialize_svg(
    elements: list[str],
    width: float,
    height: float,
    view_box: tuple[float, float, float, float],
    defs: list[str] | None = None,
) -> str:
    """Assemble a standalone SVG document."""
    vb = " ".join(fmt(v) for v in view_box)
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="{SVG_NS}" width="{fmt(width)}" height="{fmt(height)}" viewBox="{vb}">',
    ]
    if defs:
        lines.append("  <defs>")
        lines.extend(f"    {d}" for d in defs)
        lines.append("  </defs>")
    lines.extend(f"  {e}" for e in elements)
    lines.append("</svg>")
    return "\n".join(lines)
