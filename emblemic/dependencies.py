"""FastAPI dependency injection."""

from __future__ import annotations

from functools import lru_cache

from emblemic.assets.glyphs import GlyphProvider, default_glyph_provider
from emblemic.config import settings
from emblemic.engine.history import HistoryManager
from emblemic.models.storage import DesignStore, MemoryDesignStore, SavedDesign, autosave

_store = MemoryDesignStore()
# One undo/redo log per open design, autosaving into the store.
_histories: dict[str, HistoryManager] = {}


def get_settings():
    return settings


@lru_cache(maxsize=4)
def _glyph_provider(glyph_dir: str) -> GlyphProvider:
    return default_glyph_provider(glyph_dir)


def get_glyph_provider() -> GlyphProvider:
    return _glyph_provider(settings.glyph_dir)


def get_design_store() -> DesignStore:
    return _store


def open_history(design: SavedDesign, store: DesignStore) -> HistoryManager:
    """History for ``design``, created on first use and wired to autosave."""
    history = _histories.get(design.id)
    if history is None:
        history = HistoryManager(design.document, limit=settings.history_limit)
        history.subscribe(autosave(store, design.id))
        _histories[design.id] = history
    return history


def close_history(design_id: str) -> None:
    _histories.pop(design_id, None)
