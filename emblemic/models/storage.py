"""Saved designs and the storage collaborator interface."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Protocol

from pydantic import BaseModel, ConfigDict, Field

from emblemic.models.document import Document

logger = logging.getLogger(__name__)

DEFAULT_DESIGN_NAME = "Untitled Icon"


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class SavedDesign(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    name: str = DEFAULT_DESIGN_NAME
    document: Document = Field(default_factory=Document)
    last_modified: float = Field(default_factory=time.time)


class DesignStore(Protocol):
    def list(self) -> list[SavedDesign]: ...

    def get(self, design_id: str) -> SavedDesign | None: ...

    def save(self, design: SavedDesign) -> SavedDesign: ...

    def delete(self, design_id: str) -> None: ...


class MemoryDesignStore:
    """In-process store. Always holds at least one design, newest first."""

    def __init__(self) -> None:
        self._designs: dict[str, SavedDesign] = {}
        self._ensure_one()

    def _ensure_one(self) -> None:
        if not self._designs:
            fresh = SavedDesign()
            self._designs[fresh.id] = fresh

    def list(self) -> list[SavedDesign]:
        return sorted(self._designs.values(), key=lambda d: d.last_modified, reverse=True)

    def get(self, design_id: str) -> SavedDesign | None:
        return self._designs.get(design_id)

    def save(self, design: SavedDesign) -> SavedDesign:
        stored = design.model_copy(update={"last_modified": time.time()})
        self._designs[stored.id] = stored
        logger.debug("Saved design %s (%s)", stored.id, stored.name)
        return stored

    def delete(self, design_id: str) -> None:
        self._designs.pop(design_id, None)
        self._ensure_one()


def autosave(store: DesignStore, design_id: str) -> Callable[[Document], None]:
    """History listener that persists every committed revision of a design."""

    def _listener(document: Document) -> None:
        current = store.get(design_id)
        if current is None:
            logger.warning("Autosave target %s no longer exists", design_id)
            return
        if current.document == document:
            return
        store.save(current.model_copy(update={"document": document}))

    return _listener
