"""Linear undo/redo log over immutable Documents."""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable

from emblemic.models.document import Document

logger = logging.getLogger(__name__)

Listener = Callable[[Document], None]


class HistoryManager:
    """Owns the single ``present`` Document handed to every consumer.

    ``past`` is oldest-first. ``future`` is nearest-undo-first; it is kept
    reversed internally so undo/redo are both append/pop.
    """

    def __init__(self, initial: Document | None = None, limit: int = 0) -> None:
        self._past: deque[Document] = deque(maxlen=limit if limit > 0 else None)
        self._present: Document = initial if initial is not None else Document()
        self._future_rev: list[Document] = []
        self._listeners: list[Listener] = []

    @property
    def present(self) -> Document:
        return self._present

    @property
    def past(self) -> tuple[Document, ...]:
        return tuple(self._past)

    @property
    def future(self) -> tuple[Document, ...]:
        return tuple(reversed(self._future_rev))

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future_rev)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with ``present`` after every change."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def record(self, doc: Document) -> Document:
        """Make ``doc`` the present. Recording the present itself is a no-op."""
        if doc is self._present:
            return self._present
        self._past.append(self._present)  # deque drops the oldest past the limit
        self._present = doc
        self._future_rev.clear()
        self._notify()
        return self._present

    def undo(self) -> Document:
        if not self._past:
            return self._present
        self._future_rev.append(self._present)
        self._present = self._past.pop()
        self._notify()
        return self._present

    def redo(self) -> Document:
        if not self._future_rev:
            return self._present
        self._past.append(self._present)
        self._present = self._future_rev.pop()
        self._notify()
        return self._present

    def reset(self, doc: Document) -> None:
        """Start a fresh log, e.g. when switching to another saved design."""
        self._past.clear()
        self._future_rev.clear()
        self._present = doc
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._present)
        logger.debug("History: %d past, %d future", len(self._past), len(self._future_rev))
