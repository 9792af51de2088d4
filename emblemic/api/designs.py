"""Saved designs and their undo/redo history."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from emblemic.dependencies import close_history, get_design_store, open_history
from emblemic.engine.history import HistoryManager
from emblemic.models.document import Document
from emblemic.models.requests import DesignSaveRequest, DocumentCommitRequest, LegacyImportRequest
from emblemic.models.responses import DesignSummary, HistoryStateResponse
from emblemic.models.storage import DEFAULT_DESIGN_NAME, DesignStore, SavedDesign

router = APIRouter(prefix="/designs")


def _require(store: DesignStore, design_id: str) -> SavedDesign:
    design = store.get(design_id)
    if design is None:
        raise HTTPException(status_code=404, detail=f"Design {design_id!r} not found")
    return design


def _state(design_id: str, history: HistoryManager) -> HistoryStateResponse:
    return HistoryStateResponse(
        design_id=design_id,
        document=history.present,
        can_undo=history.can_undo,
        can_redo=history.can_redo,
    )


@router.get("", response_model=list[DesignSummary])
async def list_designs(store: DesignStore = Depends(get_design_store)) -> list[DesignSummary]:
    return [DesignSummary(id=d.id, name=d.name, last_modified=d.last_modified) for d in store.list()]


@router.post("", response_model=SavedDesign)
async def create_design(req: DesignSaveRequest, store: DesignStore = Depends(get_design_store)) -> SavedDesign:
    return store.save(SavedDesign(name=req.name or DEFAULT_DESIGN_NAME, document=req.document or Document()))


@router.post("/import-legacy", response_model=SavedDesign)
async def import_legacy(req: LegacyImportRequest, store: DesignStore = Depends(get_design_store)) -> SavedDesign:
    name = req.config.get("name") or DEFAULT_DESIGN_NAME
    return store.save(SavedDesign(name=str(name), document=Document.from_legacy(req.config)))


@router.get("/{design_id}", response_model=SavedDesign)
async def get_design(design_id: str, store: DesignStore = Depends(get_design_store)) -> SavedDesign:
    return _require(store, design_id)


@router.put("/{design_id}", response_model=SavedDesign)
async def update_design(
    design_id: str, req: DesignSaveRequest, store: DesignStore = Depends(get_design_store)
) -> SavedDesign:
    current = _require(store, design_id)
    changes: dict = {}
    if req.name is not None:
        changes["name"] = req.name
    if req.document is not None:
        changes["document"] = req.document
        # A document replaced from outside starts a fresh history
        close_history(design_id)
    return store.save(current.model_copy(update=changes))


@router.delete("/{design_id}", status_code=204)
async def delete_design(design_id: str, store: DesignStore = Depends(get_design_store)) -> None:
    _require(store, design_id)
    close_history(design_id)
    store.delete(design_id)


@router.get("/{design_id}/history", response_model=HistoryStateResponse)
async def history_state(design_id: str, store: DesignStore = Depends(get_design_store)) -> HistoryStateResponse:
    history = open_history(_require(store, design_id), store)
    return _state(design_id, history)


@router.post("/{design_id}/commit", response_model=HistoryStateResponse)
async def commit(
    design_id: str, req: DocumentCommitRequest, store: DesignStore = Depends(get_design_store)
) -> HistoryStateResponse:
    history = open_history(_require(store, design_id), store)
    history.record(req.document)
    return _state(design_id, history)


@router.post("/{design_id}/undo", response_model=HistoryStateResponse)
async def undo(design_id: str, store: DesignStore = Depends(get_design_store)) -> HistoryStateResponse:
    history = open_history(_require(store, design_id), store)
    history.undo()
    return _state(design_id, history)


@router.post("/{design_id}/redo", response_model=HistoryStateResponse)
async def redo(design_id: str, store: DesignStore = Depends(get_design_store)) -> HistoryStateResponse:
    history = open_history(_require(store, design_id), store)
    history.redo()
    return _state(design_id, history)
