"""File operation routes — drops, imports, delete, rename, new folder, duplicate."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from tierfinder.api.deps import get_session, require_source
from tierfinder.schemas.transfers import (
    BatchResult,
    CreateFolderRequest,
    DeleteRequest,
    DropOnSourceRequest,
    DropRequest,
    DuplicateRequest,
    ImportRequest,
    RenameRequest,
)
from tierfinder.services.backend import ConfirmationRequiredError, UnknownSourceError
from tierfinder.services.session import BrowserSession
from tierfinder.utils.naming import InvalidNameError

router = APIRouter()


@router.post("/drop", response_model=BatchResult)
async def drop(body: DropRequest, session: BrowserSession = Depends(require_source)):
    """Drag-and-drop into a folder of the current source."""
    return await session.drop(
        body.source_id, body.paths, body.target_path,
        force_copy=body.force_copy, force_move=body.force_move,
    )


@router.post("/drop-on-source", response_model=BatchResult)
async def drop_on_source(body: DropOnSourceRequest, session: BrowserSession = Depends(get_session)):
    """Drop onto a sidebar source — lands in that source's root."""
    try:
        return await session.drop_on_source(
            body.source_id, body.paths, body.target_source_id, force_move=body.force_move,
        )
    except UnknownSourceError:
        raise HTTPException(404, f"Unknown source: {body.target_source_id}")


@router.post("/import", response_model=BatchResult)
async def import_external(body: ImportRequest, session: BrowserSession = Depends(require_source)):
    """Copy files dragged in from the host filesystem."""
    return await session.import_external(body.external_paths, body.target_path)


@router.post("/delete", response_model=BatchResult)
async def delete(body: DeleteRequest, session: BrowserSession = Depends(require_source)):
    try:
        return await session.delete_selection(body.paths, confirmed=body.confirmed)
    except ConfirmationRequiredError as e:
        raise HTTPException(400, str(e))


@router.post("/rename", response_model=BatchResult)
async def rename(body: RenameRequest, session: BrowserSession = Depends(require_source)):
    try:
        return await session.rename(body.path, body.new_name)
    except InvalidNameError as e:
        raise HTTPException(400, str(e))


@router.post("/mkdir", response_model=BatchResult)
async def create_folder(body: CreateFolderRequest, session: BrowserSession = Depends(require_source)):
    return await session.create_folder(body.parent_path)


@router.post("/duplicate", response_model=BatchResult)
async def duplicate(body: DuplicateRequest, session: BrowserSession = Depends(require_source)):
    return await session.duplicate(body.path)
