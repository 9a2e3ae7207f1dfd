"""Clipboard routes — copy, cut, paste."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tierfinder.api.deps import get_session, require_source
from tierfinder.schemas.clipboard import ClipboardRequest, ClipboardStatus, PasteRequest
from tierfinder.schemas.transfers import BatchResult
from tierfinder.services.session import BrowserSession

router = APIRouter()


@router.get("", response_model=ClipboardStatus)
async def clipboard_status(session: BrowserSession = Depends(get_session)):
    """Virtual clipboard plus a fresh look at the OS clipboard."""
    await session.clipboard.read_native()
    return session.clipboard.status()


@router.post("/copy", response_model=ClipboardStatus)
async def copy(body: ClipboardRequest, session: BrowserSession = Depends(require_source)):
    await session.copy_selection(body.paths)
    return session.clipboard.status()


@router.post("/cut", response_model=ClipboardStatus)
async def cut(body: ClipboardRequest, session: BrowserSession = Depends(require_source)):
    await session.cut_selection(body.paths)
    return session.clipboard.status()


@router.post("/paste", response_model=BatchResult)
async def paste(body: PasteRequest, session: BrowserSession = Depends(require_source)):
    return await session.paste(body.target_path)


@router.delete("", response_model=ClipboardStatus)
async def clear(session: BrowserSession = Depends(get_session)):
    session.clipboard.clear()
    return session.clipboard.status()
