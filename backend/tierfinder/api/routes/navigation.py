"""Source and navigation routes — select, navigate, history, listing."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from tierfinder.api.deps import get_session
from tierfinder.schemas.session import ListingSnapshot, NavigateRequest, SessionSnapshot
from tierfinder.schemas.sources import StorageSource
from tierfinder.services.backend import UnknownSourceError
from tierfinder.services.session import BrowserSession

router = APIRouter()


@router.get("/sources", response_model=list[StorageSource])
async def list_sources(session: BrowserSession = Depends(get_session)):
    """Reload the source list from the backend."""
    return await session.load_sources()


@router.post("/sources/{source_id}/select", response_model=SessionSnapshot)
async def select_source(source_id: str, session: BrowserSession = Depends(get_session)):
    try:
        await session.select_source(source_id)
    except UnknownSourceError:
        raise HTTPException(404, f"Unknown source: {source_id}")
    return session.snapshot()


@router.get("/session", response_model=SessionSnapshot)
async def get_snapshot(session: BrowserSession = Depends(get_session)):
    return session.snapshot()


@router.post("/navigate", response_model=SessionSnapshot)
async def navigate(body: NavigateRequest, session: BrowserSession = Depends(get_session)):
    """Go to a path in the current source. Without a source this is a no-op."""
    await session.navigate_to(body.path, body.add_to_history)
    return session.snapshot()


@router.post("/back", response_model=SessionSnapshot)
async def go_back(session: BrowserSession = Depends(get_session)):
    await session.go_back()
    return session.snapshot()


@router.post("/forward", response_model=SessionSnapshot)
async def go_forward(session: BrowserSession = Depends(get_session)):
    await session.go_forward()
    return session.snapshot()


@router.post("/up", response_model=SessionSnapshot)
async def go_up(session: BrowserSession = Depends(get_session)):
    await session.go_up()
    return session.snapshot()


@router.get("/listing", response_model=ListingSnapshot)
async def get_listing(session: BrowserSession = Depends(get_session)):
    return session.snapshot().listing


@router.post("/refresh", response_model=ListingSnapshot)
async def refresh(session: BrowserSession = Depends(get_session)):
    """Fetch the current listing again (also the retry after a listing error)."""
    await session.refresh()
    return session.snapshot().listing
