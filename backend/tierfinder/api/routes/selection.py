"""Selection routes."""

from fastapi import APIRouter, Depends

from tierfinder.api.deps import get_session
from tierfinder.schemas.session import SelectionSnapshot, SelectPathRequest, SelectRangeRequest
from tierfinder.services.session import BrowserSession

router = APIRouter()


@router.get("", response_model=SelectionSnapshot)
async def get_selection(session: BrowserSession = Depends(get_session)):
    return session.selection.snapshot()


@router.post("/toggle", response_model=SelectionSnapshot)
async def toggle(body: SelectPathRequest, session: BrowserSession = Depends(get_session)):
    """Modifier-click. Paths outside the current listing are ignored."""
    session.toggle(body.path)
    return session.selection.snapshot()


@router.post("/single", response_model=SelectionSnapshot)
async def select_single(body: SelectPathRequest, session: BrowserSession = Depends(get_session)):
    session.select_single(body.path)
    return session.selection.snapshot()


@router.post("/range", response_model=SelectionSnapshot)
async def select_range(body: SelectRangeRequest, session: BrowserSession = Depends(get_session)):
    """Shift-click, anchored at ``anchor`` or the stored anchor."""
    session.select_range(body.target, body.anchor)
    return session.selection.snapshot()


@router.post("/all", response_model=SelectionSnapshot)
async def select_all(session: BrowserSession = Depends(get_session)):
    session.select_all()
    return session.selection.snapshot()


@router.delete("", response_model=SelectionSnapshot)
async def clear(session: BrowserSession = Depends(get_session)):
    session.clear_selection()
    return session.selection.snapshot()
