"""API route registration."""

from fastapi import APIRouter

from tierfinder.api.routes import health, navigation, selection, clipboard, files, tiers

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(navigation.router, tags=["navigation"])
api_router.include_router(selection.router, prefix="/selection", tags=["selection"])
api_router.include_router(clipboard.router, prefix="/clipboard", tags=["clipboard"])
api_router.include_router(files.router, prefix="/files", tags=["files"])
api_router.include_router(tiers.router, prefix="/tiers", tags=["tiers"])
