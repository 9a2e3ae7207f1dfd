"""Business logic services — backend wiring and session lifecycle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tierfinder.config import Settings, settings

if TYPE_CHECKING:
    from tierfinder.services.backend import NativeClipboard, StorageBackend
    from tierfinder.services.progress import ProgressSource
    from tierfinder.services.scheduler import SessionScheduler
    from tierfinder.services.session import BrowserSession

logger = logging.getLogger(__name__)


def create_backend(cfg: Settings | None = None) -> tuple[StorageBackend, NativeClipboard]:
    """Storage backend and OS clipboard for the configured mode."""
    cfg = cfg or settings
    if cfg.is_dev_mode:
        from tierfinder.services.memory_backend import MemoryNativeClipboard, MemoryStorageBackend

        logger.info("[DEV] Using in-memory demo storage backend")
        return MemoryStorageBackend.demo(), MemoryNativeClipboard()

    from tierfinder.services.http_backend import HttpNativeClipboard, HttpStorageBackend

    backend = HttpStorageBackend(
        base_url=cfg.backend_url,
        token=cfg.backend_token,
        timeout=cfg.backend_timeout_seconds,
    )
    logger.info("Using storage backend at %s", cfg.backend_url)
    return backend, HttpNativeClipboard(backend)


def create_progress_source(backend: StorageBackend, cfg: Settings | None = None) -> ProgressSource:
    cfg = cfg or settings
    if cfg.progress_source == "backend":
        from tierfinder.services.progress import BackendProgressSource

        return BackendProgressSource(backend, cfg.job_poll_interval_seconds)

    from tierfinder.services.progress import SimulatedProgressSource

    return SimulatedProgressSource(cfg.progress_tick_seconds, cfg.progress_max_step)


async def init_session(
    cfg: Settings | None = None,
) -> tuple[BrowserSession, SessionScheduler | None]:
    """Create a session, load its sources and start background refresh."""
    from tierfinder.services.scheduler import SessionScheduler
    from tierfinder.services.session import BrowserSession
    from tierfinder.services.transfers import TransferPolicy

    cfg = cfg or settings
    backend, native = create_backend(cfg)
    session = BrowserSession(
        backend,
        native,
        create_progress_source(backend, cfg),
        policy=TransferPolicy.from_settings(cfg),
        history_limit=cfg.history_limit,
    )

    sources = await session.load_sources()
    logger.info("Session ready with %d source(s)", len(sources))

    scheduler = None
    if cfg.enable_background_refresh:
        scheduler = SessionScheduler(session, cfg)
        scheduler.start()
    else:
        logger.warning("Background refresh disabled (TIERFINDER_ENABLE_BACKGROUND_REFRESH)")
    return session, scheduler


async def shutdown_session(
    session: BrowserSession | None, scheduler: SessionScheduler | None
) -> None:
    """Stop the scheduler and cancel running migration jobs."""
    if scheduler:
        await scheduler.stop()
    if session:
        await session.close()
