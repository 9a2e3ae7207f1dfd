"""APScheduler-based background refresh for the browser session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from tierfinder.config import Settings, settings

if TYPE_CHECKING:
    from tierfinder.services.session import BrowserSession

logger = logging.getLogger(__name__)


class SessionScheduler:
    """Keeps source status and the OS clipboard flag fresh."""

    def __init__(self, session: BrowserSession, cfg: Settings | None = None):
        self._session = session
        self._cfg = cfg or settings
        self._scheduler = AsyncIOScheduler(
            job_defaults={"coalesce": True, "max_instances": 1}
        )

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        """Register and start all refresh jobs."""
        source_interval = self._cfg.source_refresh_interval_seconds
        clipboard_interval = self._cfg.clipboard_poll_interval_seconds

        self._scheduler.add_job(
            self._refresh_sources,
            "interval",
            seconds=source_interval,
            id="refresh_sources",
            name="Refresh storage source status",
        )
        self._scheduler.add_job(
            self._poll_clipboard,
            "interval",
            seconds=clipboard_interval,
            id="poll_clipboard",
            name="Poll OS clipboard for file references",
        )

        self._scheduler.start()
        logger.info(
            "Session scheduler started — sources every %ds, clipboard every %ds",
            source_interval, clipboard_interval,
        )

    async def stop(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Session scheduler stopped")

    async def _refresh_sources(self) -> None:
        try:
            sources = await self._session.load_sources()
            logger.debug("Refreshed %d source(s)", len(sources))
        except Exception as e:
            logger.error("Source refresh failed: %s", e)

    async def _poll_clipboard(self) -> None:
        try:
            paths = await self._session.clipboard.read_native()
            if paths:
                logger.debug("OS clipboard holds %d file reference(s)", len(paths))
        except Exception as e:
            logger.error("Clipboard poll failed: %s", e)
