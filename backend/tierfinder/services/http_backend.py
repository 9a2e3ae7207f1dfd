"""HTTP storage backend — REST client for the VFS API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from tierfinder.config import settings
from tierfinder.schemas.jobs import JobProgress
from tierfinder.schemas.sources import FileEntry, StorageSource
from tierfinder.schemas.tiers import TierCostEstimate, TierType
from tierfinder.services.backend import BackendError

logger = logging.getLogger(__name__)

# 5xx and transport problems may go away on their own; 4xx will not
_RETRYABLE_STATUS = frozenset({408, 429, 500, 502, 503, 504})


class HttpStorageBackend:
    """VFS REST API client with bearer-token auth."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
    ):
        self._base_url = (base_url or settings.backend_url).rstrip("/") + "/vfs"
        self._token = token if token is not None else settings.backend_token
        self._timeout = timeout or settings.backend_timeout_seconds

    def _headers(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    async def request(self, method: str, path: str, **kwargs) -> Any:
        """Send one request; every failure surfaces as BackendError."""
        logger.debug("%s %s", method, path)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(
                    method, f"{self._base_url}{path}",
                    headers=self._headers(), **kwargs,
                )
                resp.raise_for_status()
                if resp.status_code == 204 or not resp.content:
                    return None
                return resp.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise BackendError(
                f"{method} {path} failed: {status} {_error_detail(e.response)}",
                retryable=status in _RETRYABLE_STATUS,
            ) from e
        except httpx.HTTPError as e:
            raise BackendError(f"{method} {path} failed: {e}", retryable=True) from e

    # --- StorageBackend ---

    async def list_sources(self) -> list[StorageSource]:
        data = await self.request("GET", "/sources")
        return [StorageSource.model_validate(item) for item in data]

    async def list_files(self, source_id: str, path: str) -> list[FileEntry]:
        data = await self.request(
            "GET", f"/sources/{source_id}/files", params={"path": path}
        )
        return [FileEntry.model_validate(item) for item in data]

    async def copy(
        self, source_id: str, from_path: str, to_path: str, recursive: bool = True
    ) -> None:
        await self.request(
            "POST", f"/sources/{source_id}/copy",
            json={"from": from_path, "to": to_path, "recursive": recursive},
        )

    async def move(self, source_id: str, from_path: str, to_path: str) -> None:
        await self.request(
            "POST", f"/sources/{source_id}/move",
            json={"from": from_path, "to": to_path},
        )

    async def copy_to_source(
        self, from_source_id: str, from_path: str, to_source_id: str, to_path: str
    ) -> None:
        await self._transfer("copy", from_source_id, from_path, to_source_id, to_path)

    async def move_to_source(
        self, from_source_id: str, from_path: str, to_source_id: str, to_path: str
    ) -> None:
        await self._transfer("move", from_source_id, from_path, to_source_id, to_path)

    async def _transfer(
        self, mode: str, from_source_id: str, from_path: str, to_source_id: str, to_path: str
    ) -> None:
        await self.request(
            "POST", "/transfer",
            json={
                "mode": mode,
                "from_source_id": from_source_id,
                "from_path": from_path,
                "to_source_id": to_source_id,
                "to_path": to_path,
            },
        )

    async def delete(self, source_id: str, path: str) -> None:
        await self.request("DELETE", f"/sources/{source_id}/files", params={"path": path})

    async def rename(self, source_id: str, from_path: str, to_path: str) -> None:
        await self.request(
            "POST", f"/sources/{source_id}/rename",
            json={"from": from_path, "to": to_path},
        )

    async def mkdir(self, source_id: str, path: str) -> None:
        await self.request("POST", f"/sources/{source_id}/mkdir", json={"path": path})

    async def request_tier_change(
        self, source_id: str, paths: list[str], target_tier: TierType
    ) -> str:
        data = await self.request(
            "POST", "/tiers/hydrate",
            json={"source_id": source_id, "paths": paths, "target_tier": target_tier.value},
        )
        try:
            return str(data["request_id"])
        except (KeyError, TypeError) as e:
            raise BackendError("Tier change response is missing request_id") from e

    async def estimate_tier_migration(
        self, source_id: str, paths: list[str], target_tier: TierType
    ) -> TierCostEstimate:
        data = await self.request(
            "POST", "/tiers/estimate",
            json={"source_id": source_id, "paths": paths, "target_tier": target_tier.value},
        )
        return TierCostEstimate.model_validate(data)

    async def get_tier_job(self, source_id: str, request_id: str) -> JobProgress:
        data = await self.request(
            "GET", f"/tiers/jobs/{request_id}", params={"source_id": source_id}
        )
        return JobProgress.model_validate(data)


class HttpNativeClipboard:
    """Host clipboard file references, proxied by the VFS service."""

    def __init__(self, backend: HttpStorageBackend):
        self._backend = backend

    async def read(self) -> list[str]:
        data = await self._backend.request("GET", "/clipboard/native")
        return list((data or {}).get("paths", []))

    async def write(self, paths: list[str]) -> None:
        await self._backend.request("PUT", "/clipboard/native", json={"paths": paths})


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("error") or body)
    return str(body)
