"""Storage source and file listing schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from tierfinder.schemas.tiers import TierType


class SourceCategory(str, Enum):
    LOCAL = "local"
    NETWORK = "network"
    CLOUD = "cloud"
    HYBRID = "hybrid"
    BLOCK = "block"


class ConnectionStatus(str, Enum):
    CONNECTED = "connected"
    CONNECTING = "connecting"
    DISCONNECTED = "disconnected"
    ERROR = "error"


class StorageSource(BaseModel):
    """One backend mount exposed to the browser."""
    id: str
    name: str
    category: SourceCategory
    status: ConnectionStatus = ConnectionStatus.CONNECTED
    provider_id: str | None = None
    current_tier: TierType | None = None
    used_space: int | None = None
    total_space: int | None = None

    @property
    def is_connected(self) -> bool:
        return self.status == ConnectionStatus.CONNECTED


class FileEntry(BaseModel):
    """One file or directory within a source listing."""
    path: str
    name: str
    size: int = 0
    is_directory: bool = False
    tier_status: TierType = TierType.HOT
    mime_type: str | None = None
    tags: list[str] = []
    modified_at: datetime | None = None
    created_at: datetime | None = None
    is_warmed: bool = False  # cached locally
    is_hydrating: bool = False  # tier migration in flight
