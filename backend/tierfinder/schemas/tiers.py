"""Storage tier schemas."""

from enum import Enum

from pydantic import BaseModel


class TierType(str, Enum):
    HOT = "hot"
    WARM = "warm"
    NEARLINE = "nearline"
    COLD = "cold"
    ARCHIVE = "archive"


class MigrationDirection(str, Enum):
    PROMOTION = "promotion"  # toward hot
    DEMOTION = "demotion"  # toward archive
    NONE = "none"


class TierConfig(BaseModel):
    """One storage tier as offered to the user."""
    id: TierType
    name: str
    description: str
    provider: str
    retrieval_time: str
    cost_per_gb: float  # storage, per GB-month
    retrieval_cost_per_gb: float
    request_latency_seconds: float
    throughput_mb_per_second: float
    access_frequency: str


class TierCostEstimate(BaseModel):
    """Advisory cost/time estimate for a tier migration."""
    source_tier: TierType
    target_tier: TierType
    direction: MigrationDirection
    total_bytes: int
    retrieval_cost: float
    storage_cost_delta: float  # per month
    estimated_seconds: float
    estimated_time: str


class EstimateRequest(BaseModel):
    paths: list[str] | None = None  # defaults to current selection
    target_tier: TierType
