"""Tier ordering, default tier table and migration cost/time estimation."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from tierfinder.schemas.sources import FileEntry
from tierfinder.schemas.tiers import MigrationDirection, TierConfig, TierCostEstimate, TierType
from tierfinder.utils.formatting import format_duration

GB = 1024 ** 3
MB = 1024 ** 2

# archive < cold < nearline < warm < hot
TIER_ORDER: dict[TierType, int] = {
    TierType.ARCHIVE: 0,
    TierType.COLD: 1,
    TierType.NEARLINE: 2,
    TierType.WARM: 3,
    TierType.HOT: 4,
}

# Demotions are storage-class transitions: cheap to request, data movement dominates
DEMOTION_REQUEST_SECONDS = 5.0
DEMOTION_MOVEMENT_FACTOR = 1.5
# Each extra tier step crossed adds this share of the base transfer time
DISTANCE_PENALTY = 0.5

DEFAULT_TIER_CONFIGS: dict[TierType, TierConfig] = {
    TierType.HOT: TierConfig(
        id=TierType.HOT,
        name="Hot",
        description="High performance SSD storage",
        provider="fsx-ontap",
        retrieval_time="Instant",
        cost_per_gb=0.25,
        retrieval_cost_per_gb=0.0,
        request_latency_seconds=1.0,
        throughput_mb_per_second=500.0,
        access_frequency="Frequently accessed",
    ),
    TierType.WARM: TierConfig(
        id=TierType.WARM,
        name="Warm",
        description="Cost-optimized capacity pool",
        provider="fsx-ontap-capacity",
        retrieval_time="< 1 minute",
        cost_per_gb=0.05,
        retrieval_cost_per_gb=0.01,
        request_latency_seconds=30.0,
        throughput_mb_per_second=250.0,
        access_frequency="Occasionally accessed",
    ),
    TierType.NEARLINE: TierConfig(
        id=TierType.NEARLINE,
        name="Nearline",
        description="Object storage, metadata local and data in cloud",
        provider="s3-standard",
        retrieval_time="1-5 minutes",
        cost_per_gb=0.023,
        retrieval_cost_per_gb=0.01,
        request_latency_seconds=180.0,
        throughput_mb_per_second=100.0,
        access_frequency="Infrequent access",
    ),
    TierType.COLD: TierConfig(
        id=TierType.COLD,
        name="Cold",
        description="Glacier flexible retrieval",
        provider="s3-glacier",
        retrieval_time="3-5 hours",
        cost_per_gb=0.0036,
        retrieval_cost_per_gb=0.03,
        request_latency_seconds=4 * 3600.0,
        throughput_mb_per_second=50.0,
        access_frequency="Rarely accessed",
    ),
    TierType.ARCHIVE: TierConfig(
        id=TierType.ARCHIVE,
        name="Archive",
        description="Glacier deep archive",
        provider="s3-glacier-deep",
        retrieval_time="12-48 hours",
        cost_per_gb=0.00099,
        retrieval_cost_per_gb=0.05,
        request_latency_seconds=12 * 3600.0,
        throughput_mb_per_second=25.0,
        access_frequency="Long-term archive",
    ),
}


def tier_rank(tier: TierType) -> int:
    return TIER_ORDER[tier]


def tier_distance(source: TierType, target: TierType) -> int:
    return abs(tier_rank(target) - tier_rank(source))


def classify_migration(source: TierType, target: TierType) -> MigrationDirection:
    """Promotion moves toward hot, demotion toward archive."""
    delta = tier_rank(target) - tier_rank(source)
    if delta > 0:
        return MigrationDirection.PROMOTION
    if delta < 0:
        return MigrationDirection.DEMOTION
    return MigrationDirection.NONE


def get_tier_configs() -> list[TierConfig]:
    """Tier table ordered hot -> archive."""
    return sorted(DEFAULT_TIER_CONFIGS.values(), key=lambda c: -tier_rank(c.id))


def suggest_target_tier(current: TierType) -> TierType:
    """One step toward hot; hot data is offered a demotion to warm."""
    if current == TierType.HOT:
        return TierType.WARM
    rank = tier_rank(current) + 1
    return next(t for t, r in TIER_ORDER.items() if r == rank)


def dominant_tier(files: Iterable[FileEntry]) -> TierType:
    """Most common tier in a selection; ties go to the hotter tier."""
    counts = Counter(f.tier_status for f in files)
    if not counts:
        return TierType.HOT
    return max(counts, key=lambda t: (counts[t], tier_rank(t)))


def estimate(
    files: Iterable[FileEntry],
    target_tier: TierType,
    configs: dict[TierType, TierConfig] | None = None,
) -> TierCostEstimate:
    """Advisory estimate from total size and the (source, target) tier pair.

    Time grows linearly with size and with the number of tier steps crossed.
    Promotions pay the source tier's retrieval latency up front; demotions
    start almost immediately but move data more slowly.
    """
    configs = configs or DEFAULT_TIER_CONFIGS
    files = list(files)
    source_tier = dominant_tier(files)
    total_bytes = sum(f.size for f in files)
    direction = classify_migration(source_tier, target_tier)

    if direction == MigrationDirection.NONE:
        return TierCostEstimate(
            source_tier=source_tier,
            target_tier=target_tier,
            direction=direction,
            total_bytes=total_bytes,
            retrieval_cost=0.0,
            storage_cost_delta=0.0,
            estimated_seconds=0.0,
            estimated_time=format_duration(0),
        )

    source_cfg = configs[source_tier]
    target_cfg = configs[target_tier]
    distance = tier_distance(source_tier, target_tier)
    size_gb = total_bytes / GB

    throughput = min(source_cfg.throughput_mb_per_second, target_cfg.throughput_mb_per_second) * MB
    movement = (total_bytes / throughput) * (1 + DISTANCE_PENALTY * (distance - 1))

    if direction == MigrationDirection.PROMOTION:
        seconds = source_cfg.request_latency_seconds + movement
    else:
        seconds = DEMOTION_REQUEST_SECONDS + movement * DEMOTION_MOVEMENT_FACTOR

    return TierCostEstimate(
        source_tier=source_tier,
        target_tier=target_tier,
        direction=direction,
        total_bytes=total_bytes,
        retrieval_cost=round(size_gb * source_cfg.retrieval_cost_per_gb, 6),
        storage_cost_delta=round(size_gb * (target_cfg.cost_per_gb - source_cfg.cost_per_gb), 6),
        estimated_seconds=round(seconds, 3),
        estimated_time=format_duration(seconds),
    )
