"""Tier routes — tier table, estimates, migration jobs."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from tierfinder.api.deps import get_session, require_source
from tierfinder.schemas.jobs import HydrationJob, TierChangeRequest
from tierfinder.schemas.tiers import EstimateRequest, TierConfig, TierCostEstimate, TierType
from tierfinder.services import tier_model
from tierfinder.services.session import BrowserSession

router = APIRouter()


@router.get("", response_model=list[TierConfig])
async def list_tiers():
    """All tiers, hottest first."""
    return tier_model.get_tier_configs()


@router.get("/suggest/{tier}")
async def suggest_tier(tier: TierType):
    """Default target offered in the tier-change dialog."""
    return {"current": tier.value, "suggested": tier_model.suggest_target_tier(tier).value}


@router.post("/estimate", response_model=TierCostEstimate)
async def estimate(body: EstimateRequest, session: BrowserSession = Depends(require_source)):
    return await session.estimate_tier_change(body.target_tier, body.paths)


@router.post("/change", response_model=HydrationJob)
async def change_tier(body: TierChangeRequest, session: BrowserSession = Depends(require_source)):
    """Start a migration job for listed files."""
    try:
        return await session.change_tier(body.target_tier, body.paths)
    except ValueError as e:
        raise HTTPException(400, str(e))


@router.get("/jobs", response_model=list[HydrationJob])
async def list_jobs(session: BrowserSession = Depends(get_session)):
    return session.jobs.jobs


@router.get("/jobs/{job_id}", response_model=HydrationJob)
async def get_job(job_id: str, session: BrowserSession = Depends(get_session)):
    job = session.jobs.get_job(job_id)
    if job is None:
        raise HTTPException(404, f"Unknown job: {job_id}")
    return job


@router.post("/jobs/{job_id}/cancel", response_model=HydrationJob)
async def cancel_job(job_id: str, session: BrowserSession = Depends(get_session)):
    """Cancel a running job; it ends as failed."""
    if session.jobs.get_job(job_id) is None:
        raise HTTPException(404, f"Unknown job: {job_id}")
    if not session.cancel_job(job_id):
        raise HTTPException(409, "Job is not running")
    return session.jobs.get_job(job_id)
