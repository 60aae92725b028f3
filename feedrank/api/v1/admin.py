"""Admin endpoints for engine management (recompute, corpus reload)."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from feedrank.dependencies import get_scheduler, require_admin_key
from feedrank.services.scheduler import RecomputeScheduler
from feedrank.utils.exceptions import CalculationFailedError
from feedrank.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(dependencies=[Depends(require_admin_key)])


class AdminResponse(BaseModel):
    success: bool
    data: dict
    message: str


@router.post("/recompute", response_model=AdminResponse)
async def recompute(
    scheduler: RecomputeScheduler = Depends(get_scheduler),
) -> AdminResponse:
    """
    Run a full recompute cycle now.

    If a cycle is already running the request is coalesced into one
    follow-up cycle and this call returns without a report.
    """
    report = await scheduler.trigger()
    if report is None:
        if scheduler.is_running:
            return AdminResponse(
                success=True,
                data={"coalesced": True},
                message="Recompute already running; queued a follow-up cycle",
            )
        raise CalculationFailedError(message="Recompute cycle failed; will retry on next tick")

    logger.info("Recompute triggered via admin API")
    return AdminResponse(
        success=True,
        data=report.to_dict(),
        message=f"Recomputed recommendations for {report.users_processed} users",
    )


@router.post("/reload", response_model=AdminResponse, status_code=status.HTTP_202_ACCEPTED)
async def reload_content(
    scheduler: RecomputeScheduler = Depends(get_scheduler),
) -> AdminResponse:
    """
    Signal that the content corpus changed.

    The recompute runs after the debounce period, so bursts of reloads
    collapse into one cycle.
    """
    scheduler.notify_corpus_changed()
    return AdminResponse(
        success=True,
        data={"debounce_seconds": scheduler.debounce_seconds},
        message="Recompute scheduled",
    )
