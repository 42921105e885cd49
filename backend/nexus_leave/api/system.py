import logging

from fastapi import APIRouter
from sqlalchemy import text

from nexus_leave.db import SessionDep
from nexus_leave.schemas.system import IntegritySweepResponse, SystemHealthResponse
from nexus_leave.services.integrity import get_integrity_summary, run_integrity_sweep

logger = logging.getLogger(__name__)

system_router = APIRouter(prefix="/system", tags=["system"])


@system_router.get("/health", response_model=SystemHealthResponse)
async def system_health(session: SessionDep) -> SystemHealthResponse:
    """Database connectivity plus a summary of out-of-range balances."""
    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("System health: database connectivity failed")
        return SystemHealthResponse(database="disconnected", data_integrity=None)

    summary = await get_integrity_summary(session)
    return SystemHealthResponse(database="connected", data_integrity=summary)


@system_router.post("/integrity-sweep", response_model=IntegritySweepResponse)
async def integrity_sweep(session: SessionDep) -> IntegritySweepResponse:
    """Run the balance integrity sweep now."""
    result = await run_integrity_sweep(session)
    return IntegritySweepResponse(
        negative=result.negative,
        over_cap=result.over_cap,
        needs_attention=result.needs_attention,
        repaired=result.repaired,
        errors=result.errors,
    )
