"""Scheduled maintenance triggers."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from adr_checklist.api.deps import get_db_session, get_retention_sweeper
from adr_checklist.core.security import require_cron_secret
from adr_checklist.modules.retention.service import RetentionSweeper
from adr_checklist.schemas import SuccessResponse, SweepReportResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/purge-expired", response_model=SuccessResponse, dependencies=[Depends(require_cron_secret)])
async def purge_expired(
    sweeper: RetentionSweeper = Depends(get_retention_sweeper),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        report = await sweeper.sweep()
        await db.commit()
    except SQLAlchemyError as exc:
        logger.error("Retention sweep aborted: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    data = SweepReportResponse(
        deleted_rows=report.deleted_rows,
        deleted_files_attempted=report.deleted_files_attempted,
    )
    return SuccessResponse(message="Purge complete", data=data.model_dump(mode="json"))
