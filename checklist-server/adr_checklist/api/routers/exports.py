"""Server side export: download link or e-mail delivery."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from adr_checklist.api.deps import (
    artifact_http_error,
    get_db_session,
    get_export_pipeline,
    mail_http_error,
)
from adr_checklist.modules.artifacts.exceptions import ArtifactError
from adr_checklist.modules.export.pipeline import ChecklistExportPipeline, ExportResult
from adr_checklist.modules.mail.exceptions import MailerError
from adr_checklist.schemas import ChecklistFormPayload, ExportResponse, SuccessResponse

router = APIRouter()


def _to_response(result: ExportResult) -> ExportResponse:
    return ExportResponse(
        checklist_hash=result.checklist_hash,
        checklist_type=result.checklist_type,
        record_id=result.stored.record.id,
        created=result.stored.created,
        download_url=result.download_url,
        archive_name=result.archive.file_name,
        document_name=result.document.file_name,
        size_bytes=result.archive.size_bytes,
        photo_count=result.archive.photo_count,
        skipped_photos=len(result.archive.skipped),
        emailed_to=result.emailed_to,
    )


async def _run(
    payload: ChecklistFormPayload,
    pipeline: ChecklistExportPipeline,
    db: AsyncSession,
    *,
    send_email: bool,
) -> ExportResult:
    try:
        result = await pipeline.export(payload.to_domain(), send_email=send_email)
    except ArtifactError as exc:
        raise artifact_http_error(exc, upstream_status=status.HTTP_502_BAD_GATEWAY) from exc
    except MailerError as exc:
        # the archive was stored before delivery was attempted
        await db.commit()
        raise mail_http_error(exc) from exc
    await db.commit()
    return result


@router.post("/download", response_model=SuccessResponse)
async def export_download(
    payload: ChecklistFormPayload,
    pipeline: ChecklistExportPipeline = Depends(get_export_pipeline),
    db: AsyncSession = Depends(get_db_session),
):
    result = await _run(payload, pipeline, db, send_email=False)
    message = "Archive stored" if result.stored.created else "Archive already stored, retention extended"
    return SuccessResponse(message=message, data=_to_response(result).model_dump(mode="json"))


@router.post("/email", response_model=SuccessResponse)
async def export_email(
    payload: ChecklistFormPayload,
    pipeline: ChecklistExportPipeline = Depends(get_export_pipeline),
    db: AsyncSession = Depends(get_db_session),
):
    result = await _run(payload, pipeline, db, send_email=True)
    return SuccessResponse(
        message=f"Email sent successfully to {len(result.emailed_to)} recipient(s)",
        data=_to_response(result).model_dump(mode="json"),
    )
