"""Stored archive endpoints: raw store, history, links, preview, delete."""
from pathlib import PurePosixPath
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from adr_checklist.api.deps import (
    artifact_http_error,
    get_app_container,
    get_artifact_service,
    get_db_session,
)
from adr_checklist.core.container import ApplicationContainer
from adr_checklist.core.security import LinkTokenError, ensure_admin_credentials
from adr_checklist.infrastructure.storage.blob_storage import BlobNotFoundError, BlobStorageError
from adr_checklist.modules.artifacts.exceptions import ArtifactError
from adr_checklist.modules.artifacts.models import ArtifactMeta
from adr_checklist.modules.artifacts.service import ArtifactStoreService
from adr_checklist.schemas import (
    ArtifactLinkResponse,
    ArtifactListResponse,
    ArtifactRecordResponse,
    DeleteArtifactRequest,
    StoreResponse,
    SuccessResponse,
)

router = APIRouter()

NO_STORE = {"Cache-Control": "no-store"}


@router.post("/store", response_model=SuccessResponse)
async def store_artifact(
    checklist_type: str = Form(...),
    checklist_hash: str = Form(...),
    meta: Optional[str] = Form(None),
    email_sent: bool = Form(False),
    file: Optional[UploadFile] = File(None),
    service: ArtifactStoreService = Depends(get_artifact_service),
    db: AsyncSession = Depends(get_db_session),
):
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing file")
    try:
        content = await file.read()
    finally:
        await file.close()

    try:
        result = await service.store(
            checklist_type.strip(),
            checklist_hash,
            content,
            meta=ArtifactMeta.parse(meta),
            email_sent=email_sent,
        )
    except ArtifactError as exc:
        raise artifact_http_error(exc, upstream_status=status.HTTP_502_BAD_GATEWAY) from exc
    await db.commit()

    data = StoreResponse(
        created=result.created,
        download_url=result.download_url,
        record=ArtifactRecordResponse.from_domain(result.record, result.download_url),
    )
    return SuccessResponse(message="Stored" if result.created else "Updated", data=data.model_dump(mode="json"))


@router.get("", response_model=SuccessResponse)
async def list_artifacts(
    response: Response,
    checklist_type: Optional[str] = Query(None, alias="type"),
    q: Optional[str] = Query(None),
    service: ArtifactStoreService = Depends(get_artifact_service),
):
    try:
        listings = await service.list_records(checklist_type, search=q)
    except ArtifactError as exc:
        raise artifact_http_error(exc) from exc

    response.headers.update(NO_STORE)
    items = [ArtifactRecordResponse.from_listing(listing) for listing in listings]
    data = ArtifactListResponse(total=len(items), items=items)
    return SuccessResponse(data=data.model_dump(mode="json"))


@router.get("/link", response_model=SuccessResponse)
async def artifact_link(
    record_id: Optional[str] = Query(None, alias="id"),
    checklist_hash: Optional[str] = Query(None, alias="hash"),
    service: ArtifactStoreService = Depends(get_artifact_service),
):
    try:
        listing = await service.resolve_link(record_id=record_id, checklist_hash=checklist_hash)
    except ArtifactError as exc:
        raise artifact_http_error(exc) from exc

    data = ArtifactLinkResponse(
        id=listing.record.id,
        checklist_hash=listing.record.checklist_hash,
        download_url=listing.download_url or "",
    )
    return SuccessResponse(data=data.model_dump(mode="json"))


@router.get("/preview")
async def preview_artifact(
    record_id: Optional[str] = Query(None, alias="id"),
    checklist_hash: Optional[str] = Query(None, alias="hash"),
    service: ArtifactStoreService = Depends(get_artifact_service),
):
    try:
        document = await service.preview(record_id=record_id, checklist_hash=checklist_hash)
    except ArtifactError as exc:
        raise artifact_http_error(exc) from exc

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={
            "Content-Disposition": f'inline; filename="{document.file_name}"',
            **NO_STORE,
        },
    )


@router.get("/download", name="download_artifact")
async def download_artifact(
    token: str = Query(..., min_length=1),
    container: ApplicationContainer = Depends(get_app_container),
):
    storage = container.storage
    try:
        path, content = await storage.open_signed(token)
    except LinkTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    except BlobNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except BlobStorageError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    file_name = PurePosixPath(path).name
    return Response(
        content=content,
        media_type=storage.guess_content_type(path),
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.post("/delete", response_model=SuccessResponse)
async def delete_artifact(
    payload: DeleteArtifactRequest,
    container: ApplicationContainer = Depends(get_app_container),
    service: ArtifactStoreService = Depends(get_artifact_service),
    db: AsyncSession = Depends(get_db_session),
):
    ensure_admin_credentials(payload.username, payload.password, container.settings)
    try:
        record = await service.delete(payload.id)
    except ArtifactError as exc:
        raise artifact_http_error(exc) from exc
    await db.commit()
    return SuccessResponse(message="Deleted", data={"id": record.id, "checklist_hash": record.checklist_hash})
