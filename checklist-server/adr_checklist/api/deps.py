"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import httpx
from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from adr_checklist.core.container import ApplicationContainer, get_container
from adr_checklist.infrastructure.database.session import get_session
from adr_checklist.modules.artifacts.exceptions import (
    ArtifactConflictError,
    ArtifactError,
    ArtifactNotFoundError,
    ArtifactValidationError,
)
from adr_checklist.modules.artifacts.service import ArtifactStoreService
from adr_checklist.modules.export.pipeline import ChecklistExportPipeline
from adr_checklist.modules.mail.exceptions import MailerError, NoRecipientsError
from adr_checklist.modules.packaging.archive import ArchivePackager
from adr_checklist.modules.retention.service import RetentionSweeper


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


def get_app_container() -> ApplicationContainer:
    return get_container()


async def get_photo_client(
    container: ApplicationContainer = Depends(get_app_container),
) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with container.photo_client() as client:
        yield client


def get_artifact_service(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> ArtifactStoreService:
    return ArtifactStoreService.with_session(db, container)


def get_export_pipeline(
    store: ArtifactStoreService = Depends(get_artifact_service),
    client: httpx.AsyncClient = Depends(get_photo_client),
    container: ApplicationContainer = Depends(get_app_container),
) -> ChecklistExportPipeline:
    return ChecklistExportPipeline(
        container.renderer,
        ArchivePackager(client),
        store,
        mailer=container.mailer,
    )


def get_retention_sweeper(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> RetentionSweeper:
    return RetentionSweeper.with_session(db, container)


def artifact_http_error(exc: ArtifactError, *, upstream_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> HTTPException:
    if isinstance(exc, ArtifactValidationError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, ArtifactNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ArtifactConflictError):
        code = status.HTTP_409_CONFLICT
    else:
        code = upstream_status
    return HTTPException(status_code=code, detail=str(exc))


def mail_http_error(exc: MailerError) -> HTTPException:
    if isinstance(exc, NoRecipientsError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
