from fastapi import APIRouter

from adr_checklist.api.routers import artifacts, checklists, exports, maintenance


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(checklists.router, prefix="/checklists", tags=["checklists"])
    router.include_router(exports.router, prefix="/exports", tags=["exports"])
    router.include_router(artifacts.router, prefix="/artifacts", tags=["artifacts"])
    router.include_router(maintenance.router, prefix="/maintenance", tags=["maintenance"])
    return router


__all__ = [
    "create_api_router",
]
