"""Checklist fingerprint endpoint."""
from fastapi import APIRouter

from adr_checklist.modules.checklist.identity import fingerprint_form
from adr_checklist.schemas import ChecklistFormPayload, FingerprintResponse, SuccessResponse

router = APIRouter()


@router.post("/fingerprint", response_model=SuccessResponse)
async def checklist_fingerprint(payload: ChecklistFormPayload):
    form = payload.to_domain()
    data = FingerprintResponse(checklist_hash=fingerprint_form(form), checklist_type=form.checklist_type)
    return SuccessResponse(data=data.model_dump(mode="json"))
