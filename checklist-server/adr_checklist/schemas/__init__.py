"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from adr_checklist.modules.artifacts.models import ArtifactListing, ArtifactMeta, ArtifactRecord
from adr_checklist.modules.checklist.models import (
    ChecklistForm,
    ChecklistVariant,
    MonthYear,
    PhotoDescriptor,
)


class SuccessResponse(BaseModel):
    success: bool = True
    message: str = "OK"
    data: Optional[Any] = None


class _FormModel(BaseModel):
    # the browser form posts camelCase keys; snake_case is accepted too
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MonthYearPayload(_FormModel):
    month: str = ""
    year: str = ""

    @field_validator("month", "year", mode="before")
    @classmethod
    def _digits_only(cls, value: Any) -> str:
        if value is None:
            return ""
        return "".join(ch for ch in str(value) if ch.isdigit())

    def to_domain(self) -> MonthYear:
        return MonthYear(month=self.month, year=self.year)


class PhotoPayload(_FormModel):
    url: str = ""
    name: str = ""
    content_type: str = "image/jpeg"

    def to_domain(self) -> PhotoDescriptor:
        return PhotoDescriptor(url=self.url, name=self.name, content_type=self.content_type)


class ChecklistFormPayload(_FormModel):
    variant: ChecklistVariant = ChecklistVariant.FULL
    driver_name: str = ""
    truck_plate: str = ""
    trailer_plate: str = ""
    inspection_date: str = ""
    driving_licence_expiry: MonthYearPayload = Field(default_factory=MonthYearPayload)
    adr_certificate_expiry: MonthYearPayload = Field(default_factory=MonthYearPayload)
    truck_document_expiry: MonthYearPayload = Field(default_factory=MonthYearPayload)
    trailer_document_expiry: MonthYearPayload = Field(default_factory=MonthYearPayload)
    equipment_checks: dict[str, bool] = Field(default_factory=dict)
    equipment_expiry: dict[str, MonthYearPayload] = Field(default_factory=dict)
    before_loading_checks: dict[str, bool] = Field(default_factory=dict)
    after_loading_checks: dict[str, bool] = Field(default_factory=dict)
    remarks: str = ""
    inspector_name: str = ""
    driver_signature: Optional[str] = None
    inspector_signature: Optional[str] = None
    photos: list[PhotoPayload] = Field(default_factory=list)

    def to_domain(self) -> ChecklistForm:
        return ChecklistForm(
            variant=self.variant,
            driver_name=self.driver_name.strip(),
            truck_plate=self.truck_plate.strip(),
            trailer_plate=self.trailer_plate.strip(),
            inspection_date=self.inspection_date.strip(),
            driving_licence_expiry=self.driving_licence_expiry.to_domain(),
            adr_certificate_expiry=self.adr_certificate_expiry.to_domain(),
            truck_document_expiry=self.truck_document_expiry.to_domain(),
            trailer_document_expiry=self.trailer_document_expiry.to_domain(),
            equipment_checks=dict(self.equipment_checks),
            equipment_expiry={name: value.to_domain() for name, value in self.equipment_expiry.items()},
            before_loading_checks=dict(self.before_loading_checks),
            after_loading_checks=dict(self.after_loading_checks),
            remarks=self.remarks,
            inspector_name=self.inspector_name.strip(),
            driver_signature=self.driver_signature or None,
            inspector_signature=self.inspector_signature or None,
            photos=[photo.to_domain() for photo in self.photos],
        )


class FingerprintResponse(BaseModel):
    checklist_hash: str
    checklist_type: str


class ArtifactMetaSchema(BaseModel):
    driver_name: Optional[str] = None
    truck_plate: Optional[str] = None
    trailer_plate: Optional[str] = None
    inspection_date: Optional[str] = None
    inspector_name: Optional[str] = None

    @classmethod
    def from_domain(cls, meta: ArtifactMeta) -> "ArtifactMetaSchema":
        return cls(**meta.to_mapping())


class ArtifactRecordResponse(BaseModel):
    id: str
    checklist_type: str
    checklist_hash: str
    file_path: str
    created_at: Optional[datetime] = None
    expires_at: datetime
    email_sent: bool
    meta: ArtifactMetaSchema
    download_url: Optional[str] = None

    @classmethod
    def from_domain(cls, record: ArtifactRecord, download_url: Optional[str] = None) -> "ArtifactRecordResponse":
        return cls(
            id=record.id,
            checklist_type=record.checklist_type,
            checklist_hash=record.checklist_hash,
            file_path=record.file_path,
            created_at=record.created_at,
            expires_at=record.expires_at,
            email_sent=record.email_sent,
            meta=ArtifactMetaSchema.from_domain(record.meta),
            download_url=download_url,
        )

    @classmethod
    def from_listing(cls, listing: ArtifactListing) -> "ArtifactRecordResponse":
        return cls.from_domain(listing.record, listing.download_url)


class StoreResponse(BaseModel):
    created: bool
    download_url: Optional[str] = None
    record: ArtifactRecordResponse


class ExportResponse(BaseModel):
    checklist_hash: str
    checklist_type: str
    record_id: str
    created: bool
    download_url: Optional[str] = None
    archive_name: str
    document_name: str
    size_bytes: int
    photo_count: int
    skipped_photos: int = 0
    emailed_to: list[str] = Field(default_factory=list)


class ArtifactListResponse(BaseModel):
    total: int
    items: list[ArtifactRecordResponse]


class ArtifactLinkResponse(BaseModel):
    id: str
    checklist_hash: str
    download_url: str


class DeleteArtifactRequest(BaseModel):
    id: str = Field(..., min_length=1)
    username: str = ""
    password: str = ""


class SweepReportResponse(BaseModel):
    deleted_rows: int
    deleted_files_attempted: int
