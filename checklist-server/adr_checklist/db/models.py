"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.sql import func

from adr_checklist.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class ArtifactRecord(Base):
    __tablename__ = "artifact_records"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    checklist_type = Column(String(20), nullable=False, index=True)
    checklist_hash = Column(String(128), unique=True, nullable=False, index=True)
    file_path = Column(String(500), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    email_sent = Column(Boolean, nullable=False, default=False)
    meta = Column(Text, nullable=False, default="{}")
