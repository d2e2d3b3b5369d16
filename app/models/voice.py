# models/voice.py

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Boolean, Enum, Uuid
from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Voice(Base):
    __tablename__ = "voices"

    # Primary key, generated on creation
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Display name, unique across the catalogue
    name = Column(String(100), nullable=False, unique=True)

    description = Column(String(500), nullable=True)

    gender = Column(Enum("male", "female", "neutral", name="voice_gender_enum"), nullable=True)

    # BCP 47 tag such as "en-US"
    language = Column(String(20), nullable=True, index=True)

    # Link to a short audio sample
    preview_url = Column(String(2048), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
