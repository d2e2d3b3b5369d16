# app/services/voices_service.py

import logging
from typing import Optional, Dict, Any
from uuid import UUID
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.voice import Voice
from app.schemas.voice import VoiceCreate, VoiceUpdate, VoiceRead, VoiceList
from app.services.cache_service import CacheService
from app.config import VOICES_LIST_TTL_SECONDS

logger = logging.getLogger(__name__)

LIST_PREFIX = "voices:list"
DETAIL_PREFIX = "voices:detail"


class VoiceNameTaken(Exception):
    """Raised when a create or rename collides with an existing voice name."""

    def __init__(self, name: str):
        super().__init__(f"Voice name already exists: {name}")
        self.name = name


def _detail_key(cache: CacheService, voice_id: UUID) -> str:
    return cache.generate_key(DETAIL_PREFIX, {"id": str(voice_id)})


def _to_json(voice: Voice) -> Dict[str, Any]:
    return VoiceRead.model_validate(voice).model_dump(mode="json")


def _commit(db: Session, voice: Voice) -> None:
    """Commit; only a clash with another voice's name becomes VoiceNameTaken, other integrity errors propagate."""
    name, voice_id = voice.name, voice.id
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if name is not None:
            clash = select(Voice.id).where(Voice.name == name)
            if voice_id is not None:
                clash = clash.where(Voice.id != voice_id)
            if db.execute(clash).first() is not None:
                raise VoiceNameTaken(name)
        raise
    db.refresh(voice)


async def list_voices(
    db: Session,
    cache: CacheService,
    skip: int = 0,
    limit: int = 20,
    language: Optional[str] = None,
    gender: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Read-through listing: the page is cached under a key derived from the
    query parameters (unset filters do not change the key), for
    VOICES_LIST_TTL_SECONDS. Writes do not evict list pages.
    """
    key = cache.generate_key(LIST_PREFIX, {
        "skip": skip,
        "limit": limit,
        "language": language,
        "gender": gender,
        "is_active": is_active,
    })
    cached = await cache.get(key)
    if cached is not None:
        return cached

    stmt = select(Voice)
    if language is not None:
        stmt = stmt.where(Voice.language == language)
    if gender is not None:
        stmt = stmt.where(Voice.gender == gender)
    if is_active is not None:
        stmt = stmt.where(Voice.is_active == is_active)

    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    rows = db.execute(stmt.order_by(Voice.created_at, Voice.name).offset(skip).limit(limit)).scalars().all()

    page = VoiceList(
        items=[VoiceRead.model_validate(v) for v in rows],
        total=total,
        skip=skip,
        limit=limit,
    ).model_dump(mode="json")
    await cache.set(key, page, ttl=VOICES_LIST_TTL_SECONDS)
    return page


async def get_voice(db: Session, cache: CacheService, voice_id: UUID) -> Optional[Dict[str, Any]]:
    """Read-through: cache first, then the DB by primary key; None when the voice does not exist."""
    key = _detail_key(cache, voice_id)
    cached = await cache.get(key)
    if cached is not None:
        return cached

    voice = db.get(Voice, voice_id)
    if voice is None:
        return None

    voice_json = _to_json(voice)
    await cache.set(key, voice_json)
    return voice_json


async def create_voice(db: Session, cache: CacheService, data: VoiceCreate) -> Dict[str, Any]:
    values = data.model_dump()
    if values.get("preview_url") is not None:
        values["preview_url"] = str(values["preview_url"])

    voice = Voice(**values)
    db.add(voice)
    _commit(db, voice)
    logger.info("Created voice %s (%s)", voice.id, voice.name)

    voice_json = _to_json(voice)
    await cache.set(_detail_key(cache, voice.id), voice_json)
    return voice_json


async def update_voice(db: Session, cache: CacheService, voice_id: UUID, data: VoiceUpdate) -> Optional[Dict[str, Any]]:
    voice = db.get(Voice, voice_id)
    if voice is None:
        return None

    changes = data.model_dump(exclude_unset=True)
    if changes.get("preview_url") is not None:
        changes["preview_url"] = str(changes["preview_url"])
    for field, value in changes.items():
        setattr(voice, field, value)
    _commit(db, voice)
    logger.info("Updated voice %s: %s", voice_id, sorted(changes))

    await cache.delete(_detail_key(cache, voice_id))
    return _to_json(voice)


async def delete_voice(db: Session, cache: CacheService, voice_id: UUID) -> bool:
    voice = db.get(Voice, voice_id)
    if voice is None:
        return False

    db.delete(voice)
    db.commit()
    logger.info("Deleted voice %s", voice_id)

    await cache.delete(_detail_key(cache, voice_id))
    return True
