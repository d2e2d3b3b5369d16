# app/routers/voices.py

import json
import logging
from pathlib import Path
from typing import Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import UUID4, ValidationError
from sqlalchemy.orm import Session
from jsonschema import Draft7Validator, FormatChecker

from app.database import get_db
from app.responses import envelope
from app.schemas.voice import VoiceCreate, VoiceUpdate
from app.services.cache_factory import get_cache_service
from app.services.cache_service import CacheService
from app.services import voices_service as svc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/voices", tags=["voices"])

# Load and prepare schema once at import time
schema_path = Path(__file__).resolve().parents[2] / "voice_schema.json"
with schema_path.open("r", encoding="utf-8") as f:
    voice_schema = json.load(f)

json_validator = Draft7Validator(voice_schema, format_checker=FormatChecker())


def _validation_errors(payload) -> Optional[JSONResponse]:
    errors = sorted(json_validator.iter_errors(payload), key=lambda e: list(e.path))
    if not errors:
        return None
    return JSONResponse(
        status_code=400,
        content={"validationErrors": [e.message for e in errors]},
    )


async def _read_json(request: Request):
    try:
        return await request.json()
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid JSON format")


@router.get("")
async def list_voices(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    language: Optional[str] = Query(None, max_length=20),
    gender: Optional[Literal["male", "female", "neutral"]] = None,
    is_active: Optional[bool] = None,
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache_service),
):
    """
    GET /voices
    Paginated listing with optional language/gender/is_active filters.
    Pages are cached briefly; a stale page may be served right after a write.
    """
    page = await svc.list_voices(db, cache, skip=skip, limit=limit, language=language,
                                 gender=gender, is_active=is_active)
    return envelope(page)


@router.get("/{voice_id}")
async def get_voice(
    voice_id: UUID4,
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache_service),
):
    """
    GET /voices/{voice_id}
      - 200: Found
      - 404: Not found
      - 422: voice_id is not a UUID v4
    """
    voice = await svc.get_voice(db, cache, voice_id)
    if voice is None:
        raise HTTPException(status_code=404, detail="Voice not found")
    return envelope(voice)


@router.post("")
async def create_voice(
    request: Request,
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache_service),
):
    """
    POST /voices
      - 201: Created, returns the stored voice
      - 400: Invalid JSON or JSON schema validation failed (validationErrors list)
      - 409: A voice with the same name exists
      - 422: Passed the schema but failed model validation
    """
    payload = await _read_json(request)
    invalid = _validation_errors(payload)
    if invalid is not None:
        return invalid

    try:
        data = VoiceCreate(**payload)
    except ValidationError as ex:
        raise HTTPException(status_code=422, detail=ex.errors(include_url=False, include_context=False))

    try:
        voice = await svc.create_voice(db, cache, data)
    except svc.VoiceNameTaken as ex:
        raise HTTPException(status_code=409, detail=str(ex))
    return envelope(voice, status_code=201)


@router.patch("/{voice_id}")
async def update_voice(
    voice_id: UUID4,
    data: VoiceUpdate,
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache_service),
):
    """PATCH /voices/{voice_id}: partial update; 404 if missing, 409 on name clash."""
    try:
        voice = await svc.update_voice(db, cache, voice_id, data)
    except svc.VoiceNameTaken as ex:
        raise HTTPException(status_code=409, detail=str(ex))
    if voice is None:
        raise HTTPException(status_code=404, detail="Voice not found")
    return envelope(voice)


@router.delete("/{voice_id}", status_code=204)
async def delete_voice(
    voice_id: UUID4,
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache_service),
):
    if not await svc.delete_voice(db, cache, voice_id):
        raise HTTPException(status_code=404, detail="Voice not found")
    return Response(status_code=204)
