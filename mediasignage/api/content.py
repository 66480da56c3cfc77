import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session
from mediasignage.db import get_db
from mediasignage.errors import NotFound, ValidationError
from mediasignage.models.content import Content
from mediasignage.schemas.content import ContentOut, ContentUpdateIn
from mediasignage.services import ordering
from mediasignage.services.auth import OwnerContext, get_current_owner
from mediasignage.services.storage import classify_content_type, remove_file, save_media

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content", tags=["content"])


def _naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _optional_int(value: str | None, field_name: str) -> int | None:
    raw = (value or "").strip()
    if not raw:
        return None
    try:
        parsed = int(raw)
    except ValueError as exc:
        raise ValidationError(f"{field_name} must be an integer") from exc
    if parsed < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return parsed


def _optional_datetime(value: str | None, field_name: str) -> datetime | None:
    raw = (value or "").strip()
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValidationError(f"{field_name} must be an ISO 8601 date") from exc
    return _naive_utc(parsed)


def get_owned_content(db: Session, owner: OwnerContext, content_id: str) -> Content:
    content = (
        db.query(Content)
        .filter(Content.id == content_id, Content.user_id == owner.user_id)
        .first()
    )
    if not content:
        raise NotFound("Content not found")
    return content


@router.post("", response_model=ContentOut, status_code=201)
def upload_content(
    file: UploadFile | None = File(None),
    name: str | None = Form(None),
    description: str | None = Form(None),
    duration: str | None = Form(None),
    start_date: str | None = Form(None, alias="startDate"),
    end_date: str | None = Form(None, alias="endDate"),
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
):
    media_name = (name or "").strip()
    if file is None or not (file.filename or "").strip() or not media_name:
        raise ValidationError("File and name are required")
    classify_content_type(file.filename)
    parsed_duration = _optional_int(duration, "duration")
    parsed_start = _optional_datetime(start_date, "startDate")
    parsed_end = _optional_datetime(end_date, "endDate")

    path, size, content_type = save_media(file)
    content = Content(
        user_id=owner.user_id,
        name=media_name,
        description=(description or "").strip() or None,
        type=content_type,
        file_path=path,
        file_size=size,
        duration=parsed_duration,
        start_date=parsed_start,
        end_date=parsed_end,
    )
    db.add(content)
    try:
        db.commit()
    except Exception:
        db.rollback()
        remove_file(path)
        raise
    db.refresh(content)
    logger.info("Content %s uploaded by %s", content.id, owner.user_id)
    return content


@router.get("", response_model=list[ContentOut])
def list_content(owner: OwnerContext = Depends(get_current_owner), db: Session = Depends(get_db)):
    return (
        db.query(Content)
        .filter(Content.user_id == owner.user_id)
        .order_by(Content.created_at.desc(), Content.id.desc())
        .all()
    )


@router.get("/{content_id}", response_model=ContentOut)
def get_content(content_id: str, owner: OwnerContext = Depends(get_current_owner), db: Session = Depends(get_db)):
    return get_owned_content(db, owner, content_id)


@router.put("/{content_id}", response_model=ContentOut)
def update_content(
    content_id: str,
    payload: ContentUpdateIn,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
):
    content = get_owned_content(db, owner, content_id)
    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes:
        cleaned = (changes["name"] or "").strip()
        if not cleaned:
            raise ValidationError("Content name cannot be empty")
        content.name = cleaned
    if "description" in changes:
        content.description = changes["description"]
    if "duration" in changes:
        content.duration = changes["duration"]
    if "start_date" in changes:
        content.start_date = _naive_utc(changes["start_date"])
    if "end_date" in changes:
        content.end_date = _naive_utc(changes["end_date"])
    db.commit()
    db.refresh(content)
    return content


@router.delete("/{content_id}")
def delete_content(content_id: str, owner: OwnerContext = Depends(get_current_owner), db: Session = Depends(get_db)):
    content = get_owned_content(db, owner, content_id)
    remove_file(content.file_path)
    removed_entries = ordering.remove_content_everywhere(db, content.id)
    db.delete(content)
    db.commit()
    logger.info("Content %s deleted (%d playlist entries removed)", content_id, removed_entries)
    return {"message": "Content deleted successfully"}
