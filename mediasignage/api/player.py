import os
import logging
from datetime import datetime
from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session
from mediasignage.db import get_db
from mediasignage.errors import NotFound, ValidationError
from mediasignage.models.player import Player
from mediasignage.schemas.player import (
    PlayerCreateIn,
    PlayerDetailOut,
    PlayerOut,
    PlayerStatusIn,
    PlayerUpdateIn,
)
from mediasignage.services import ordering
from mediasignage.services.auth import OwnerContext, get_current_owner
from mediasignage.services.storage import remove_file, save_screenshot
from mediasignage.api.playlist import playlist_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/players", tags=["players"])
PLAYER_OFFLINE_AFTER_SEC = int(os.getenv("SIGNAGE_PLAYER_OFFLINE_AFTER_SEC", "70"))


def derive_live_status(last_seen: datetime | None, now_utc: datetime | None = None) -> str:
    """Liveness from last-seen age. Never written back to ``Player.status``."""
    if last_seen is None:
        return "offline"
    age = ((now_utc or datetime.utcnow()) - last_seen).total_seconds()
    return "online" if age <= PLAYER_OFFLINE_AFTER_SEC else "offline"


def _player_payload(player: Player) -> PlayerOut:
    return PlayerOut.model_validate(player).model_copy(
        update={"live_status": derive_live_status(player.last_seen)}
    )


def _player_detail_payload(player: Player) -> PlayerDetailOut:
    payload = PlayerDetailOut.model_validate(player)
    return payload.model_copy(
        update={
            "live_status": derive_live_status(player.last_seen),
            "playlist": playlist_payload(player.playlist) if player.playlist else None,
        }
    )


def _get_owned_player(db: Session, owner: OwnerContext, player_id: str) -> Player:
    player = (
        db.query(Player)
        .filter(Player.id == player_id, Player.user_id == owner.user_id)
        .first()
    )
    if not player:
        raise NotFound("Player not found")
    return player


@router.post("", response_model=PlayerOut, status_code=201)
def create_player(
    payload: PlayerCreateIn,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
):
    name = payload.name.strip()
    if not name:
        raise ValidationError("Name is required")
    player = Player(
        user_id=owner.user_id,
        name=name,
        description=(payload.description or "").strip() or None,
        status="offline",
    )
    db.add(player)
    db.commit()
    db.refresh(player)
    return _player_payload(player)


@router.get("", response_model=list[PlayerOut])
def list_players(owner: OwnerContext = Depends(get_current_owner), db: Session = Depends(get_db)):
    players = (
        db.query(Player)
        .filter(Player.user_id == owner.user_id)
        .order_by(Player.created_at.desc(), Player.id.desc())
        .all()
    )
    return [_player_payload(player) for player in players]


@router.get("/{player_id}", response_model=PlayerDetailOut)
def get_player(player_id: str, owner: OwnerContext = Depends(get_current_owner), db: Session = Depends(get_db)):
    return _player_detail_payload(_get_owned_player(db, owner, player_id))


@router.put("/{player_id}", response_model=PlayerOut)
def update_player(
    player_id: str,
    payload: PlayerUpdateIn,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
):
    player = _get_owned_player(db, owner, player_id)
    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes:
        cleaned = (changes["name"] or "").strip()
        if not cleaned:
            raise ValidationError("Player name cannot be empty")
        player.name = cleaned
    if "description" in changes:
        player.description = changes["description"]
    if "playlist_id" in changes:
        playlist_id = (changes["playlist_id"] or "").strip()
        if playlist_id:
            player.playlist_id = ordering.get_owned_playlist(db, owner, playlist_id).id
        else:
            player.playlist_id = None
    db.commit()
    db.refresh(player)
    return _player_payload(player)


@router.delete("/{player_id}")
def delete_player(player_id: str, owner: OwnerContext = Depends(get_current_owner), db: Session = Depends(get_db)):
    player = _get_owned_player(db, owner, player_id)
    screenshot = player.screenshot
    db.delete(player)
    db.commit()
    remove_file(screenshot)
    return {"message": "Player deleted successfully"}


@router.post("/{player_id}/status", response_model=PlayerOut)
def update_player_status(
    player_id: str,
    payload: PlayerStatusIn,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
):
    player = _get_owned_player(db, owner, player_id)
    player.status = payload.status
    player.last_seen = datetime.utcnow()
    db.commit()
    db.refresh(player)
    return _player_payload(player)


@router.post("/{player_id}/screenshot", response_model=PlayerOut)
def upload_screenshot(
    player_id: str,
    screenshot: UploadFile | None = File(None),
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
):
    if screenshot is None or not (screenshot.filename or "").strip():
        raise ValidationError("Screenshot file is required")
    player = _get_owned_player(db, owner, player_id)
    previous = player.screenshot
    new_path = save_screenshot(screenshot)
    player.screenshot = new_path
    player.last_seen = datetime.utcnow()
    try:
        db.commit()
    except Exception:
        db.rollback()
        remove_file(new_path)
        raise
    db.refresh(player)
    if previous and previous != new_path:
        remove_file(previous)
    return _player_payload(player)
