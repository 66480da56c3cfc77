import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from mediasignage.db import get_db
from mediasignage.errors import ValidationError
from mediasignage.models.player import Player
from mediasignage.models.playlist import Playlist
from mediasignage.schemas.playlist import (
    PlaylistContentIn,
    PlaylistCreateIn,
    PlaylistEntryOut,
    PlaylistOut,
    PlaylistUpdateIn,
)
from mediasignage.services import ordering
from mediasignage.services.auth import OwnerContext, get_current_owner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/playlists", tags=["playlists"])


def playlist_payload(playlist: Playlist) -> PlaylistOut:
    aggregates = ordering.compute_aggregates(playlist)
    return PlaylistOut.model_validate(playlist).model_copy(
        update={
            "total_duration": aggregates.total_duration,
            "total_size": aggregates.total_size,
        }
    )


def _clean_name(value: str | None) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError("Playlist name cannot be empty")
    return cleaned


@router.post("", response_model=PlaylistOut, status_code=201)
def create_playlist(
    payload: PlaylistCreateIn,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
):
    playlist = Playlist(user_id=owner.user_id, name=_clean_name(payload.name))
    db.add(playlist)
    db.commit()
    db.refresh(playlist)
    return playlist_payload(playlist)


@router.get("", response_model=list[PlaylistOut])
def list_playlists(owner: OwnerContext = Depends(get_current_owner), db: Session = Depends(get_db)):
    playlists = (
        db.query(Playlist)
        .filter(Playlist.user_id == owner.user_id)
        .order_by(Playlist.created_at.desc(), Playlist.id.desc())
        .all()
    )
    return [playlist_payload(playlist) for playlist in playlists]


@router.get("/{playlist_id}", response_model=PlaylistOut)
def get_playlist(playlist_id: str, owner: OwnerContext = Depends(get_current_owner), db: Session = Depends(get_db)):
    return playlist_payload(ordering.get_owned_playlist(db, owner, playlist_id))


@router.put("/{playlist_id}", response_model=PlaylistOut)
def update_playlist(
    playlist_id: str,
    payload: PlaylistUpdateIn,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
):
    playlist = ordering.get_owned_playlist(db, owner, playlist_id)
    if payload.name is not None:
        playlist.name = _clean_name(payload.name)
    if payload.content_ids is not None:
        # Rename and reorder land in one commit.
        playlist = ordering.replace_entries(db, owner, playlist.id, payload.content_ids)
    else:
        db.commit()
        db.refresh(playlist)
    return playlist_payload(playlist)


@router.delete("/{playlist_id}")
def delete_playlist(playlist_id: str, owner: OwnerContext = Depends(get_current_owner), db: Session = Depends(get_db)):
    playlist = ordering.get_owned_playlist(db, owner, playlist_id)
    ordering.clear_entries(db, playlist.id)
    db.query(Player).filter(Player.playlist_id == playlist.id).update(
        {"playlist_id": None},
        synchronize_session=False,
    )
    db.delete(playlist)
    db.commit()
    logger.info("Playlist %s deleted", playlist_id)
    return {"message": "Playlist deleted successfully"}


@router.post("/{playlist_id}/content", response_model=PlaylistEntryOut, status_code=201)
def add_content(
    playlist_id: str,
    payload: PlaylistContentIn,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
):
    return ordering.append_entry(db, owner, playlist_id, payload.content_id.strip())


@router.delete("/{playlist_id}/content/{content_id}")
def remove_content(
    playlist_id: str,
    content_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    db: Session = Depends(get_db),
):
    ordering.remove_by_content(db, owner, playlist_id, content_id)
    return {"message": "Content removed from playlist"}
