"""Playlist ordering.

A playlist's entries carry an integer ``order``. After :func:`replace_entries`
the orders are exactly ``0..N-1`` and match the position in the supplied list.
:func:`append_entry` extends at ``max + 1``. :func:`remove_by_content` leaves
gaps on purpose; a caller that wants a dense order after a removal reads the
current ids, filters them and calls :func:`replace_entries` with the result.
"""

import os
import logging
from typing import NamedTuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mediasignage.errors import NotFound
from mediasignage.models.content import Content
from mediasignage.models.playlist import Playlist, PlaylistEntry
from mediasignage.services.auth import OwnerContext

logger = logging.getLogger(__name__)

APPEND_RETRY_ATTEMPTS = max(1, int(os.getenv("SIGNAGE_APPEND_RETRY_ATTEMPTS", "3")))


class PlaylistAggregates(NamedTuple):
    total_duration: int
    total_size: int


def get_owned_playlist(db: Session, owner: OwnerContext, playlist_id: str) -> Playlist:
    playlist = (
        db.query(Playlist)
        .filter(Playlist.id == playlist_id, Playlist.user_id == owner.user_id)
        .first()
    )
    if not playlist:
        raise NotFound("Playlist not found")
    return playlist


def _ensure_owned_content(db: Session, owner: OwnerContext, content_ids: list[str]) -> None:
    wanted = set(content_ids)
    if not wanted:
        return
    found = {
        row[0]
        for row in db.query(Content.id)
        .filter(Content.id.in_(list(wanted)), Content.user_id == owner.user_id)
        .all()
    }
    if wanted - found:
        raise NotFound("Content not found")


def _next_order(db: Session, playlist_id: str) -> int:
    max_order = (
        db.query(func.max(PlaylistEntry.order))
        .filter(PlaylistEntry.playlist_id == playlist_id)
        .scalar()
    )
    return (max_order if max_order is not None else -1) + 1


def _is_order_collision(exc: IntegrityError) -> bool:
    # SQLite names the columns, PostgreSQL names the constraint.
    message = str(exc.orig)
    return "ux_playlist_entry_order" in message or "playlist_entry.order" in message


def replace_entries(db: Session, owner: OwnerContext, playlist_id: str, content_ids: list[str]) -> Playlist:
    """Make ``content_ids`` the playlist's full ordered membership.

    Duplicate ids yield duplicate entries. Any pending changes on the session
    (e.g. a renamed playlist) commit in the same transaction.
    """
    playlist = get_owned_playlist(db, owner, playlist_id)
    _ensure_owned_content(db, owner, content_ids)
    db.query(PlaylistEntry).filter(PlaylistEntry.playlist_id == playlist.id).delete(synchronize_session=False)
    db.flush()
    db.add_all(
        [
            PlaylistEntry(playlist_id=playlist.id, content_id=content_id, order=index)
            for index, content_id in enumerate(content_ids)
        ]
    )
    db.commit()
    db.refresh(playlist)
    return playlist


def append_entry(db: Session, owner: OwnerContext, playlist_id: str, content_id: str) -> PlaylistEntry:
    """Add ``content_id`` at the end of the playlist.

    Two appends racing on the same playlist can read the same max order; the
    unique (playlist_id, order) constraint rejects the loser, which re-reads
    the max and tries again.
    """
    playlist = get_owned_playlist(db, owner, playlist_id)
    _ensure_owned_content(db, owner, [content_id])
    playlist_key = playlist.id

    for attempt in range(1, APPEND_RETRY_ATTEMPTS + 1):
        entry = PlaylistEntry(
            playlist_id=playlist_key,
            content_id=content_id,
            order=_next_order(db, playlist_key),
        )
        db.add(entry)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if not _is_order_collision(exc):
                logger.error("Append to playlist %s failed: %s", playlist_key, exc.orig)
                raise
            if attempt == APPEND_RETRY_ATTEMPTS:
                raise
            logger.warning(
                "Order collision appending to playlist %s (attempt %d/%d), retrying",
                playlist_key,
                attempt,
                APPEND_RETRY_ATTEMPTS,
            )
            continue
        db.refresh(entry)
        return entry


def remove_by_content(db: Session, owner: OwnerContext, playlist_id: str, content_id: str) -> int:
    """Delete every entry of ``content_id`` in the playlist. No renumbering."""
    playlist = get_owned_playlist(db, owner, playlist_id)
    removed = (
        db.query(PlaylistEntry)
        .filter(PlaylistEntry.playlist_id == playlist.id, PlaylistEntry.content_id == content_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return removed


def remove_content_everywhere(db: Session, content_id: str) -> int:
    # Caller owns the transaction; the content row goes in the same commit.
    return (
        db.query(PlaylistEntry)
        .filter(PlaylistEntry.content_id == content_id)
        .delete(synchronize_session=False)
    )


def clear_entries(db: Session, playlist_id: str) -> int:
    return (
        db.query(PlaylistEntry)
        .filter(PlaylistEntry.playlist_id == playlist_id)
        .delete(synchronize_session=False)
    )


def compute_aggregates(playlist: Playlist) -> PlaylistAggregates:
    total_duration = 0
    total_size = 0
    for entry in playlist.entries:
        content = entry.content
        if content is None:
            continue
        total_duration += content.duration or 0
        total_size += content.file_size or 0
    return PlaylistAggregates(total_duration=total_duration, total_size=total_size)
