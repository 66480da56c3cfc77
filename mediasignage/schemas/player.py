from datetime import datetime
from typing import Literal
from pydantic import Field
from mediasignage.schemas.base import CamelModel
from mediasignage.schemas.playlist import PlaylistBriefOut, PlaylistOut


class PlayerCreateIn(CamelModel):
    name: str = Field(..., min_length=1)
    description: str | None = None


class PlayerUpdateIn(CamelModel):
    name: str | None = None
    description: str | None = None
    playlist_id: str | None = None


class PlayerStatusIn(CamelModel):
    status: Literal["online", "offline"]


class PlayerOut(CamelModel):
    id: str
    name: str
    description: str | None = None
    playlist_id: str | None = None
    user_id: str
    status: str
    live_status: str = "offline"
    last_seen: datetime | None = None
    screenshot: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    playlist: PlaylistBriefOut | None = None


class PlayerDetailOut(PlayerOut):
    playlist: PlaylistOut | None = None
