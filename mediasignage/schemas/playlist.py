from datetime import datetime
from pydantic import AliasChoices, Field
from mediasignage.schemas.base import CamelModel
from mediasignage.schemas.content import ContentOut


class PlaylistCreateIn(CamelModel):
    name: str = Field(..., min_length=1)


class PlaylistUpdateIn(CamelModel):
    name: str | None = None
    content_ids: list[str] | None = None


class PlaylistContentIn(CamelModel):
    content_id: str = Field(..., min_length=1)


class PlaylistEntryOut(CamelModel):
    id: str
    playlist_id: str
    content_id: str
    order: int
    created_at: datetime | None = None
    content: ContentOut | None = None


class PlaylistBriefOut(CamelModel):
    id: str
    name: str


class PlaylistOut(CamelModel):
    id: str
    name: str
    user_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    # The admin UI reads entries under "playlistContents".
    entries: list[PlaylistEntryOut] = Field(
        default=[],
        validation_alias=AliasChoices("entries", "playlistContents"),
        serialization_alias="playlistContents",
    )
    total_duration: int = 0
    total_size: int = 0
