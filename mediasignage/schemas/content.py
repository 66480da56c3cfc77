from datetime import datetime
from pydantic import Field
from mediasignage.schemas.base import CamelModel


class ContentOut(CamelModel):
    id: str
    name: str
    description: str | None = None
    type: str
    file_path: str
    file_size: int
    duration: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    user_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContentUpdateIn(CamelModel):
    # Omitted fields keep their stored value; explicit nulls overwrite.
    name: str | None = None
    description: str | None = None
    duration: int | None = Field(default=None, ge=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
