import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from mediasignage.db import Base


class Playlist(Base):
    __tablename__ = "playlist"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("user_account.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Writes go through mediasignage.services.ordering; this is read-only.
    entries = relationship(
        "PlaylistEntry",
        order_by="PlaylistEntry.order",
        viewonly=True,
    )


class PlaylistEntry(Base):
    __tablename__ = "playlist_entry"
    __table_args__ = (
        UniqueConstraint("playlist_id", "order", name="ux_playlist_entry_order"),
    )
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    playlist_id = Column(String(36), ForeignKey("playlist.id", ondelete="CASCADE"), nullable=False, index=True)
    content_id = Column(String(36), ForeignKey("content.id", ondelete="CASCADE"), nullable=False, index=True)
    order = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    content = relationship("Content", lazy="joined", viewonly=True)
