import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from mediasignage.db import Base


class Player(Base):
    __tablename__ = "player"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("user_account.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    playlist_id = Column(String(36), ForeignKey("playlist.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(16), nullable=False, default="offline")
    last_seen = Column(DateTime, nullable=True)
    screenshot = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    playlist = relationship("Playlist", viewonly=True)
