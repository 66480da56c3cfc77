import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime
from mediasignage.db import Base


class User(Base):
    __tablename__ = "user_account"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
