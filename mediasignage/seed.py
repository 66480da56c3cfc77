import base64
import logging
import os
from sqlalchemy.orm import Session
from mediasignage.db import SessionLocal, Base, engine
from mediasignage.models.user import User
from mediasignage.models.content import Content
from mediasignage.models.playlist import Playlist, PlaylistEntry
from mediasignage.models.player import Player
from mediasignage.services.auth import hash_password
from mediasignage.services.storage import ensure_storage, media_dir

logger = logging.getLogger(__name__)

ADMIN_EMAIL = os.getenv("SIGNAGE_SEED_ADMIN_EMAIL", "admin@mediasignage.com")
ADMIN_PASSWORD = os.getenv("SIGNAGE_SEED_ADMIN_PASSWORD", "admin123")

PLACEHOLDER_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR4nGNgYAAAAAMAASsJTYQAAAAASUVORK5CYII="
)


def seed() -> User | None:
    """Create the default admin account with one demo playlist and player.

    Returns the created user, or None when the account already exists.
    """
    Base.metadata.create_all(bind=engine)
    ensure_storage()
    db: Session = SessionLocal()
    try:
        if db.query(User).filter(User.email == ADMIN_EMAIL).first():
            logger.info("Default user already exists. Skipping seed.")
            return None

        user = User(email=ADMIN_EMAIL, password_hash=hash_password(ADMIN_PASSWORD), name="Admin User")
        db.add(user)
        db.commit()
        db.refresh(user)

        path = os.path.join(media_dir(), "placeholder.png").replace("\\", "/")
        with open(path, "wb") as f:
            f.write(PLACEHOLDER_PNG)
        content = Content(
            user_id=user.id,
            name="Placeholder",
            type="image",
            file_path=path,
            file_size=len(PLACEHOLDER_PNG),
            duration=10,
        )
        playlist = Playlist(user_id=user.id, name="Default")
        db.add(content)
        db.add(playlist)
        db.commit()
        db.refresh(content)
        db.refresh(playlist)

        db.add(PlaylistEntry(playlist_id=playlist.id, content_id=content.id, order=0))
        db.add(Player(user_id=user.id, name="Lobby Screen", playlist_id=playlist.id, status="offline"))
        db.commit()
        logger.info("Default user created: %s (id %s)", ADMIN_EMAIL, user.id)
        return user
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed()
