import os
import time
import uuid
import logging
from fastapi import UploadFile
from mediasignage.errors import ValidationError

logger = logging.getLogger(__name__)

STORAGE_DIR = os.getenv("SIGNAGE_STORAGE_DIR", "storage")
MAX_MEDIA_BYTES = int(os.getenv("SIGNAGE_MAX_MEDIA_BYTES", str(500 * 1024 * 1024)))
MAX_SCREENSHOT_BYTES = int(os.getenv("SIGNAGE_MAX_SCREENSHOT_BYTES", str(10 * 1024 * 1024)))
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif"}
VIDEO_EXTENSIONS = {".mp4", ".mov", ".avi", ".webm"}
SCREENSHOT_EXTENSIONS = {".jpg", ".jpeg", ".png"}
CHUNK_SIZE = 1024 * 1024


def media_dir() -> str:
    return os.path.join(STORAGE_DIR, "media")


def screenshot_dir() -> str:
    return os.path.join(STORAGE_DIR, "screenshots")


def ensure_storage() -> None:
    os.makedirs(media_dir(), exist_ok=True)
    os.makedirs(screenshot_dir(), exist_ok=True)


def _extension(filename: str | None) -> str:
    _, ext = os.path.splitext((filename or "").strip().lower())
    return ext


def classify_content_type(filename: str | None) -> str:
    """Map a file name to ``image`` or ``video`` by extension."""
    ext = _extension(filename)
    if ext in IMAGE_EXTENSIONS:
        return "image"
    if ext in VIDEO_EXTENSIONS:
        return "video"
    raise ValidationError("Unsupported file type")


def _stamped_filename(filename: str, ext: str, prefix: str = "") -> str:
    safe_name, _ = os.path.splitext(os.path.basename(filename.replace("\\", "/")))
    safe_name = "".join(ch for ch in safe_name if ch.isalnum() or ch in {"-", "_"}).strip() or "upload"
    return f"{prefix}{safe_name}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{ext}"


def _write_limited(file: UploadFile, path: str, max_bytes: int) -> int:
    size = 0
    with open(path, "wb") as f:
        while True:
            chunk = file.file.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > max_bytes:
                break
            f.write(chunk)
    if size > max_bytes:
        remove_file(path)
        raise ValidationError(f"File exceeds the {max_bytes // (1024 * 1024)} MB limit")
    if size == 0:
        remove_file(path)
        raise ValidationError("Uploaded file is empty")
    return size


def save_media(file: UploadFile) -> tuple[str, int, str]:
    """Store an uploaded media file. Returns (path, size, content type)."""
    ensure_storage()
    filename = (file.filename or "").strip()
    content_type = classify_content_type(filename)
    path = os.path.join(media_dir(), _stamped_filename(filename, _extension(filename)))
    size = _write_limited(file, path, MAX_MEDIA_BYTES)
    logger.info("Stored %s upload %s (%d bytes)", content_type, path, size)
    return path.replace("\\", "/"), size, content_type


def save_screenshot(file: UploadFile) -> str:
    ensure_storage()
    filename = (file.filename or "").strip()
    ext = _extension(filename)
    if ext not in SCREENSHOT_EXTENSIONS:
        raise ValidationError("Unsupported screenshot type. Use JPG/JPEG/PNG.")
    path = os.path.join(screenshot_dir(), _stamped_filename(filename, ext, prefix="screenshot-"))
    _write_limited(file, path, MAX_SCREENSHOT_BYTES)
    return path.replace("\\", "/")


def remove_file(path: str | None) -> bool:
    """Best-effort delete. Failures are logged and reported as False."""
    if not path:
        return False
    try:
        os.remove(path)
    except OSError as exc:
        logger.warning("Failed to delete file %s: %s", path, exc)
        return False
    return True
