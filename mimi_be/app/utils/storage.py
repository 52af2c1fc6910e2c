from pathlib import Path
import logging
import os
import shutil
import time
import uuid
from typing import Iterable, List, Optional
from fastapi import UploadFile

from app.config import get_settings

logger = logging.getLogger(__name__)

IMAGE_ROOT = Path(get_settings().PRODUCT_IMAGE_DIR)
DEFAULT_EXT = ".jpg"


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def generate_filename(original_name: Optional[str]) -> str:
    """product_<epoch millis>_<8 hex><ext>; extension falls back to .jpg."""
    ext = os.path.splitext(original_name or "")[1].lower()
    if not ext or ext == ".":
        ext = DEFAULT_EXT
    return f"product_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}{ext}"


def is_safe_filename(filename: Optional[str]) -> bool:
    if not filename or not filename.strip():
        return False
    if "/" in filename or "\\" in filename or filename in (".", ".."):
        return False
    return True


def resolve_image_path(filename: str) -> Optional[Path]:
    """Absolute path for a stored image name, or None if the name could escape IMAGE_ROOT."""
    if not is_safe_filename(filename):
        return None
    return IMAGE_ROOT / filename


def save_upload_file(upload_file: UploadFile) -> str:
    """Save a single UploadFile into IMAGE_ROOT and return the generated file name."""
    if not upload_file or not upload_file.filename:
        raise ValueError("No file provided")
    filename = generate_filename(upload_file.filename)
    _ensure_dir(IMAGE_ROOT)
    file_path = IMAGE_ROOT / filename
    with file_path.open("wb") as buffer:
        shutil.copyfileobj(upload_file.file, buffer)
    logger.info("Stored product image %s", filename)
    return filename


def save_multiple_upload_files(files: List[UploadFile]) -> List[str]:
    names: List[str] = []
    for f in files or []:
        if f and f.filename:
            names.append(save_upload_file(f))
    return names


def delete_image_file(filename: Optional[str]) -> bool:
    """Delete one stored image. Returns True if a file was removed; missing files are ignored."""
    target_path = resolve_image_path(filename) if filename else None
    if target_path is None:
        return False
    if target_path.is_file():
        target_path.unlink()
        return True
    return False


def delete_image_files(filenames: Optional[Iterable[str]]) -> int:
    if not filenames:
        return 0
    removed = 0
    for name in filenames:
        if delete_image_file(name):
            removed += 1
    return removed


def sweep_orphan_files(referenced: Iterable[str], grace_minutes: int) -> List[str]:
    """Remove files under IMAGE_ROOT that no record references.

    Files modified within the last ``grace_minutes`` are kept, since an upload
    is only linked to its product by a later request.
    """
    if not IMAGE_ROOT.is_dir():
        return []
    keep = set(referenced)
    cutoff = time.time() - grace_minutes * 60
    removed: List[str] = []
    for path in IMAGE_ROOT.iterdir():
        if not path.is_file() or path.name in keep:
            continue
        if path.stat().st_mtime > cutoff:
            continue
        path.unlink()
        removed.append(path.name)
    if removed:
        logger.info("Orphan sweep removed %d file(s)", len(removed))
    return removed
