"""
Local media store for uploaded avatars and cover images.
Files are written under UPLOAD_FOLDER with a unique name and referenced by URL.
"""
from __future__ import annotations

import os
import uuid
import logging

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


def first_upload(files, field: str) -> FileStorage | None:
    """Return the first non-empty file sent under `field`, or None."""
    for item in files.getlist(field):
        if item and item.filename:
            return item
    return None


def save_upload(file: FileStorage, upload_folder: str, url_prefix: str) -> str:
    """Persist `file` and return the URL it will be served under."""
    os.makedirs(upload_folder, exist_ok=True)
    name = secure_filename(file.filename) or "upload"
    stored_name = f"{uuid.uuid4().hex}_{name}"
    file.save(os.path.join(upload_folder, stored_name))
    logger.info("Stored upload %s", stored_name)
    return f"{url_prefix.rstrip('/')}/{stored_name}"


def discard_upload(url: str, upload_folder: str) -> None:
    """Remove a file previously stored by save_upload (missing files are ignored)."""
    path = os.path.join(upload_folder, os.path.basename(url))
    try:
        os.remove(path)
    except FileNotFoundError:
        return
    logger.info("Discarded upload %s", os.path.basename(url))
