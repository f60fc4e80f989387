# showroom/services/storage.py
"""
Everything related to image files on disk.

Routes never touch the uploads folder directly, which keeps the
"local folder vs S3" decision in one place.
"""

import os
import random
import time

from werkzeug.utils import secure_filename

URL_PREFIX = "/uploads/"


def file_extension(filename: str) -> str:
    """Lower-case extension without the dot ("" if there is none)."""
    filename = filename or ""
    return filename.rsplit(".", 1)[1].lower() if "." in filename else ""


def allowed_ext(filename: str, allowed: set[str]) -> bool:
    """Return True if filename has an allowed extension."""
    return file_extension(filename) in allowed


def allowed_mimetype(mimetype: str, allowed: set[str]) -> bool:
    return (mimetype or "").lower() in allowed


def upload_size(file_storage) -> int:
    """Size in bytes of an uploaded file, leaving the stream at the start."""
    stream = file_storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def unique_filename(original: str) -> str:
    """
    <epoch-ms>-<9 random digits>.<ext>

    The client's filename only contributes its extension, so two uploads
    called 'image.jpg' never collide.
    """
    ext = file_extension(secure_filename(original or ""))
    suffix = random.randint(0, 10**9 - 1)
    name = f"{int(time.time() * 1000)}-{suffix:09d}"
    return f"{name}.{ext}" if ext else name


def save_upload(file_storage, upload_folder: str) -> str:
    """Save an uploaded file under a generated name and return that name."""
    os.makedirs(upload_folder, exist_ok=True)
    final = unique_filename(file_storage.filename)
    file_storage.save(os.path.join(upload_folder, final))
    return final


def public_path(filename: str) -> str:
    return URL_PREFIX + filename


def delete_upload(image_path: str, upload_folder: str) -> bool:
    """
    Remove the file behind an /uploads/... path.
    Returns False when the file was already gone (not an error).
    """
    filename = os.path.basename(image_path or "")
    if not filename:
        return False

    path = os.path.join(upload_folder, filename)
    if not os.path.isfile(path):
        return False

    os.remove(path)
    return True
