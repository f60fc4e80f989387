# showroom/services/images.py
"""
Image ingestion + removal.

Everything is validated before anything is written, so a rejected upload
leaves neither a file nor a row behind.
"""

from typing import Any, Dict, Mapping, Optional

from flask import current_app

from ..errors import NotFoundError, PayloadTooLarge, ValidationError
from ..extensions import db
from ..models import Image, ImageOwner
from .catalog import get_active_product, get_active_vignette
from .storage import (
    allowed_ext,
    allowed_mimetype,
    delete_upload,
    public_path,
    save_upload,
    upload_size,
)

TRUTHY = {"1", "true", "yes", "on"}


def parse_owner(form: Mapping[str, Any]) -> ImageOwner:
    """Exactly one of product_id / vignette_id must be given."""
    product_id = str(form.get("product_id") or "").strip()
    vignette_id = str(form.get("vignette_id") or "").strip()

    if product_id and vignette_id:
        raise ValidationError("An image belongs to a product or a vignette, not both")
    if not product_id and not vignette_id:
        raise ValidationError("product_id or vignette_id is required")

    kind, raw = ("product", product_id) if product_id else ("vignette", vignette_id)
    try:
        return ImageOwner(kind, int(raw))
    except (TypeError, ValueError):
        raise ValidationError(f"{kind}_id must be a number")


def parse_flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in TRUTHY


def _check_owner(owner: ImageOwner):
    if owner.kind == "product":
        get_active_product(owner.id)
    else:
        get_active_vignette(owner.id)


def validate_image_file(file_storage):
    if file_storage is None or not file_storage.filename:
        raise ValidationError("No file uploaded")

    cfg = current_app.config
    if not allowed_ext(file_storage.filename, cfg["ALLOWED_IMAGE_EXTENSIONS"]) or not allowed_mimetype(
        file_storage.mimetype, cfg["ALLOWED_IMAGE_MIMETYPES"]
    ):
        raise ValidationError("Only image files are allowed!")

    if upload_size(file_storage) > cfg["MAX_IMAGE_SIZE"]:
        raise PayloadTooLarge()


def ingest_image(
    file_storage,
    owner: ImageOwner,
    caption: Optional[str] = None,
    is_primary: bool = False,
) -> Dict[str, Any]:
    """Store the file, record the row, return {"id", "image_path"}."""
    validate_image_file(file_storage)
    _check_owner(owner)

    folder = current_app.config["UPLOAD_FOLDER"]
    filename = save_upload(file_storage, folder)
    image_path = public_path(filename)

    image = Image(image_path=image_path, is_primary=is_primary, caption=(caption or "").strip() or None)
    image.owner = owner
    db.session.add(image)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        delete_upload(image_path, folder)
        raise

    current_app.logger.info("Stored image %s for %s %s", image_path, owner.kind, owner.id)
    return {"id": image.id, "image_path": image_path}


def delete_image(image_id) -> int:
    """
    Remove the row, then the file. The row removal is what counts: it is
    committed first so a failed commit never leaves a row without its file,
    and a file that is already gone is only a warning.
    """
    image = db.session.get(Image, image_id)
    if image is None:
        raise NotFoundError("Image not found")

    image_path = image.image_path
    changes = Image.query.filter_by(id=image.id).delete(synchronize_session=False)
    db.session.commit()

    if not delete_upload(image_path, current_app.config["UPLOAD_FOLDER"]):
        current_app.logger.warning("Image file missing for image %s (%s)", image_id, image_path)

    current_app.logger.info("Deleted image %s (%s)", image_id, image_path)
    return changes
