# showroom/routes/images.py
"""
Image upload (multipart) + delete.
"""

from flask import Blueprint, jsonify, request

from ..errors import ValidationError
from ..services.auth import login_required
from ..services.images import delete_image, ingest_image, parse_flag, parse_owner

bp = Blueprint("images", __name__, url_prefix="/api/images")


@bp.route("/upload", methods=["POST"])
@login_required
def upload_image(identity):
    files = request.files.getlist("image")
    if len(files) > 1:
        raise ValidationError("Upload one image at a time")

    owner = parse_owner(request.form)
    result = ingest_image(
        files[0] if files else None,
        owner,
        caption=request.form.get("caption"),
        is_primary=parse_flag(request.form.get("is_primary")),
    )
    return jsonify({**result, "message": "Image uploaded successfully"})


@bp.route("/<int:image_id>", methods=["DELETE"])
@login_required
def remove_image(image_id, identity):
    changes = delete_image(image_id)
    return jsonify({"message": "Image deleted successfully", "changes": changes})
