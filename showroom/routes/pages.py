# showroom/routes/pages.py
"""
Uploaded files + a health check for the process supervisor.
"""

from flask import Blueprint, current_app, jsonify, send_from_directory

bp = Blueprint("pages", __name__)


@bp.route("/uploads/<path:filename>")
def uploaded_file(filename):
    """Serve uploaded images."""
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)


@bp.route("/health")
def health():
    return jsonify({"status": "ok"})
