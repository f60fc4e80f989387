# showroom/config.py
"""
Central configuration.

Environment variables and file paths stay out of route logic.

Production vs local:
- DATA_DIR can point at a persistent disk (/var/data)
- otherwise everything lives next to the project
"""

import os
from datetime import timedelta


def _env_flag(name: str) -> bool:
    return (os.environ.get(name) or "").strip().lower() in ("1", "true", "yes", "on")


class Config:
    BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

    DATA_DIR = os.environ.get("DATA_DIR") or ("/var/data" if os.path.isdir("/var/data") else BASE_DIR)

    UPLOAD_FOLDER = os.path.join(DATA_DIR, "uploads")
    DATABASE_PATH = os.path.join(DATA_DIR, "showroom.db")

    SECRET_KEY = (
        os.environ.get("SECRET_KEY")
        or os.environ.get("SESSION_SECRET")
        or "showroom-dev-secret-change-me"
    )

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or "sqlite:///" + DATABASE_PATH
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Sessions: 24h from login, not extended by activity
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)
    SESSION_REFRESH_EACH_REQUEST = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = (
        os.environ.get("APP_ENV", os.environ.get("FLASK_ENV", "")).lower() == "production"
        or _env_flag("SESSION_COOKIE_SECURE")
    )

    # Behind NGINX
    TRUST_PROXY = _env_flag("TRUST_PROXY")

    # Uploads: 10MB per image; the request limit leaves room for form fields + multipart framing
    MAX_IMAGE_SIZE = 10 * 1024 * 1024
    MAX_CONTENT_LENGTH = MAX_IMAGE_SIZE + 1024 * 1024
    ALLOWED_IMAGE_EXTENSIONS = {"jpeg", "jpg", "png", "gif", "webp"}
    ALLOWED_IMAGE_MIMETYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
