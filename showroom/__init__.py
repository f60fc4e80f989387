# showroom/__init__.py
"""
This file creates the Flask app (application factory pattern).

- Tests pass their own config (temp database + uploads folder)
- Production reads everything from environment variables (see config.py)
"""

import os

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .cli import register_commands
from .config import Config
from .errors import register_error_handlers
from .extensions import db
from .routes.auth import bp as auth_bp
from .routes.categories import bp as categories_bp
from .routes.images import bp as images_bp
from .routes.pages import bp as pages_bp
from .routes.products import bp as products_bp
from .routes.vignettes import bp as vignettes_bp
from .services.auth import load_identity
from .sessions import ServerSessionInterface


def create_app(test_config=None) -> Flask:
    app = Flask(__name__)

    # Load config (paths, DB location, secrets, session lifetime, etc.)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)
    db_path = app.config.get("DATABASE_PATH")
    if db_path and app.config["SQLALCHEMY_DATABASE_URI"] == "sqlite:///" + db_path:
        os.makedirs(os.path.dirname(db_path), exist_ok=True)

    if app.config.get("TRUST_PROXY"):
        # Behind NGINX: trust one hop of X-Forwarded-* headers
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    # Initialize extensions (SQLAlchemy etc.)
    db.init_app(app)

    # Create database tables the first time, then patch up older databases
    with app.app_context():
        from . import models  # noqa: F401  (registers models before create_all())
        from .schema import ensure_product_category_id_column

        db.create_all()
        if ensure_product_category_id_column():
            app.logger.info("Added products.category_id to an existing database")

    # Session data stays in the database; the cookie is just a signed id
    app.session_interface = ServerSessionInterface()
    app.before_request(load_identity)
    register_error_handlers(app)
    register_commands(app)

    # Register route blueprints (each feature in its own file)
    app.register_blueprint(auth_bp)
    app.register_blueprint(vignettes_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(images_bp)
    app.register_blueprint(pages_bp)

    return app
