import io

import pytest

from showroom import create_app
from showroom.extensions import db
from showroom.models import Category, Product
from showroom.services.auth import create_user

# Smallest valid PNG (1x1 transparent pixel)
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
    b"\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "SQLALCHEMY_DATABASE_URI": "sqlite:///" + str(tmp_path / "showroom.db"),
            "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        }
    )
    yield app

    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(app):
    with app.app_context():
        user = create_user("admin", "admin123", email="admin@example.com")
        return {"id": user.id, "username": "admin", "password": "admin123"}


@pytest.fixture
def auth_client(client, admin):
    resp = client.post("/api/auth/login", json={"username": admin["username"], "password": admin["password"]})
    assert resp.status_code == 200
    return client


@pytest.fixture
def categories(app):
    """BEDROOM (main) with two subcategories, plus DINING ROOM (main)."""
    with app.app_context():
        bedroom = Category(code="220", name="BEDROOM", display_order=0)
        dining = Category(code="250", name="DINING ROOM", display_order=1)
        db.session.add_all([bedroom, dining])
        db.session.flush()
        youth = Category(code="221", name="YOUTH BEDROOM", parent_id=bedroom.id, display_order=1)
        master = Category(code="220", name="MASTER BEDROOM", parent_id=bedroom.id, display_order=0)
        db.session.add_all([youth, master])
        db.session.commit()
        return {
            "bedroom": bedroom.id,
            "dining": dining.id,
            "youth": youth.id,
            "master": master.id,
        }


@pytest.fixture
def make_product(app):
    def _make(name="Cloud Comfort Sofa", **fields):
        with app.app_context():
            product = Product(name=name, **fields)
            db.session.add(product)
            db.session.commit()
            return product.id

    return _make


def png_upload(name="photo.png", data=PNG_BYTES, content_type="image/png"):
    return (io.BytesIO(data), name, content_type)
