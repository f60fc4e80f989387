import io
import os

from conftest import png_upload

from showroom.extensions import db
from showroom.models import Image, ImageOwner


def _upload(client, **form):
    return client.post("/api/images/upload", data=form, content_type="multipart/form-data")


def _file_for(app, image_path):
    return os.path.join(app.config["UPLOAD_FOLDER"], os.path.basename(image_path))


def test_upload_for_product(app, auth_client, make_product):
    pid = make_product("Sofa")

    resp = _upload(auth_client, image=png_upload(), product_id=str(pid), caption="Front", is_primary="1")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["image_path"].startswith("/uploads/")
    assert body["image_path"].endswith(".png")
    assert os.path.isfile(_file_for(app, body["image_path"]))

    with app.app_context():
        image = db.session.get(Image, body["id"])
        assert image.owner == ImageOwner("product", pid)
        assert image.vignette_id is None
        assert image.is_primary is True
        assert image.caption == "Front"


def test_uploaded_file_is_served(auth_client, make_product):
    pid = make_product("Sofa")
    path = _upload(auth_client, image=png_upload(), product_id=str(pid)).get_json()["image_path"]

    resp = auth_client.get(path)
    assert resp.status_code == 200
    assert resp.data.startswith(b"\x89PNG")


def test_upload_for_vignette_shows_in_detail(auth_client):
    vid = auth_client.post("/api/vignettes", json={"name": "Modern Living"}).get_json()["id"]

    _upload(auth_client, image=png_upload("a.png"), vignette_id=str(vid))
    _upload(auth_client, image=png_upload("b.png"), vignette_id=str(vid), is_primary="true")

    images = auth_client.get(f"/api/vignettes/{vid}").get_json()["images"]
    assert [i["is_primary"] for i in images] == [1, 0]
    assert all(i["vignette_id"] == vid for i in images)


def test_generated_names_do_not_collide(auth_client, make_product):
    pid = make_product("Sofa")

    first = _upload(auth_client, image=png_upload("same.png"), product_id=str(pid)).get_json()
    second = _upload(auth_client, image=png_upload("same.png"), product_id=str(pid)).get_json()

    assert first["image_path"] != second["image_path"]


def test_disallowed_extension_is_rejected_before_anything_is_written(app, auth_client, make_product):
    pid = make_product("Sofa")

    resp = _upload(auth_client, image=(io.BytesIO(b"hello"), "notes.txt", "text/plain"), product_id=str(pid))

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Only image files are allowed!"}
    with app.app_context():
        assert Image.query.count() == 0
    assert os.listdir(app.config["UPLOAD_FOLDER"]) == []


def test_image_extension_with_wrong_mimetype_is_rejected(auth_client, make_product):
    pid = make_product("Sofa")

    resp = _upload(auth_client, image=png_upload("photo.png", content_type="application/pdf"), product_id=str(pid))
    assert resp.status_code == 400


def test_owner_must_be_exactly_one(auth_client, make_product):
    pid = make_product("Sofa")
    vid = auth_client.post("/api/vignettes", json={"name": "Modern Living"}).get_json()["id"]

    both = _upload(auth_client, image=png_upload(), product_id=str(pid), vignette_id=str(vid))
    neither = _upload(auth_client, image=png_upload())

    assert both.status_code == 400
    assert neither.status_code == 400


def test_owner_must_exist(app, auth_client):
    resp = _upload(auth_client, image=png_upload(), product_id="404")

    assert resp.status_code == 404
    assert os.listdir(app.config["UPLOAD_FOLDER"]) == []


def test_missing_file(auth_client, make_product):
    pid = make_product("Sofa")

    resp = _upload(auth_client, product_id=str(pid))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "No file uploaded"


def test_oversized_request_is_rejected(app, auth_client, make_product):
    pid = make_product("Sofa")
    app.config["MAX_CONTENT_LENGTH"] = 1024

    resp = _upload(auth_client, image=png_upload(data=b"\x89PNG" + b"0" * 4096), product_id=str(pid))

    assert resp.status_code == 413
    with app.app_context():
        assert Image.query.count() == 0


def _png_of_size(size):
    return b"\x89PNG" + b"\0" * (size - 4)


def test_image_of_exactly_10mb_is_accepted(app, auth_client, make_product):
    pid = make_product("Sofa")
    data = _png_of_size(app.config["MAX_IMAGE_SIZE"])
    assert len(data) == 10 * 1024 * 1024

    resp = _upload(auth_client, image=png_upload(data=data), product_id=str(pid))

    assert resp.status_code == 200
    assert os.path.getsize(_file_for(app, resp.get_json()["image_path"])) == len(data)


def test_image_one_byte_over_10mb_is_rejected(app, auth_client, make_product):
    pid = make_product("Sofa")
    data = _png_of_size(app.config["MAX_IMAGE_SIZE"] + 1)

    resp = _upload(auth_client, image=png_upload(data=data), product_id=str(pid))

    assert resp.status_code == 413
    assert resp.get_json() == {"error": "File too large (max 10MB)"}
    assert os.listdir(app.config["UPLOAD_FOLDER"]) == []
    with app.app_context():
        assert Image.query.count() == 0


def test_delete_image_removes_row_and_file(app, auth_client, make_product):
    pid = make_product("Sofa")
    body = _upload(auth_client, image=png_upload(), product_id=str(pid)).get_json()
    path = _file_for(app, body["image_path"])

    resp = auth_client.delete(f"/api/images/{body['id']}")

    assert resp.status_code == 200
    assert resp.get_json()["changes"] == 1
    assert not os.path.exists(path)
    with app.app_context():
        assert db.session.get(Image, body["id"]) is None


def test_delete_image_with_missing_file_still_removes_row(app, auth_client, make_product):
    pid = make_product("Sofa")
    body = _upload(auth_client, image=png_upload(), product_id=str(pid)).get_json()
    os.remove(_file_for(app, body["image_path"]))

    resp = auth_client.delete(f"/api/images/{body['id']}")

    assert resp.status_code == 200
    with app.app_context():
        assert Image.query.count() == 0


def test_delete_unknown_image_is_404(auth_client):
    assert auth_client.delete("/api/images/77").status_code == 404


def test_image_routes_need_login(client, make_product):
    pid = make_product("Sofa")

    assert _upload(client, image=png_upload(), product_id=str(pid)).status_code == 401
    assert client.delete("/api/images/1").status_code == 401


def test_failed_row_delete_keeps_the_file(app, auth_client, make_product, monkeypatch):
    from sqlalchemy.exc import SQLAlchemyError

    pid = make_product("Sofa")
    body = _upload(auth_client, image=png_upload(), product_id=str(pid)).get_json()
    path = _file_for(app, body["image_path"])

    def failing_commit(self):
        raise SQLAlchemyError("database is locked")

    with app.app_context():
        session_class = type(db.session())
    monkeypatch.setattr(session_class, "commit", failing_commit)
    resp = auth_client.delete(f"/api/images/{body['id']}")
    monkeypatch.undo()

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "database is locked"}
    assert os.path.isfile(path)
    with app.app_context():
        assert db.session.get(Image, body["id"]) is not None
