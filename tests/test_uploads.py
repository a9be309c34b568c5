from __future__ import annotations

import asyncio
import io
from pathlib import Path

import pytest
from starlette.datastructures import Headers, UploadFile

from pickeasy.errors import UploadError
from pickeasy.models.restaurant import Restaurant
from pickeasy.utils import uploads

MIB = 1024 * 1024
PNG_HEADER = b"\x89PNG\r\n\x1a\n"
JPEG_HEADER = b"\xff\xd8\xff\xe0"


def _stored_files(settings):
    return sorted(p.name for p in Path(settings.UPLOAD_DIR).iterdir())


def _image(name, content_type, size, header=b""):
    return (name, header + b"\0" * (size - len(header)), content_type)


def _create(client, headers, form, image):
    return client.post("/api/restaurants", headers=headers, data=form, files={"restaurantImage": image})


# ── Through the API ──────────────────────────────────────────────────────


def test_gif_rejected(client, settings, staff_headers, restaurant_form):
    resp = _create(client, staff_headers, restaurant_form, _image("cat.gif", "image/gif", 1024, b"GIF89a"))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only .png and .jpg images are allowed!"
    assert _stored_files(settings) == []


def test_oversized_png_rejected(client, db, settings, staff_headers, restaurant_form):
    resp = _create(client, staff_headers, restaurant_form, _image("big.png", "image/png", 15 * MIB, PNG_HEADER))
    assert resp.status_code == 413
    assert _stored_files(settings) == []
    assert db.query(Restaurant).count() == 0


def test_jpeg_accepted_and_served(client, db, settings, staff_headers, restaurant_form):
    resp = _create(client, staff_headers, restaurant_form, _image("front.jpg", "image/jpeg", 2 * MIB, JPEG_HEADER))
    assert resp.status_code == 201
    image_url = resp.json()["restaurantImage"]
    assert image_url.startswith("/uploads/") and image_url.endswith(".jpg")

    stored = _stored_files(settings)
    assert stored == [image_url.rsplit("/", 1)[1]]
    assert (Path(settings.UPLOAD_DIR) / stored[0]).stat().st_size == 2 * MIB

    served = client.get(image_url)
    assert served.status_code == 200
    assert served.content[:4] == JPEG_HEADER


def test_two_uploads_get_distinct_names(client, settings, staff_headers, restaurant_form):
    first = _create(client, staff_headers, restaurant_form, _image("a.png", "image/png", 2048, PNG_HEADER))
    second = _create(client, staff_headers, restaurant_form, _image("a.png", "image/png", 2048, PNG_HEADER))
    assert first.status_code == second.status_code == 201
    assert first.json()["restaurantImage"] != second.json()["restaurantImage"]
    assert len(_stored_files(settings)) == 2


def test_upload_rejected_before_field_validation(client, staff_headers, restaurant_form):
    bad_form = {**restaurant_form, "restaurantCost": "9"}
    resp = _create(client, staff_headers, bad_form, _image("cat.gif", "image/gif", 10, b"GIF89a"))
    assert resp.status_code == 400


def test_guard_runs_before_upload(client, settings, customer_headers, restaurant_form):
    resp = _create(client, customer_headers, restaurant_form, _image("a.png", "image/png", 100, PNG_HEADER))
    assert resp.status_code == 403
    assert _stored_files(settings) == []


def test_stored_file_removed_when_validation_fails(client, settings, staff_headers, restaurant_form):
    bad_form = {**restaurant_form, "restaurantCost": "9"}
    resp = _create(client, staff_headers, bad_form, _image("a.png", "image/png", 100, PNG_HEADER))
    assert resp.status_code == 422
    assert _stored_files(settings) == []


def test_unexpected_file_field_rejected(client, settings, staff_headers, restaurant_form):
    resp = client.post(
        "/api/restaurants",
        headers=staff_headers,
        data=restaurant_form,
        files={"avatar": _image("a.png", "image/png", 100, PNG_HEADER)},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Unexpected field: avatar"


def test_second_image_rejected(client, settings, staff_headers, restaurant_form):
    resp = client.post(
        "/api/restaurants",
        headers=staff_headers,
        data=restaurant_form,
        files=[
            ("restaurantImage", _image("a.png", "image/png", 100, PNG_HEADER)),
            ("restaurantImage", _image("b.png", "image/png", 100, PNG_HEADER)),
        ],
    )
    assert resp.status_code == 400
    assert _stored_files(settings) == []


def test_update_replaces_image(client, db, settings, staff_headers, restaurant_form):
    created = _create(client, staff_headers, restaurant_form, _image("a.png", "image/png", 100, PNG_HEADER)).json()
    old_name = created["restaurantImage"].rsplit("/", 1)[1]

    resp = client.patch(
        f"/api/restaurants/{created['id']}",
        headers=staff_headers,
        data=restaurant_form,
        files={"restaurantImage": _image("b.jpg", "image/jpeg", 100, JPEG_HEADER)},
    )
    assert resp.status_code == 200
    new_name = resp.json()["restaurantImage"].rsplit("/", 1)[1]
    assert new_name != old_name
    assert _stored_files(settings) == [new_name]
    assert db.get(Restaurant, created["id"]).restaurant_image == new_name


def test_update_without_image_keeps_existing(client, settings, staff_headers, restaurant_form):
    created = _create(client, staff_headers, restaurant_form, _image("a.png", "image/png", 100, PNG_HEADER)).json()
    resp = client.patch(f"/api/restaurants/{created['id']}", headers=staff_headers, data=restaurant_form)
    assert resp.status_code == 200
    assert resp.json()["restaurantImage"] == created["restaurantImage"]
    assert len(_stored_files(settings)) == 1


def test_update_unknown_id_discards_upload(client, settings, staff_headers, restaurant_form):
    resp = client.patch(
        "/api/restaurants/0123456789abcdef01234567",
        headers=staff_headers,
        data=restaurant_form,
        files={"restaurantImage": _image("b.jpg", "image/jpeg", 100, JPEG_HEADER)},
    )
    assert resp.status_code == 404
    assert _stored_files(settings) == []


# ── store_upload / naming ────────────────────────────────────────────────


def _upload_file(name, content_type, data):
    return UploadFile(file=io.BytesIO(data), filename=name, headers=Headers({"content-type": content_type}))


def test_store_upload_enforces_limit(tmp_path):
    upload = _upload_file("a.png", "image/png", b"x" * 11)
    with pytest.raises(UploadError) as exc_info:
        asyncio.run(uploads.store_upload(upload, tmp_path, ["image/png"], max_bytes=10))
    assert exc_info.value.status_code == 413
    assert list(tmp_path.iterdir()) == []


def test_store_upload_at_limit(tmp_path):
    upload = _upload_file("a.JPG", "image/jpeg", b"x" * 10)
    stored = asyncio.run(uploads.store_upload(upload, tmp_path, ["image/jpeg"], max_bytes=10))
    assert stored.size == 10
    assert stored.filename.endswith(".jpg")
    assert stored.path.read_bytes() == b"x" * 10


def test_same_instant_names_do_not_collide(tmp_path, monkeypatch):
    monkeypatch.setattr(uploads.time, "time_ns", lambda: 1_700_000_000_000_000_000)
    first = asyncio.run(uploads.store_upload(
        _upload_file("a.png", "image/png", b"one"), tmp_path, ["image/png"], max_bytes=100,
    ))
    second = asyncio.run(uploads.store_upload(
        _upload_file("b.png", "image/png", b"two"), tmp_path, ["image/png"], max_bytes=100,
    ))
    assert first.filename == "1700000000000000000.png"
    assert second.filename == "1700000000000000001.png"
    assert first.path.read_bytes() == b"one"
    assert second.path.read_bytes() == b"two"


def test_extension_follows_content_type_not_filename(client, settings, staff_headers, restaurant_form):
    resp = _create(client, staff_headers, restaurant_form, _image("page.html", "image/png", 100, PNG_HEADER))
    assert resp.status_code == 201
    assert resp.json()["restaurantImage"].endswith(".png")
    assert [name.rsplit(".", 1)[1] for name in _stored_files(settings)] == ["png"]


def test_jpeg_without_extension_gets_jpg(tmp_path):
    upload = _upload_file("photo", "image/jpeg", b"x")
    stored = asyncio.run(uploads.store_upload(upload, tmp_path, ["image/jpeg"], max_bytes=10))
    assert stored.filename.endswith(".jpg")
