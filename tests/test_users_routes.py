"""Tests for profile read/update/delete and profile photo routes."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

from PIL import Image

from models import db
from models.user import User

from conftest import auth_headers, create_user

MALFORMED_ID = "not-a-valid-id"
UNKNOWN_ID = "f" * 32


def _png_bytes(size=(400, 300)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_list_users_requires_jwt(app, client):
    user_id = create_user(app, "one@example.com")
    create_user(app, "two@example.com")

    assert client.get("/api/users/").status_code == 401

    response = client.get("/api/users/", headers=auth_headers(app, user_id))
    assert response.status_code == 200
    emails = {user["email"] for user in response.get_json()}
    assert emails == {"one@example.com", "two@example.com"}


def test_user_detail(app, client):
    user_id = create_user(app, "one@example.com")

    response = client.get(f"/api/users/{user_id}")

    assert response.status_code == 200
    assert response.get_json()["id"] == user_id


def test_malformed_id_fails_fast(app, client):
    user_id = create_user(app, "one@example.com")
    headers = auth_headers(app, user_id)

    for response in (
        client.get(f"/api/users/{MALFORMED_ID}"),
        client.delete(f"/api/users/{MALFORMED_ID}"),
        client.get(f"/api/users/profile/{MALFORMED_ID}", headers=headers),
        client.put(f"/api/users/update/{MALFORMED_ID}", json={"bio": "x"}, headers=headers),
    ):
        assert response.status_code == 400
        assert response.get_json()["detail"] == "The id is not valid or found"


def test_unknown_id_returns_404(client):
    response = client.get(f"/api/users/{UNKNOWN_ID}")

    assert response.status_code == 404


def test_delete_user_returns_removed_record(app, client):
    user_id = create_user(app, "gone@example.com")

    response = client.delete(f"/api/users/{user_id}")

    assert response.status_code == 200
    assert response.get_json()["email"] == "gone@example.com"
    assert client.get(f"/api/users/{user_id}").status_code == 404


def test_profile_requires_jwt(app, client):
    user_id = create_user(app, "one@example.com")

    assert client.get(f"/api/users/profile/{user_id}").status_code == 401
    response = client.get(f"/api/users/profile/{user_id}", headers=auth_headers(app, user_id))
    assert response.status_code == 200
    assert response.get_json()["email"] == "one@example.com"


def test_update_profile_changes_only_mutable_fields(app, client):
    user_id = create_user(app, "one@example.com")

    response = client.put(
        f"/api/users/update/{user_id}",
        json={
            "first_name": "Grace",
            "bio": "Compiler pioneer",
            "email": "Grace@Example.com",
            "is_admin": True,
            "password": "ignored",
        },
        headers=auth_headers(app, user_id),
    )

    assert response.status_code == 200
    data = response.get_json()
    assert data["first_name"] == "Grace"
    assert data["last_name"] == "User"
    assert data["bio"] == "Compiler pioneer"
    assert data["email"] == "grace@example.com"
    assert data["is_admin"] is False
    with app.app_context():
        assert db.session.get(User, user_id).check_password("secret123") is True


def test_update_profile_rejects_taken_email_and_blank_names(app, client):
    user_id = create_user(app, "one@example.com")
    create_user(app, "two@example.com")
    headers = auth_headers(app, user_id)

    taken = client.put(f"/api/users/update/{user_id}", json={"email": "two@example.com"}, headers=headers)
    blank = client.put(f"/api/users/update/{user_id}", json={"first_name": " "}, headers=headers)

    assert taken.status_code == 409
    assert blank.status_code == 400


def test_update_profile_of_another_user_requires_admin(app, client):
    owner_id = create_user(app, "owner@example.com")
    other_id = create_user(app, "other@example.com")
    admin_id = create_user(app, "admin@example.com", admin=True)

    forbidden = client.put(
        f"/api/users/update/{owner_id}", json={"bio": "hacked"}, headers=auth_headers(app, other_id)
    )
    allowed = client.put(
        f"/api/users/update/{owner_id}", json={"bio": "moderated"}, headers=auth_headers(app, admin_id)
    )

    assert forbidden.status_code == 403
    assert allowed.status_code == 200
    assert allowed.get_json()["bio"] == "moderated"


def test_update_password(app, client):
    user_id = create_user(app, "one@example.com", "old-password")
    headers = auth_headers(app, user_id)

    unchanged = client.put("/api/users/password", json={}, headers=headers)
    changed = client.put("/api/users/password", json={"password": "new-password"}, headers=headers)

    assert unchanged.status_code == 200
    assert changed.status_code == 200
    with app.app_context():
        user = db.session.get(User, user_id)
        assert user.check_password("new-password") is True
        assert user.password_changed_at is not None


def test_profile_photo_upload_resizes_and_stores(app, client):
    user_id = create_user(app, "photo@example.com")

    response = client.put(
        "/api/users/profile-photo-upload",
        data={"image": (BytesIO(_png_bytes()), "me.png")},
        headers=auth_headers(app, user_id),
        content_type="multipart/form-data",
    )

    assert response.status_code == 200
    photo_url = response.get_json()["profile_photo"]
    assert photo_url.startswith("/uploads/")
    assert photo_url.endswith(".jpg")

    stored = Path(app.config["UPLOAD_DIR"]) / photo_url.rsplit("/", 1)[-1]
    assert stored.exists()
    with Image.open(stored) as image:
        assert image.size == (250, 250)
        assert image.format == "JPEG"

    served = client.get(photo_url)
    assert served.status_code == 200


def test_profile_photo_replacement_removes_previous_file(app, client):
    user_id = create_user(app, "photo@example.com")
    headers = auth_headers(app, user_id)

    first = client.put(
        "/api/users/profile-photo-upload",
        data={"image": (BytesIO(_png_bytes()), "first.png")},
        headers=headers,
        content_type="multipart/form-data",
    ).get_json()["profile_photo"]
    second = client.put(
        "/api/users/profile-photo-upload",
        data={"image": (BytesIO(_png_bytes((100, 100))), "second.png")},
        headers=headers,
        content_type="multipart/form-data",
    ).get_json()["profile_photo"]

    upload_dir = Path(app.config["UPLOAD_DIR"])
    assert first != second
    assert not (upload_dir / first.rsplit("/", 1)[-1]).exists()
    assert (upload_dir / second.rsplit("/", 1)[-1]).exists()


def test_profile_photo_upload_validation(app, client):
    user_id = create_user(app, "photo@example.com")
    headers = auth_headers(app, user_id)

    missing = client.put(
        "/api/users/profile-photo-upload", data={}, headers=headers, content_type="multipart/form-data"
    )
    wrong_type = client.put(
        "/api/users/profile-photo-upload",
        data={"image": (BytesIO(b"hello"), "notes.txt")},
        headers=headers,
        content_type="multipart/form-data",
    )
    not_an_image = client.put(
        "/api/users/profile-photo-upload",
        data={"image": (BytesIO(b"definitely not png"), "fake.png")},
        headers=headers,
        content_type="multipart/form-data",
    )

    assert missing.status_code == 400
    assert wrong_type.status_code == 400
    assert not_an_image.status_code == 400


def test_update_password_keeps_surrounding_whitespace(app, client):
    user_id = create_user(app, "spaces@example.com", "old-password")

    response = client.put(
        "/api/users/password", json={"password": " new pw "}, headers=auth_headers(app, user_id)
    )

    assert response.status_code == 200
    with app.app_context():
        user = db.session.get(User, user_id)
        assert user.check_password(" new pw ") is True
        assert user.check_password("new pw") is False


def test_update_profile_rejects_malformed_email(app, client):
    user_id = create_user(app, "one@example.com")

    response = client.put(
        f"/api/users/update/{user_id}",
        json={"email": "not-an-email"},
        headers=auth_headers(app, user_id),
    )

    assert response.status_code == 400
    with app.app_context():
        assert db.session.get(User, user_id).email == "one@example.com"


def test_update_profile_email_race_reports_email_in_use(app, client, monkeypatch):
    user_id = create_user(app, "one@example.com")
    create_user(app, "two@example.com")

    repository = app.extensions["user_repository"]
    monkeypatch.setattr(repository, "get_by_email", lambda email: None)
    response = client.put(
        f"/api/users/update/{user_id}",
        json={"email": "two@example.com"},
        headers=auth_headers(app, user_id),
    )

    assert response.status_code == 409
    assert response.get_json()["detail"] == "Email already in use."
