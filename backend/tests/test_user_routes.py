import io

from PIL import Image

from backend.features.users.domain.artifact import original_key
from backend.tests.helpers import ADA_UUID, AUTH_HEADERS, GRACE_UUID


def test_create_user_requires_credentials(client):
    response = client.post("/api/user")

    assert response.status_code == 401
    assert response.get_data(as_text=True) == "Unauthorized."


def test_create_user_with_admin_token(client, content_generator):
    response = client.post("/api/user", headers=AUTH_HEADERS)

    assert response.status_code == 201
    created = response.get_json()
    assert created["name"] == "Ada Lovelace"

    png = client.get(f"/api/user/{created['uuid']}/png", headers=AUTH_HEADERS)
    assert png.status_code == 200
    assert png.data == content_generator.profile_png


def test_wrong_token_is_treated_as_unauthorized(client):
    response = client.get("/api/user", headers={"Authorization": "Bearer nope"})

    assert [u["uuid"] for u in response.get_json()] == ["0", "1"]


def test_list_users_without_credentials_hides_uuids(client):
    response = client.get("/api/user")

    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert ADA_UUID not in body
    assert GRACE_UUID not in body
    assert [u["name"] for u in response.get_json()] == ["Ada Lovelace", "Grace Brewster Hopper"]


def test_list_users_with_credentials_shows_uuids(client):
    response = client.get("/api/user", headers=AUTH_HEADERS)

    assert [u["uuid"] for u in response.get_json()] == [ADA_UUID, GRACE_UUID]


def test_get_user_by_index(client):
    response = client.get("/api/user/1")

    assert response.status_code == 200
    assert response.get_json()["uuid"] == "1"
    assert GRACE_UUID not in response.get_data(as_text=True)


def test_unknown_identifiers_are_not_found(client):
    for path in ("/api/user/5", "/api/user/abc", "/api/user/-1", f"/api/user/{ADA_UUID}"):
        response = client.get(path)
        assert response.status_code == 404, path
        assert response.get_data(as_text=True) == "Not Found."

    assert client.get("/api/user/0", headers=AUTH_HEADERS).status_code == 404


def test_original_png_is_served_verbatim(client, image_store):
    response = client.get("/api/user/0/png")

    assert response.status_code == 200
    assert response.mimetype == "image/png"
    assert response.data == image_store.get(original_key(ADA_UUID))


def test_resized_png_allowed_sizes(client):
    for size, expected in (("48", (48, 48)), ("256", (256, 256)), ("48x48", (48, 48))):
        response = client.get(f"/api/user/0/{size}/png")
        assert response.status_code == 200
        assert response.mimetype == "image/png"
        assert Image.open(io.BytesIO(response.data)).size == expected


def test_resized_png_unsupported_size(client):
    for size in ("100", "48x256", "0"):
        response = client.get(f"/api/user/0/{size}/png")
        assert response.status_code == 404
        assert response.get_data(as_text=True) == "Image size not supported."


def test_badge_is_bmp(client):
    response = client.get("/api/user/1/badge")

    assert response.status_code == 200
    assert response.mimetype == "image/bmp"
    assert Image.open(io.BytesIO(response.data)).size == (296, 128)


def test_profile_b64_is_plain_text(client):
    assert client.get("/api/user/0/b64").get_data(as_text=True) == "QUJD"
    assert client.get("/api/user/1/b64").get_data(as_text=True) == ""


def test_update_without_body_is_not_acceptable(client):
    response = client.put("/api/user/0")

    assert response.status_code == 406
    assert response.get_data(as_text=True) == "No user payload found."


def test_update_by_index(client, user_repository):
    response = client.put("/api/user/1", json={"uuid": "1", "name": "Amazing Grace"})

    assert response.status_code == 200
    assert response.get_data(as_text=True) == "OK"
    assert user_repository.find_by_id(GRACE_UUID).name == "Amazing Grace"


def test_update_with_unparsable_index(client):
    response = client.put("/api/user/0", json={"uuid": "zero", "name": "X"})

    assert response.status_code == 406
    assert response.get_data(as_text=True) == "invalid index"


def test_delete_requires_credentials(client, user_repository):
    response = client.delete("/api/user/0")

    assert response.status_code == 401
    assert len(user_repository.find_all()) == 2


def test_delete_with_credentials(client, user_repository):
    response = client.delete(f"/api/user/{ADA_UUID}", headers=AUTH_HEADERS)

    assert response.status_code == 200
    assert response.get_json() is True
    assert client.get("/api/user/0").get_json()["name"] == "Grace Brewster Hopper"


def test_unexpected_failure_is_internal_error(client, user_service):
    user_service.list_users = lambda authorized: 1 / 0

    response = client.get("/api/user")

    assert response.status_code == 500
    assert response.get_json() == {"success": False, "error": "Internal error."}


def test_health_endpoints(client):
    for path in ("/health", "/api/health"):
        response = client.get(path)
        assert response.status_code == 200
        assert response.get_json()["status"] in ("healthy", "degraded")


def test_overlong_numeric_identifiers_are_not_found(client):
    huge = "9" * 5000

    response = client.get(f"/api/user/{huge}")
    assert response.status_code == 404
    assert response.get_data(as_text=True) == "Not Found."

    response = client.get(f"/api/user/0/{huge}/png")
    assert response.status_code == 404
    assert response.get_data(as_text=True) == "Image size not supported."


def test_update_with_loosely_formatted_index_is_invalid(client, user_repository):
    response = client.put("/api/user/0", json={"uuid": "0_1", "name": "X"})

    assert response.status_code == 406
    assert response.get_data(as_text=True) == "invalid index"
    assert user_repository.find_by_id(GRACE_UUID).name == "Grace Brewster Hopper"
