import base64
from unittest.mock import patch

import pytest

from backend.common.errors import ForbiddenError, InvalidPayloadError, NotFoundError, UnauthorizedError, UnsupportedSizeError
from backend.features.users.domain.artifact import original_key
from backend.tests.helpers import ADA_UUID, GRACE_UUID


def test_create_user_stores_original_and_record(user_service, user_repository, image_store, content_generator):
    created = user_service.create_user(authorized=True)

    assert created["name"] == "Ada Lovelace"
    assert created["chatPhrase"] == "Hello, engine!"
    assert created["profileB64"] == base64.b64encode(content_generator.profile_png).decode("ascii")
    assert image_store.get(original_key(created["uuid"])) == content_generator.profile_png
    assert user_repository.find_by_index(2).uuid == created["uuid"]


def test_create_user_requires_authorization(user_service, user_repository, image_store):
    with pytest.raises(UnauthorizedError):
        user_service.create_user(authorized=False)

    assert len(user_repository.find_all()) == 2
    assert image_store.writes == 0


def test_rejected_create_discards_stored_original(user_service, user_repository, image_store):
    with patch.object(user_repository, "save", return_value=None):
        with pytest.raises(ForbiddenError):
            user_service.create_user(authorized=True)

    assert image_store.writes == 1
    assert [key for key in image_store._blobs if key not in (original_key(ADA_UUID), original_key(GRACE_UUID))] == []


def test_get_user_by_index_hides_uuid(user_service):
    user = user_service.get_user("1", authorized=False)

    assert user["uuid"] == "1"
    assert user["name"] == "Grace Brewster Hopper"
    assert GRACE_UUID not in str(user)


def test_get_user_by_uuid_for_authorized_caller(user_service):
    assert user_service.get_user(ADA_UUID, authorized=True)["uuid"] == ADA_UUID


def test_list_users_for_unauthorized_caller_never_contains_uuids(user_service):
    users = user_service.list_users(authorized=False)

    assert [u["uuid"] for u in users] == ["0", "1"]
    assert ADA_UUID not in str(users)
    assert GRACE_UUID not in str(users)


def test_list_users_for_authorized_caller_uses_uuids(user_service):
    assert [u["uuid"] for u in user_service.list_users(authorized=True)] == [ADA_UUID, GRACE_UUID]


def test_update_without_body_is_invalid(user_service):
    with pytest.raises(InvalidPayloadError) as exc_info:
        user_service.update_user(ADA_UUID, True, None)
    assert exc_info.value.public_message == "No user payload found."


def test_update_with_malformed_body_is_invalid(user_service):
    with pytest.raises(InvalidPayloadError) as exc_info:
        user_service.update_user(ADA_UUID, True, {"uuid": ADA_UUID})
    assert exc_info.value.public_message == "invalid"


def test_authorized_update_overrides_payload_uuid(user_service, user_repository):
    body = {"uuid": GRACE_UUID, "name": "Ada King", "description": "Countess"}

    assert user_service.update_user(ADA_UUID, True, body) is True

    assert user_repository.find_by_id(ADA_UUID).name == "Ada King"
    assert user_repository.find_by_id(GRACE_UUID).name == "Grace Brewster Hopper"


def test_unauthorized_update_addresses_by_payload_index(user_service, user_repository):
    user_service.update_user("ignored", False, {"uuid": "1", "name": "Amazing Grace"})

    updated = user_repository.find_by_id(GRACE_UUID)
    assert updated.name == "Amazing Grace"
    assert updated.uuid == GRACE_UUID


def test_unauthorized_update_accepts_numeric_index(user_service, user_repository):
    user_service.update_user("0", False, {"uuid": 0, "name": "Ada"})

    assert user_repository.find_by_id(ADA_UUID).name == "Ada"


def test_unauthorized_update_with_bad_index(user_service):
    with pytest.raises(InvalidPayloadError):
        user_service.update_user("0", False, {"uuid": ADA_UUID, "name": "X"})
    with pytest.raises(NotFoundError):
        user_service.update_user("0", False, {"uuid": "7", "name": "X"})


def test_update_rejected_by_repository_is_not_found(user_service, user_repository):
    with patch.object(user_repository, "update", return_value=False):
        with pytest.raises(NotFoundError) as exc_info:
            user_service.update_user(ADA_UUID, True, {"uuid": ADA_UUID, "name": "X"})
    assert exc_info.value.public_message == "invalid user"


def test_delete_requires_authorization(user_service, user_repository):
    with pytest.raises(UnauthorizedError):
        user_service.delete_user("0", authorized=False)
    assert len(user_repository.find_all()) == 2


def test_delete_removes_record_and_original(user_service, user_repository, image_store):
    assert user_service.delete_user(ADA_UUID, authorized=True) is True

    assert user_repository.find_by_id(ADA_UUID) is None
    assert not image_store.exists(original_key(ADA_UUID))
    # Indices shift down after a delete
    assert user_repository.find_by_index(0).uuid == GRACE_UUID


def test_delete_unknown_user_is_not_found(user_service):
    with pytest.raises(NotFoundError):
        user_service.delete_user("missing", authorized=True)


def test_resize_size_is_checked_before_identity(user_service):
    with pytest.raises(UnsupportedSizeError):
        user_service.get_resized_image("999", authorized=False, size_token="100")


def test_resized_image_for_index_caller(user_service, image_store):
    data = user_service.get_resized_image("0", authorized=False, size_token="48")

    assert data == image_store.get(f"{ADA_UUID}-48x48.png")


def test_profile_b64_defaults_to_empty(user_service):
    assert user_service.get_profile_b64("0", authorized=False) == "QUJD"
    assert user_service.get_profile_b64("1", authorized=False) == ""


def test_badge_uses_record_name(user_service, image_service):
    assert user_service.get_badge("0", authorized=False) == image_service.fetch_badge(ADA_UUID, "Ada Lovelace")


def test_overlong_size_token_is_unsupported(user_service):
    with pytest.raises(UnsupportedSizeError):
        user_service.get_resized_image("0", authorized=False, size_token="9" * 5000)
