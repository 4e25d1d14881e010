"""
User Service.

Every read and write goes through the IdentityResolver, so the identifier
space a caller may use is decided in one place.
"""
import base64
import uuid as uuid_lib
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from backend.common.base.base_service import BaseService
from backend.common.errors import ForbiddenError, ImageIOError, InvalidPayloadError, NotFoundError
from backend.features.users.domain.artifact import Badge, Original, Resize
from backend.features.users.domain.user_entity import User
from backend.features.users.dto.user_request import UpdateUserRequest
from backend.features.users.mapper.user_mapper import from_update_request, to_user_response
from backend.features.users.repository.user_repository import UserRepository
from backend.features.users.service.identity_resolver import IdentityResolver
from backend.features.users.service.image_service import ImageService, parse_size_token, validate_size
from backend.services.ai_handlers.content_generator import ContentGenerator
from backend.services.system.logger_service import get_logger, log_error, log_user_operation

logger = get_logger(__name__)

class UserService(BaseService):
    def __init__(self, user_repository: UserRepository, image_service: ImageService,
                 content_generator: ContentGenerator):
        self.user_repository = user_repository
        self.image_service = image_service
        self.content_generator = content_generator
        self.identity_resolver = IdentityResolver(user_repository)

    def create_user(self, authorized: bool) -> Dict[str, Any]:
        self.require_authorized(authorized, "create_user")

        new_uuid = str(uuid_lib.uuid4())
        name = self.content_generator.create_user_name()
        description = self.content_generator.create_user_description(name)
        chat_phrase = self.content_generator.create_user_chat_phrase(name, description)
        profile_png = self.content_generator.create_user_profile_image(new_uuid, name, description)

        self.image_service.store_original(new_uuid, profile_png)
        user = User(
            uuid=new_uuid,
            name=name,
            description=description,
            profile_b64=base64.b64encode(profile_png).decode('ascii'),
            chat_phrase=chat_phrase,
        )

        added_uuid = self.user_repository.save(user)
        if added_uuid is None:
            self._discard_original(new_uuid)
            raise ForbiddenError(f"Repository rejected user {new_uuid}")

        log_user_operation(logger, "CREATE", added_uuid, authorized, user_name=name)
        return to_user_response(self.user_repository.find_by_id(added_uuid) or user)

    def _discard_original(self, uuid: str) -> None:
        try:
            self.image_service.delete_original(uuid)
        except ImageIOError as e:
            log_error(logger, e, {"context": "Orphaned profile image left behind", "user_uuid": uuid})

    def get_user(self, raw_id: str, authorized: bool) -> Dict[str, Any]:
        resolved = self.identity_resolver.resolve(raw_id, authorized)
        log_user_operation(logger, "READ", resolved.exposed_identifier, authorized)
        return to_user_response(resolved.user)

    def update_user(self, raw_id: str, authorized: bool, body: Optional[Dict[str, Any]]) -> bool:
        if body is None:
            raise InvalidPayloadError("Missing user payload", public_message="No user payload found.")
        try:
            request = UpdateUserRequest.model_validate(body)
        except ValidationError as e:
            raise InvalidPayloadError(f"Malformed user payload: {e}", public_message="invalid") from e

        resolved, record = self.identity_resolver.resolve_update_target(
            raw_id, authorized, from_update_request(request)
        )
        if not self.user_repository.update(record):
            raise NotFoundError(f"Update rejected for {resolved.canonical_uuid}", public_message="invalid user")

        log_user_operation(logger, "UPDATE", resolved.exposed_identifier, authorized)
        return True

    def delete_user(self, raw_id: str, authorized: bool) -> bool:
        self.require_authorized(authorized, "delete_user")
        resolved = self.identity_resolver.resolve(raw_id, authorized)

        deleted = self.user_repository.delete(resolved.canonical_uuid)
        if deleted:
            self._discard_original(resolved.canonical_uuid)
        log_user_operation(logger, "DELETE", resolved.exposed_identifier, authorized, deleted=deleted)
        return deleted

    def list_users(self, authorized: bool) -> List[Dict[str, Any]]:
        users = self.user_repository.find_all() if authorized else self.user_repository.find_indexed()
        logger.info("Users listed", extra={"count": len(users), "authorized": authorized})
        return [to_user_response(user) for user in users]

    def get_original_image(self, raw_id: str, authorized: bool) -> bytes:
        resolved = self.identity_resolver.resolve(raw_id, authorized)
        return self.image_service.derive_artifact(resolved.canonical_uuid, Original())

    def get_resized_image(self, raw_id: str, authorized: bool, size_token: str) -> bytes:
        width, height = parse_size_token(size_token)
        validate_size(width, height)

        resolved = self.identity_resolver.resolve(raw_id, authorized)
        return self.image_service.derive_artifact(resolved.canonical_uuid, Resize(width, height))

    def get_badge(self, raw_id: str, authorized: bool) -> bytes:
        resolved = self.identity_resolver.resolve(raw_id, authorized)
        badge = self.image_service.derive_artifact(resolved.canonical_uuid, Badge(), name=resolved.user.name)
        log_user_operation(logger, "BADGE", resolved.exposed_identifier, authorized)
        return badge

    def get_profile_b64(self, raw_id: str, authorized: bool) -> str:
        resolved = self.identity_resolver.resolve(raw_id, authorized)
        return resolved.user.profile_b64 or ""
