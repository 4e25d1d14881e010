"""
Identity resolution for the two identifier spaces.

Authorized callers use canonical UUIDs. Unauthorized callers use positional
indices, and everything resolved for them carries the index in place of the
UUID, so the canonical UUID never reaches them.
"""
from typing import Tuple
from backend.common.base.base_service import BaseService
from backend.common.errors import InvalidPayloadError, NotFoundError
from backend.features.users.domain.identity import (
    ByIndex,
    ByUUID,
    CallerIdentifier,
    ResolvedIdentity,
    caller_identifier,
    parse_signed_index,
)
from backend.features.users.domain.user_entity import User
from backend.features.users.repository.user_repository import UserRepository
from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)


class IdentityResolver(BaseService):
    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    def resolve_identifier(self, identifier: CallerIdentifier) -> ResolvedIdentity:
        if isinstance(identifier, ByUUID):
            user = self.user_repository.find_by_id(identifier.uuid)
            if user is None:
                raise NotFoundError(f"No user with uuid {identifier.uuid}")
            return ResolvedIdentity(canonical_uuid=user.uuid, exposed_identifier=user.uuid, user=user)

        if isinstance(identifier, ByIndex):
            user = self.user_repository.find_by_index(identifier.index)
            if user is None:
                raise NotFoundError(f"No user at index {identifier.index}")
            exposed = str(identifier.index)
            return ResolvedIdentity(canonical_uuid=user.uuid, exposed_identifier=exposed, user=user.with_uuid(exposed))

        raise TypeError(f"Unknown identifier: {identifier!r}")

    def resolve(self, raw_id: str, authorized: bool) -> ResolvedIdentity:
        return self.resolve_identifier(caller_identifier(raw_id, authorized))

    def resolve_update_target(self, path_id: str, authorized: bool, payload: User) -> Tuple[ResolvedIdentity, User]:
        """
        Pick the record an update applies to and the record to write.

        Authorized: the path UUID is the target and overrides the payload's uuid.
        Unauthorized: the payload's uuid must be an integer index; the record at
        that position is the target and keeps its canonical UUID.
        """
        if authorized:
            resolved = self.resolve_identifier(ByUUID(path_id))
        else:
            index = parse_signed_index(payload.uuid)
            if index is None:
                raise InvalidPayloadError(f"Unparsable index {payload.uuid!r}", public_message="invalid index")
            resolved = self.resolve_identifier(ByIndex(index))

        return resolved, payload.with_uuid(resolved.canonical_uuid)
