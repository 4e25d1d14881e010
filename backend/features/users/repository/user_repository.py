"""
User Repository interface and the in-process implementation.

Records are addressable by canonical UUID and by positional index in the
repository's ordered list. The index is a weak identifier: deleting a record
shifts every later record down by one, and the freed tail index is reused by
the next create.
"""
import threading
from abc import abstractmethod
from typing import Optional, List
from backend.common.base.base_repository import BaseRepository
from backend.features.users.domain.user_entity import User
from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)

class UserRepository(BaseRepository[User]):

    @abstractmethod
    def find_by_index(self, index: int) -> Optional[User]:
        pass

    def find_indexed(self) -> List[User]:
        """All users with their uuid replaced by their positional index."""
        return [user.with_uuid(str(index)) for index, user in enumerate(self.find_all())]


class InMemoryUserRepository(UserRepository):
    def __init__(self, users: Optional[List[User]] = None):
        self._lock = threading.RLock()
        self._users: List[User] = list(users or [])

    def find_by_id(self, id: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users if u.uuid == id), None)

    def find_by_index(self, index: int) -> Optional[User]:
        with self._lock:
            if 0 <= index < len(self._users):
                return self._users[index]
            return None

    def find_all(self) -> List[User]:
        with self._lock:
            return list(self._users)

    def save(self, entity: User) -> Optional[str]:
        with self._lock:
            if not entity.uuid or self.find_by_id(entity.uuid) is not None:
                logger.warning("Rejected user create", extra={"reason": "duplicate or empty uuid"})
                return None
            self._users.append(entity)
            return entity.uuid

    def update(self, entity: User) -> bool:
        with self._lock:
            for position, existing in enumerate(self._users):
                if existing.uuid == entity.uuid:
                    self._users[position] = entity
                    return True
            return False

    def delete(self, id: str) -> bool:
        with self._lock:
            before = len(self._users)
            self._users = [u for u in self._users if u.uuid != id]
            return len(self._users) != before
