"""
JSON file backed User Repository.

The whole user list lives in one JSON document; list order is the
positional index. Every mutation rewrites the document atomically.
"""
import json
import threading
from pathlib import Path
from typing import Optional, List
from backend.features.users.domain.user_entity import User
from backend.features.users.mapper.user_mapper import from_dict, to_dict_from_entity
from backend.features.users.repository.user_repository import UserRepository
from backend.services.system.logger_service import get_logger, log_error
from backend.utils.file_utils import atomic_write_bytes

logger = get_logger(__name__)

class FileUserRepository(UserRepository):
    def __init__(self, path: str):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self._users: List[User] = self._load()
        logger.info("File user repository ready", extra={"path": str(self.path), "users": len(self._users)})

    def _load(self) -> List[User]:
        if not self.path.exists():
            return []
        try:
            document = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            log_error(logger, e, {"context": "Unreadable users file, starting empty", "path": str(self.path)})
            return []
        return [from_dict(item) for item in document.get('users', [])]

    def _flush(self, users: List[User]) -> bool:
        payload = json.dumps({'users': [to_dict_from_entity(u) for u in users]}, indent=2)
        try:
            atomic_write_bytes(self.path, payload.encode('utf-8'))
        except OSError as e:
            log_error(logger, e, {"context": "Failed to persist users file", "path": str(self.path)})
            return False
        self._users = users
        return True

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
            if not self._flush(self._users + [entity]):
                return None
            logger.debug("User saved", extra={"user_uuid": entity.uuid})
            return entity.uuid

    def update(self, entity: User) -> bool:
        with self._lock:
            users = list(self._users)
            for position, existing in enumerate(users):
                if existing.uuid == entity.uuid:
                    users[position] = entity
                    return self._flush(users)
            return False

    def delete(self, id: str) -> bool:
        with self._lock:
            users = [u for u in self._users if u.uuid != id]
            if len(users) == len(self._users):
                return False
            return self._flush(users)
