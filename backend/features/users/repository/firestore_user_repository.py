from typing import Optional, List, Any
from google.api_core.exceptions import AlreadyExists, GoogleAPICallError
from google.cloud import firestore
from backend.features.users.domain.user_entity import User
from backend.features.users.mapper.user_mapper import from_dict, to_dict_from_entity
from backend.features.users.repository.user_repository import UserRepository
from backend.services.firebase.firebase_client import initialize_firebase
from backend.services.system.logger_service import get_logger, log_error

logger = get_logger(__name__)

class FirestoreUserRepository(UserRepository):
    """
    Users in the Firestore `users` collection, one document per UUID.
    Positional order is creation order (`createdAt`).
    """

    def __init__(self, db: Any = None, collection_name: str = 'users'):
        self.db = db if db is not None else initialize_firebase()
        if self.db:
            self.collection = self.db.collection(collection_name)
        else:
            logger.error("Firestore unavailable; user repository is read-empty")
            self.collection = None

    def _ordered(self):
        return self.collection.order_by('createdAt')

    def find_by_id(self, id: str) -> Optional[User]:
        if not self.collection:
            return None
        doc = self.collection.document(id).get()
        if not doc.exists:
            return None
        data = doc.to_dict()
        data['uuid'] = doc.id
        return from_dict(data)

    def find_by_index(self, index: int) -> Optional[User]:
        if not self.collection or index < 0:
            return None
        for doc in self._ordered().offset(index).limit(1).stream():
            data = doc.to_dict()
            data['uuid'] = doc.id
            return from_dict(data)
        return None

    def find_all(self) -> List[User]:
        if not self.collection:
            return []
        users = []
        for doc in self._ordered().stream():
            data = doc.to_dict()
            data['uuid'] = doc.id
            users.append(from_dict(data))
        return users

    def save(self, entity: User) -> Optional[str]:
        if not self.collection or not entity.uuid:
            return None
        data = to_dict_from_entity(entity)
        data['createdAt'] = firestore.SERVER_TIMESTAMP
        try:
            self.collection.document(entity.uuid).create(data)
        except AlreadyExists:
            logger.warning("Rejected user create", extra={"reason": "duplicate uuid"})
            return None
        except GoogleAPICallError as e:
            log_error(logger, e, {"operation": "create_user"})
            return None
        logger.debug("User saved", extra={"user_uuid": entity.uuid})
        return entity.uuid

    def update(self, entity: User) -> bool:
        if not self.collection:
            return False
        doc_ref = self.collection.document(entity.uuid)
        if not doc_ref.get().exists:
            return False
        data = to_dict_from_entity(entity)
        data.pop('uuid')
        try:
            doc_ref.update(data)
        except GoogleAPICallError as e:
            log_error(logger, e, {"operation": "update_user"})
            return False
        return True

    def delete(self, id: str) -> bool:
        if not self.collection:
            return False
        doc_ref = self.collection.document(id)
        if not doc_ref.get().exists:
            return False
        try:
            doc_ref.delete()
        except GoogleAPICallError as e:
            log_error(logger, e, {"operation": "delete_user"})
            return False
        return True
