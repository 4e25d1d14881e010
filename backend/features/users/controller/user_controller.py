from flask import request, g
from backend.common.base.base_controller import BaseController
from backend.common.errors import ServiceError
from backend.features.users.domain.artifact import Badge, Original, Resize
from backend.features.users.service.user_service import UserService
from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)

class UserController(BaseController):
    def __init__(self, user_service: UserService):
        self.user_service = user_service

    def _authorized(self) -> bool:
        return bool(getattr(g, 'is_authorized', False))

    def create_user(self):
        """Generate and store a new user"""
        try:
            user = self.user_service.create_user(self._authorized())
            return self.handle_response(user, 201)
        except ServiceError as exc:
            return self.handle_service_error(exc)
        except Exception as exc:
            return self.handle_error(exc)

    def list_users(self):
        try:
            return self.handle_response(self.user_service.list_users(self._authorized()))
        except ServiceError as exc:
            return self.handle_service_error(exc)
        except Exception as exc:
            return self.handle_error(exc)

    def get_user(self, user_id: str):
        try:
            return self.handle_response(self.user_service.get_user(user_id, self._authorized()))
        except ServiceError as exc:
            return self.handle_service_error(exc)
        except Exception as exc:
            return self.handle_error(exc)

    def update_user(self, user_id: str):
        try:
            body = request.get_json(silent=True)
            self.user_service.update_user(user_id, self._authorized(), body)
            return self.handle_text("OK")
        except ServiceError as exc:
            return self.handle_service_error(exc)
        except Exception as exc:
            return self.handle_error(exc)

    def delete_user(self, user_id: str):
        try:
            return self.handle_response(self.user_service.delete_user(user_id, self._authorized()))
        except ServiceError as exc:
            return self.handle_service_error(exc)
        except Exception as exc:
            return self.handle_error(exc)

    def get_profile_png(self, user_id: str):
        try:
            data = self.user_service.get_original_image(user_id, self._authorized())
            return self.handle_image(data, Original.mimetype)
        except ServiceError as exc:
            return self.handle_service_error(exc)
        except Exception as exc:
            return self.handle_error(exc)

    def get_resized_png(self, user_id: str, size: str):
        try:
            data = self.user_service.get_resized_image(user_id, self._authorized(), size)
            return self.handle_image(data, Resize.mimetype)
        except ServiceError as exc:
            return self.handle_service_error(exc)
        except Exception as exc:
            return self.handle_error(exc)

    def get_badge(self, user_id: str):
        try:
            data = self.user_service.get_badge(user_id, self._authorized())
            return self.handle_image(data, Badge.mimetype)
        except ServiceError as exc:
            return self.handle_service_error(exc)
        except Exception as exc:
            return self.handle_error(exc)

    def get_profile_b64(self, user_id: str):
        try:
            return self.handle_text(self.user_service.get_profile_b64(user_id, self._authorized()))
        except ServiceError as exc:
            return self.handle_service_error(exc)
        except Exception as exc:
            return self.handle_error(exc)
