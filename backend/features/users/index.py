from typing import Any, Dict
from flask import Blueprint
from backend.features.users.controller.user_controller import UserController
from backend.features.users.service.user_service import UserService
from backend.features.users.service.image_service import ImageService
from backend.features.users.service.badge_composer import BadgeComposer
from backend.features.users.repository.image_store import FileImageStore
from backend.features.users.repository.user_repository import UserRepository
from backend.features.users.repository.file_user_repository import FileUserRepository
from backend.services.ai_handlers.content_generator import GroqContentGenerator
from backend.services.system.security import limiter, CREATE_USER_LIMIT


def build_user_repository(config: Dict[str, Any]) -> UserRepository:
    if config['user_store'] == 'firestore':
        from backend.features.users.repository.firestore_user_repository import FirestoreUserRepository
        return FirestoreUserRepository()
    return FileUserRepository(config['users_file'])


def build_user_service(config: Dict[str, Any]) -> UserService:
    """Wire the production user feature from the application config."""
    image_service = ImageService(
        store=FileImageStore(config['profiles_dir']),
        badge_composer=BadgeComposer(config['badge_template_path'], config['badge_font_path']),
    )
    return UserService(
        user_repository=build_user_repository(config),
        image_service=image_service,
        content_generator=GroqContentGenerator(config['groq_api_keys'], config['groq_model']),
    )


def create_user_blueprint(user_service: UserService) -> Blueprint:
    user_controller = UserController(user_service)
    user_bp = Blueprint("users_feature", __name__)

    # User management (CRUD)
    user_bp.add_url_rule("/api/user", view_func=user_controller.list_users, methods=["GET"])
    user_bp.add_url_rule("/api/user", view_func=limiter.limit(CREATE_USER_LIMIT)(user_controller.create_user), methods=["POST"])
    user_bp.add_url_rule("/api/user/<user_id>", view_func=user_controller.get_user, methods=["GET"])
    user_bp.add_url_rule("/api/user/<user_id>", view_func=user_controller.update_user, methods=["PUT"])
    user_bp.add_url_rule("/api/user/<user_id>", view_func=user_controller.delete_user, methods=["DELETE"])

    # Profile imagery
    user_bp.add_url_rule("/api/user/<user_id>/png", view_func=user_controller.get_profile_png, methods=["GET"])
    user_bp.add_url_rule("/api/user/<user_id>/<size>/png", view_func=user_controller.get_resized_png, methods=["GET"])
    user_bp.add_url_rule("/api/user/<user_id>/badge", view_func=user_controller.get_badge, methods=["GET"])
    user_bp.add_url_rule("/api/user/<user_id>/b64", view_func=user_controller.get_profile_b64, methods=["GET"])

    return user_bp
