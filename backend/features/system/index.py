from flask import Blueprint
from backend.features.system.controller.health_controller import HealthController
from backend.features.system.service.health_service import HealthService


def create_system_blueprint(profiles_dir: str) -> Blueprint:
    health_controller = HealthController(HealthService(profiles_dir))

    system_bp = Blueprint('system', __name__)
    system_bp.add_url_rule('/health', view_func=health_controller.health_check, methods=['GET'])
    system_bp.add_url_rule('/api/health', view_func=health_controller.health_check, endpoint='api_health', methods=['GET'])
    return system_bp
