from datetime import datetime, timezone
import psutil
from backend.common.base.base_service import BaseService
from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)

class HealthService(BaseService):
    def __init__(self, profiles_dir: str):
        self.startup_time = datetime.now(timezone.utc)
        self.profiles_dir = profiles_dir

    def get_health_data(self):
        uptime_duration = datetime.now(timezone.utc) - self.startup_time
        disk = psutil.disk_usage(self.profiles_dir)

        # A full disk turns every cache miss into a failed publish
        status = 'degraded' if disk.percent >= 98 else 'healthy'
        if status != 'healthy':
            logger.warning("Profile store disk nearly full", extra={"disk_percent": disk.percent})

        return {
            'status': status,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'uptime_hours': round(uptime_duration.total_seconds() / 3600, 2),
            'profile_store': {
                'path': self.profiles_dir,
                'disk_percent': disk.percent,
                'disk_free_bytes': disk.free,
            },
            'memory_percent': psutil.virtual_memory().percent,
        }
