"""
Environment configuration loader for the ZeKompanion user backend
Loads storage locations, auth and AI settings from the environment / .env file
"""

import os
from pathlib import Path
from typing import Dict, Any, List, Optional

from dotenv import dotenv_values

from backend.services.system.logger_service import get_logger, log_error

logger = get_logger(__name__)

BACKEND_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_BADGE_TEMPLATE = BACKEND_ROOT / 'static' / 'badge' / 'ze_badge_template.bmp'
DEFAULT_GROQ_MODEL = 'llama-3.3-70b-versatile'


def load_env_file(env_path: Optional[str] = None) -> Dict[str, str]:
    """
    Load variables from a .env file into os.environ.

    Values already present in the environment win over the file, and
    placeholder values (``your_...``) are skipped.

    Args:
        env_path: Path to .env file (default: .env in project root)

    Returns:
        Dictionary of the variables taken from the file
    """
    if env_path is None:
        env_path = str(BACKEND_ROOT.parent / '.env')

    if not os.path.exists(env_path):
        logger.debug("No .env file found", extra={"path": env_path})
        return {}

    loaded: Dict[str, str] = {}
    try:
        for key, value in dotenv_values(env_path).items():
            if not value or value.startswith('your_'):
                logger.debug("Placeholder value found - skipping", extra={"key": key})
                continue
            if key in os.environ:
                continue
            os.environ[key] = value
            loaded[key] = value
    except OSError as e:
        log_error(logger, e, {"context": "Error reading .env file", "path": env_path})

    return loaded


def _groq_api_keys() -> List[str]:
    keys: List[str] = []
    candidates = [os.getenv('GROQ_API_KEY')] + [os.getenv(f'GROQ_API_KEY_{i}') for i in range(1, 11)]
    for key in candidates:
        if key and not key.startswith('your_') and key not in keys:
            keys.append(key)
    return keys


def get_app_config() -> Dict[str, Any]:
    """
    Build the application configuration from the environment.

    Returns:
        Dictionary with storage, auth and content generation settings
    """
    load_env_file()

    profiles_dir = os.getenv('PROFILES_DIR', './profiles')
    user_store = os.getenv('USER_STORE', 'file').lower()
    if user_store not in ('file', 'firestore'):
        logger.warning("Unknown USER_STORE, falling back to file", extra={"user_store": user_store})
        user_store = 'file'

    config = {
        'profiles_dir': profiles_dir,
        'badge_template_path': os.getenv('BADGE_TEMPLATE_PATH', str(DEFAULT_BADGE_TEMPLATE)),
        'badge_font_path': os.getenv('BADGE_FONT_PATH'),
        'user_store': user_store,
        'users_file': os.getenv('USERS_FILE', os.path.join(profiles_dir, 'users.json')),
        'auth_token': os.getenv('ZE_AUTH_TOKEN'),
        'groq_api_keys': _groq_api_keys(),
        'groq_model': os.getenv('GROQ_MODEL', DEFAULT_GROQ_MODEL),
        'debug_mode': os.getenv('DEBUG_MODE', 'false').lower() == 'true',
    }

    if not config['auth_token']:
        logger.warning("ZE_AUTH_TOKEN not set; only Firebase admins will be authorized")
    if not config['groq_api_keys']:
        logger.warning("No Groq API keys configured; user creation is unavailable")

    logger.info(
        "Application configuration loaded",
        extra={
            "profiles_dir": config['profiles_dir'],
            "user_store": config['user_store'],
            "groq_keys": len(config['groq_api_keys']),
        }
    )
    return config
