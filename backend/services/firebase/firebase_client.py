"""Shared Firebase initialization helper."""
from __future__ import annotations

import os
import threading
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from backend.services.system.logger_service import get_logger, log_error

logger = get_logger(__name__)

_firebase_init_lock = threading.Lock()


def is_firebase_configured() -> bool:
    return bool(
        firebase_admin._apps
        or (os.getenv("FIREBASE_PROJECT_ID") and os.getenv("FIREBASE_CLIENT_EMAIL") and os.getenv("FIREBASE_PRIVATE_KEY"))
        or os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    )


def initialize_firebase() -> Optional[Any]:
    """Initialize the Firebase Admin SDK once and return a Firestore client.

    Returns None when no credentials are configured or initialization fails.
    """
    with _firebase_init_lock:
        if not firebase_admin._apps:
            if not is_firebase_configured():
                logger.info("Firebase credentials not configured")
                return None
            try:
                project_id = os.getenv("FIREBASE_PROJECT_ID")
                client_email = os.getenv("FIREBASE_CLIENT_EMAIL")
                private_key = os.getenv("FIREBASE_PRIVATE_KEY")
                if project_id and client_email and private_key:
                    logger.info("Initializing Firebase with environment variables")
                    cred = credentials.Certificate({
                        "type": "service_account",
                        "project_id": project_id,
                        "private_key_id": os.getenv("FIREBASE_PRIVATE_KEY_ID", ""),
                        "private_key": private_key.replace("\\n", "\n"),
                        "client_email": client_email,
                        "client_id": os.getenv("FIREBASE_CLIENT_ID", ""),
                        "token_uri": "https://oauth2.googleapis.com/token",
                    })
                    firebase_admin.initialize_app(cred)
                else:
                    # Application default credentials
                    firebase_admin.initialize_app()
            except Exception as e:
                log_error(logger, e, {"service": "firebase", "operation": "initialize"})
                return None
        return firestore.client()
