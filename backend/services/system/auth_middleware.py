"""
Authorization gate.

Computes one binary outcome per request and stores it in `g.is_authorized`.
The gate never rejects a request; operations decide what an unauthorized
caller may see. A caller is authorized when its Bearer token matches the
shared admin token or verifies as a Firebase ID token with the `admin` claim.
"""
import hmac
from typing import Optional
from flask import request, g
from firebase_admin import auth
from backend.services.firebase.firebase_client import initialize_firebase, is_firebase_configured
from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)


def _bearer_token() -> Optional[str]:
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    token = auth_header[len('Bearer '):].strip()
    return token or None


def matches_shared_token(token: str, expected: Optional[str]) -> bool:
    if not expected:
        return False
    return hmac.compare_digest(token.encode('utf-8'), expected.encode('utf-8'))


def verify_firebase_admin(token: str) -> bool:
    """True when `token` is a valid, unrevoked Firebase ID token of an admin."""
    if not is_firebase_configured() or initialize_firebase() is None:
        return False
    try:
        decoded_token = auth.verify_id_token(token, check_revoked=True)
    except (ValueError, auth.InvalidIdTokenError, auth.RevokedIdTokenError,
            auth.ExpiredIdTokenError, auth.CertificateFetchError, auth.UserDisabledError) as e:
        logger.debug(f"Bearer token verification failed: {e}")
        return False
    g.user_id = decoded_token.get('uid')
    g.user_email = decoded_token.get('email')
    return bool(decoded_token.get('admin', False))


def is_authorized(shared_token: Optional[str]) -> bool:
    token = _bearer_token()
    if token is None:
        return False
    if matches_shared_token(token, shared_token):
        return True
    return verify_firebase_admin(token)


def make_auth_middleware(shared_token: Optional[str]):
    """before_request hook recording the authorization outcome."""
    def global_auth_middleware():
        g.is_authorized = is_authorized(shared_token)
        if not g.is_authorized and request.headers.get('Authorization'):
            logger.warning(
                "Credentials presented but not authorized",
                extra={'path': request.path, 'method': request.method, 'ip': request.remote_addr}
            )
        return None

    return global_auth_middleware
