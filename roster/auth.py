import logging
from typing import Optional

from firebase_admin import auth as fb_auth

from .firebase_service import get_firebase_app

logger = logging.getLogger("roster")


def bearer_token(request) -> Optional[str]:
    header = request.META.get("HTTP_AUTHORIZATION", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def caller_uid(request) -> Optional[str]:
    """uid of the verified Firebase ID token on the request, or None"""
    token = bearer_token(request)
    if not token:
        return None

    app = get_firebase_app()
    if app is None:
        logger.warning("[AUTH] Firebase not configured, cannot verify ID token")
        return None

    try:
        decoded = fb_auth.verify_id_token(token, app=app)
    except (
        fb_auth.InvalidIdTokenError,
        fb_auth.ExpiredIdTokenError,
        fb_auth.RevokedIdTokenError,
        fb_auth.CertificateFetchError,
        ValueError,
    ) as e:
        logger.warning(f"[AUTH] Rejected ID token: {e}")
        return None

    return decoded.get("uid")
