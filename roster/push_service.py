"""
Push notification service for the web app (FCM via Firebase Admin SDK)
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from firebase_admin import messaging

from .errors import PushUnavailableError
from .firebase_service import get_firebase_app

logger = logging.getLogger("roster")


@dataclass
class PushResult:
    """Result of a push notification attempt for one token"""
    success: bool
    token: str
    message_id: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


@dataclass
class MulticastResult:
    """Per-token results of one multicast send, aligned with the token list"""
    responses: List[PushResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.responses if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.responses if not r.success)


def error_code_for(exc) -> str:
    """Map a Firebase messaging exception to a stable error code"""
    if exc is None:
        return "unknown"
    if isinstance(exc, messaging.UnregisteredError):
        return "UNREGISTERED"
    if isinstance(exc, messaging.SenderIdMismatchError):
        return "SENDER_ID_MISMATCH"
    code = getattr(exc, "code", None)
    return str(code) if code else "exception"


class FCMService:
    """
    Firebase Cloud Messaging service.
    Uses Firebase Admin SDK multicast sends for web push.
    """

    def __init__(self):
        self._app = None

    def _get_app(self):
        """Get Firebase app (lazy initialization)"""
        if self._app is None:
            self._app = get_firebase_app()
            if self._app is not None:
                logger.info("[FCM] Firebase messaging initialized")
        return self._app

    def is_configured(self) -> bool:
        """Check if FCM is properly configured"""
        return self._get_app() is not None

    def send_multicast(
        self,
        tokens: List[str],
        title: str,
        body: str,
        data: Dict[str, object],
        link: Optional[str] = None,
    ) -> MulticastResult:
        """
        Send one notification to many device tokens.

        Args:
            tokens: FCM registration tokens
            title: Visible notification title
            body: Visible notification body
            data: Data payload (values are converted to strings)
            link: Deep link opened when the web notification is clicked

        Returns:
            MulticastResult with one PushResult per token, in token order

        Raises:
            PushUnavailableError if Firebase is not configured. Errors of the
            send call itself are not caught.
        """
        app = self._get_app()
        if app is None:
            raise PushUnavailableError("FCM not configured")

        # FCM data values must be strings
        string_data = {k: str(v) for k, v in data.items()}

        webpush = None
        if link:
            webpush = messaging.WebpushConfig(
                fcm_options=messaging.WebpushFCMOptions(link=link),
            )

        message = messaging.MulticastMessage(
            tokens=list(tokens),
            notification=messaging.Notification(title=title, body=body),
            data=string_data,
            webpush=webpush,
        )

        response = messaging.send_each_for_multicast(message, app=app)

        results = []
        for token, item in zip(tokens, response.responses):
            if item.success:
                results.append(PushResult(success=True, token=token, message_id=item.message_id))
                continue
            code = error_code_for(item.exception)
            logger.warning(f"[FCM] Send failed for token {token[:20]}...: {code}")
            results.append(PushResult(
                success=False,
                token=token,
                error=str(item.exception),
                error_code=code,
            ))

        logger.info(
            f"[FCM] Multicast sent: success={response.success_count}, failure={response.failure_count}"
        )
        return MulticastResult(responses=results)


# Singleton instance
push_service = FCMService()
