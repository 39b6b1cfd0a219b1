from .health import health
from .friends import add_friend_request, accept_friend_request
from .profile import update_user_profile
from .triggers import notification_created, secret_request_written, notification_sweep

__all__ = [
    "health",
    "add_friend_request",
    "accept_friend_request",
    "update_user_profile",
    "notification_created",
    "secret_request_written",
    "notification_sweep",
]
