"""
Document paths, relative to the app namespace artifacts/{APP_ID}.

A path is a tuple of alternating collection and document ids.
"""
from typing import Tuple

from .constants import (
    FRIENDS_COLLECTION,
    NOTIFICATION_QUEUE_COLLECTION,
    PUBLIC_PROFILES_COLLECTION,
    SECRET_CONTACTS_COLLECTION,
    SECRET_REQUESTS_COLLECTION,
    TOKENS_COLLECTION,
    USERS_COLLECTION,
)

Path = Tuple[str, ...]


def user_profile(uid: str) -> Path:
    return (USERS_COLLECTION, uid)


def fcm_tokens(uid: str) -> Path:
    return (USERS_COLLECTION, uid, TOKENS_COLLECTION)


def fcm_token(uid: str, token: str) -> Path:
    return fcm_tokens(uid) + (token,)


def friend_edge(owner_uid: str, other_uid: str) -> Path:
    return (USERS_COLLECTION, owner_uid, FRIENDS_COLLECTION, other_uid)


def secret_contact(owner_uid: str, other_uid: str) -> Path:
    return (USERS_COLLECTION, owner_uid, SECRET_CONTACTS_COLLECTION, other_uid)


def public_profile(share_code: str) -> Path:
    return (PUBLIC_PROFILES_COLLECTION, share_code)


def notification_queue() -> Path:
    return (NOTIFICATION_QUEUE_COLLECTION,)


def notification(notification_id: str) -> Path:
    return (NOTIFICATION_QUEUE_COLLECTION, notification_id)


def secret_request(request_id: str) -> Path:
    return (SECRET_REQUESTS_COLLECTION, request_id)
