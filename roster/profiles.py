import logging
from typing import Any, Dict, Optional

from . import paths
from .constants import DISPLAY_ID_LENGTH
from .errors import Internal, InvalidArgument, RosterError, Unauthenticated
from .firebase_service import firestore_service

logger = logging.getLogger("roster")


def default_name(uid: str) -> str:
    return str(uid)[:DISPLAY_ID_LENGTH]


class ProfileDirectory:
    """
    User profiles and the public shareCode -> user mapping.

    public_profiles/{shareCode} is the only way to find a user without
    knowing its id. A code maps to a single user; when a user changes code the
    old mapping is removed in the same transaction as the new one is written.
    """

    def __init__(self, store=None):
        self.store = store if store is not None else firestore_service

    def get_profile(self, uid: str) -> Dict[str, Any]:
        data = self.store.get(paths.user_profile(uid)) or {}
        return {
            "name": data.get("name") or default_name(uid),
            "shareCode": data.get("shareCode") or "",
        }

    def resolve_share_code(self, share_code: str) -> Optional[Dict[str, Any]]:
        """Public profile for a share code, or None"""
        data = self.store.get(paths.public_profile(share_code))
        if not data or not data.get("userId"):
            return None
        return data

    def update_profile(self, uid: Optional[str], name=None, share_code=None) -> None:
        if not uid:
            raise Unauthenticated()
        if name is not None and not isinstance(name, str):
            raise InvalidArgument("Invalid name")
        if share_code is not None and not isinstance(share_code, str):
            raise InvalidArgument("Invalid share code")

        display_name = name or default_name(uid)

        def _txn(txn):
            profile_path = paths.user_profile(uid)
            old_code = (txn.get(profile_path) or {}).get("shareCode") or ""

            if share_code:
                claimed = txn.get(paths.public_profile(share_code))
                if claimed and claimed.get("userId") not in (None, uid):
                    raise InvalidArgument("Share code already in use")

            stale = None
            if share_code is not None and old_code and old_code != share_code:
                previous = txn.get(paths.public_profile(old_code))
                if previous and previous.get("userId") == uid:
                    stale = paths.public_profile(old_code)

            now = self.store.server_timestamp()
            profile = {"name": display_name, "updatedAt": now}
            if share_code is not None:
                profile["shareCode"] = share_code
            txn.set(profile_path, profile, merge=True)

            if share_code:
                txn.set(
                    paths.public_profile(share_code),
                    {"userId": uid, "name": display_name, "shareCode": share_code, "updatedAt": now},
                    merge=True,
                )
            if stale:
                txn.delete(stale)
            return stale

        try:
            stale = self.store.run_transaction(_txn)
        except RosterError:
            raise
        except Exception as e:
            logger.exception(f"[PROFILE] update failed for uid={uid}")
            raise Internal(str(e) or "Error updating profile") from e

        logger.info(f"[PROFILE] Updated uid={uid}, shareCode={share_code!r}, retracted={stale is not None}")


# Singleton instance
profile_directory = ProfileDirectory()
