"""
Friend graph.

A friendship between A and B is two edge documents, users/A/friends/B and
users/B/friends/A. Both edges are always written in one transaction:
pending_sent on the initiator's side pairs with pending_received on the
recipient's side, and both move to accepted together.
"""
import logging
from typing import Optional

from . import paths
from .constants import (
    DEFAULT_FRIEND_NAME,
    EDGE_ACCEPTED,
    EDGE_PENDING_RECEIVED,
    EDGE_PENDING_SENT,
)
from .errors import Internal, InvalidArgument, NotFound, RosterError, Unauthenticated
from .firebase_service import firestore_service
from .profiles import ProfileDirectory

logger = logging.getLogger("roster")


class FriendGraphService:

    def __init__(self, store=None, profiles: Optional[ProfileDirectory] = None):
        self.store = store if store is not None else firestore_service
        self.profiles = profiles if profiles is not None else ProfileDirectory(self.store)

    def request_friend(self, current_uid: Optional[str], friend_code) -> str:
        """Create a pending friendship with the owner of friend_code. Returns their name."""
        if not current_uid:
            raise Unauthenticated()
        if not friend_code or not isinstance(friend_code, str):
            raise InvalidArgument("Invalid friend code")

        try:
            target = self.profiles.resolve_share_code(friend_code)
            if target is None:
                raise NotFound("Friend code not found")

            friend_uid = target["userId"]
            friend_name = target.get("name") or DEFAULT_FRIEND_NAME

            if friend_uid == current_uid:
                raise InvalidArgument("Cannot add yourself")

            me = self.profiles.get_profile(current_uid)

            def _txn(txn):
                now = self.store.server_timestamp()
                txn.set(
                    paths.friend_edge(current_uid, friend_uid),
                    {
                        "status": EDGE_PENDING_SENT,
                        "shareCode": friend_code,
                        "name": friend_name,
                        "createdAt": now,
                    },
                    merge=True,
                )
                txn.set(
                    paths.friend_edge(friend_uid, current_uid),
                    {
                        "status": EDGE_PENDING_RECEIVED,
                        "shareCode": me["shareCode"],
                        "name": me["name"],
                        "createdAt": now,
                    },
                    merge=True,
                )

            self.store.run_transaction(_txn)
        except RosterError:
            raise
        except Exception as e:
            logger.exception(f"[FRIENDS] request failed: uid={current_uid}, code={friend_code}")
            raise Internal(str(e) or "Error adding friend") from e

        logger.info(f"[FRIENDS] Request {current_uid} -> {friend_uid}")
        return friend_name

    def accept_friend(self, current_uid: Optional[str], friend_uid) -> None:
        """
        Move both edges to accepted.

        Both edges must already exist: a missing edge fails the transaction and
        neither side is modified.
        """
        if not current_uid:
            raise Unauthenticated()
        if not friend_uid or not isinstance(friend_uid, str):
            raise InvalidArgument("Invalid friend UID")
        if friend_uid == current_uid:
            raise InvalidArgument("Cannot add yourself")

        def _txn(txn):
            mine = txn.get(paths.friend_edge(current_uid, friend_uid))
            if mine and mine.get("status") == EDGE_PENDING_SENT:
                raise InvalidArgument("Cannot accept a request you sent")

            update = {"status": EDGE_ACCEPTED, "acceptedAt": self.store.server_timestamp()}
            txn.update(paths.friend_edge(current_uid, friend_uid), update)
            txn.update(paths.friend_edge(friend_uid, current_uid), update)

        try:
            self.store.run_transaction(_txn)
        except RosterError:
            raise
        except Exception as e:
            logger.exception(f"[FRIENDS] accept failed: uid={current_uid}, friend={friend_uid}")
            raise Internal(str(e) or "Error accepting request") from e

        logger.info(f"[FRIENDS] Accepted {current_uid} <-> {friend_uid}")


# Singleton instance
friend_service = FriendGraphService()
