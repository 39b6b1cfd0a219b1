"""
Secret chat contact mirroring.

Clients only write secret_requests/{id}. When a request reaches status
"accepted" the server creates the contact on both users' trees, so neither
client ever writes into the other user's tree.
"""
import logging

from . import paths
from .constants import DISPLAY_ID_LENGTH, SECRET_REQUEST_ACCEPTED
from .firebase_service import firestore_service

logger = logging.getLogger("roster")


def fallback_name(uid) -> str:
    return str(uid)[:DISPLAY_ID_LENGTH] + "…"


class SecretContactMirror:

    def __init__(self, store=None):
        self.store = store if store is not None else firestore_service

    def handle(self, request_id: str) -> bool:
        """
        React to a write of secret_requests/{request_id}.

        Returns True when contacts were mirrored by this call. The request is
        stamped mirrored=True in the same transaction as the contacts, so a
        redelivered event finds the stamp (or no document) and does nothing.
        """
        request_path = paths.secret_request(request_id)

        def _txn(txn):
            request = txn.get(request_path)
            if request is None:
                return None
            if request.get("status") != SECRET_REQUEST_ACCEPTED:
                return None
            if request.get("mirrored"):
                return None

            from_uid = request.get("from")
            to_uid = request.get("to")
            if not from_uid or not to_uid:
                return None

            from_name = request.get("fromName") or fallback_name(from_uid)
            to_name = request.get("toName") or fallback_name(to_uid)
            now = self.store.server_timestamp()

            txn.set(
                paths.secret_contact(from_uid, to_uid),
                {"friendId": to_uid, "name": to_name, "acceptedAt": now, "mirrored": True},
                merge=True,
            )
            txn.set(
                paths.secret_contact(to_uid, from_uid),
                {"friendId": from_uid, "name": from_name, "acceptedAt": now, "mirrored": True},
                merge=True,
            )
            txn.set(request_path, {"mirrored": True, "mirroredAt": now}, merge=True)
            return from_uid, to_uid

        participants = self.store.run_transaction(_txn)
        if participants is None:
            logger.debug(f"[SECRET] Request {request_id} needs no mirroring")
            return False

        logger.info(f"[SECRET] Mirrored contacts {participants[0]} <-> {participants[1]}")
        self._cleanup(request_id)
        return True

    def _cleanup(self, request_id: str) -> None:
        # Keeps the accepted log small; the contacts are already committed
        try:
            self.store.delete(paths.secret_request(request_id))
        except Exception as e:
            logger.warning(f"[SECRET] Could not delete request {request_id}: {e}")


# Singleton instance
secret_contact_mirror = SecretContactMirror()
