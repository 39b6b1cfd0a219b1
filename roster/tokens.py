import logging
from typing import Dict, Iterable, List

from . import paths
from .firebase_service import firestore_service

logger = logging.getLogger("roster")


class TokenRegistry:
    """
    Push tokens stored per user under users/{uid}/fcm_tokens.

    Devices usually key the document by the token itself, but the token field
    wins when present, so a token can live under any document id.
    """

    def __init__(self, store=None):
        self.store = store if store is not None else firestore_service

    def registrations(self, user_id: str) -> Dict[str, List[str]]:
        """Token -> ids of the documents holding it, first occurrence first"""
        found: Dict[str, List[str]] = {}
        for doc_id, data in self.store.list_documents(paths.fcm_tokens(user_id)):
            token = data.get("token") or doc_id
            if token:
                found.setdefault(token, []).append(doc_id)
        return found

    def list_tokens(self, user_id: str) -> List[str]:
        """Distinct token strings for a user"""
        return list(self.registrations(user_id))

    def remove_tokens(self, user_id: str, doc_ids: Iterable[str]) -> int:
        """Delete token documents by id in a single batch"""
        token_paths = [paths.fcm_token(user_id, doc_id) for doc_id in doc_ids]
        if not token_paths:
            return 0
        removed = self.store.delete_many(token_paths)
        logger.info(f"[TOKENS] Removed {removed} invalid token document(s) for user={user_id}")
        return removed
