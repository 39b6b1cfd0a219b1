"""
Firebase service for Django - Firestore access for the roster backend.

All documents live under artifacts/{APP_ID}:
- users/{uid}: profile (name, shareCode)
- users/{uid}/fcm_tokens/{token}: push tokens registered by devices
- users/{uid}/friends/{otherUid}: one side of a friendship
- users/{uid}/secret_contacts/{otherUid}: mirrored secret chat contacts
- public_profiles/{shareCode}: shareCode -> {userId, name}
- notification_queue/{id}: queued push notifications
- secret_requests/{id}: secret chat contact requests

See paths.py for the path builders.
"""
import json
import logging
import os
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import firebase_admin
from firebase_admin import credentials
from firebase_admin import firestore as fb_firestore
from google.cloud.firestore_v1.field_path import FieldPath

from .constants import APP_ID, ROOT_COLLECTION
from .errors import StoreUnavailableError

logger = logging.getLogger("roster")

# Firebase Admin initialization
_firebase_app = None
_firestore_client = None
_firebase_init_attempted = False


def get_firebase_app():
    """Get or initialize Firebase Admin app"""
    global _firebase_app, _firebase_init_attempted

    if _firebase_app is not None:
        return _firebase_app

    if _firebase_init_attempted:
        # Already tried and failed
        return None

    _firebase_init_attempted = True

    use_emulator = os.environ.get("FIREBASE_USE_EMULATOR", "false").lower() == "true"
    project_id = os.environ.get("FIREBASE_PROJECT_ID")

    logger.info(f"Firebase init: use_emulator={use_emulator}, project_id={project_id}")

    if use_emulator:
        # Emulator mode - FIRESTORE_EMULATOR_HOST must be set before the client is built
        firestore_host = os.environ.get("FIRESTORE_EMULATOR_HOST", "localhost:8080")
        os.environ["FIRESTORE_EMULATOR_HOST"] = firestore_host

        try:
            _firebase_app = firebase_admin.initialize_app(
                credential=None,
                options={"projectId": project_id or "demo-timeroster"},
            )
            logger.info(f"Firebase Admin initialized with EMULATOR (Firestore: {firestore_host})")
        except ValueError as e:
            # Already initialized
            try:
                _firebase_app = firebase_admin.get_app()
            except ValueError:
                logger.error(f"Firebase init failed: {e}")
                return None
    else:
        service_account_json = os.environ.get("FIREBASE_SERVICE_ACCOUNT")
        service_account_path = os.environ.get("FIREBASE_SERVICE_ACCOUNT_PATH")

        cred = None
        if service_account_json:
            try:
                cred = credentials.Certificate(json.loads(service_account_json))
                logger.info("Using FIREBASE_SERVICE_ACCOUNT env var")
            except json.JSONDecodeError as e:
                logger.error(f"Invalid FIREBASE_SERVICE_ACCOUNT JSON: {e}")
        elif service_account_path and os.path.exists(service_account_path):
            cred = credentials.Certificate(service_account_path)
            logger.info(f"Using service account from {service_account_path}")

        if cred is None:
            logger.warning("Firebase credentials not found - Firestore operations will fail")
            return None

        options = {"projectId": project_id} if project_id else None
        try:
            _firebase_app = firebase_admin.initialize_app(cred, options=options)
            logger.info("Firebase Admin initialized (production)")
        except ValueError:
            try:
                _firebase_app = firebase_admin.get_app()
            except ValueError:
                return None

    return _firebase_app


def get_firestore():
    """Get Firestore client"""
    global _firestore_client

    if _firestore_client is not None:
        return _firestore_client

    app = get_firebase_app()
    if app is None:
        return None

    _firestore_client = fb_firestore.client(app=app)
    return _firestore_client


class FirestoreTransaction:
    """Path-based view over a google.cloud.firestore Transaction"""

    def __init__(self, service: "FirestoreService", transaction):
        self._service = service
        self._transaction = transaction

    def get(self, path) -> Optional[Dict[str, Any]]:
        snapshot = self._service.document(path).get(transaction=self._transaction)
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    def set(self, path, data: Dict[str, Any], merge: bool = False) -> None:
        self._transaction.set(self._service.document(path), data, merge=merge)

    def update(self, path, data: Dict[str, Any]) -> None:
        self._transaction.update(self._service.document(path), data)

    def delete(self, path) -> None:
        self._transaction.delete(self._service.document(path))


class FirestoreService:
    """Transactional document store scoped to the app namespace"""

    def __init__(self, app_id: str = APP_ID):
        self.app_id = app_id
        self._db = None

    @property
    def db(self):
        """Lazy initialization of Firestore client"""
        if self._db is None:
            self._db = get_firestore()
        if self._db is None:
            raise StoreUnavailableError("Firebase Firestore is not configured")
        return self._db

    def is_available(self) -> bool:
        """Check if Firestore is available"""
        try:
            return self.db is not None
        except StoreUnavailableError:
            return False

    def server_timestamp(self):
        return fb_firestore.SERVER_TIMESTAMP

    # =========================================================================
    # References
    # =========================================================================

    def _root(self):
        return self.db.collection(ROOT_COLLECTION).document(self.app_id)

    def collection(self, path):
        if len(path) % 2 != 1:
            raise ValueError(f"Not a collection path: {path}")
        ref = self._root()
        for index, segment in enumerate(path):
            ref = ref.collection(segment) if index % 2 == 0 else ref.document(segment)
        return ref

    def document(self, path):
        if not path or len(path) % 2 != 0:
            raise ValueError(f"Not a document path: {path}")
        return self.collection(path[:-1]).document(path[-1])

    # =========================================================================
    # Document Operations
    # =========================================================================

    def get(self, path) -> Optional[Dict[str, Any]]:
        snapshot = self.document(path).get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    def set(self, path, data: Dict[str, Any], merge: bool = False) -> None:
        self.document(path).set(data, merge=merge)

    def update(self, path, data: Dict[str, Any]) -> None:
        self.document(path).update(data)

    def delete(self, path) -> None:
        self.document(path).delete()

    def list_documents(
        self,
        collection_path,
        limit: Optional[int] = None,
        start_after: Optional[str] = None,
    ) -> List[Tuple[str, Dict[str, Any]]]:
        """Documents ordered by id, optionally after the document id `start_after`"""
        collection = self.collection(collection_path)
        query = collection.order_by(FieldPath.document_id())
        if start_after:
            query = query.start_after({
                FieldPath.document_id(): collection.document(start_after),
            })
        if limit:
            query = query.limit(limit)
        return [(doc.id, doc.to_dict() or {}) for doc in query.stream()]

    def delete_many(self, paths: Iterable) -> int:
        """Delete all paths in one batched write. Returns number of deletes."""
        paths = list(paths)
        if not paths:
            return 0

        batch = self.db.batch()
        for path in paths:
            batch.delete(self.document(path))
        batch.commit()
        return len(paths)

    def run_transaction(self, fn: Callable[[FirestoreTransaction], Any]) -> Any:
        """
        Run fn inside a Firestore transaction.

        fn may be retried by the SDK on contention, so it must only touch the
        store through the transaction it receives. Writes commit atomically.
        """

        @fb_firestore.transactional
        def _txn(transaction):
            return fn(FirestoreTransaction(self, transaction))

        return _txn(self.db.transaction())


# Singleton instance
firestore_service = FirestoreService()
