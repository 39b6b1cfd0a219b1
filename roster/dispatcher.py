"""
Queued notification dispatch.

A notification_queue/{id} record is processed once: it ends with a terminal
status (invalid, no_tokens, sent) merged onto the record. Records that already
carry a terminal status are skipped, so redelivered trigger events never cause
a second send.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from . import paths
from .constants import (
    APP_URL,
    DEFAULT_NOTIFICATION_TYPE,
    DEFAULT_SWEEP_LIMIT,
    INVALID_TOKEN_ERROR_CODES,
    NOTIFICATION_BODY,
    NOTIFICATION_TITLE,
    STATUS_INVALID,
    STATUS_NO_TOKENS,
    STATUS_SENT,
    SWEEP_PAGE_SIZE,
    TERMINAL_STATUSES,
)
from .firebase_service import firestore_service
from .push_service import push_service
from .tokens import TokenRegistry

logger = logging.getLogger("roster")


def build_neutral_notification() -> Dict[str, str]:
    return {"title": NOTIFICATION_TITLE, "body": NOTIFICATION_BODY}


def build_data_payload(record: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(record.get("data") or {})
    notification_type = data.get("type")
    data["url"] = APP_URL
    data["type"] = str(notification_type) if notification_type else DEFAULT_NOTIFICATION_TYPE
    return data


class NotificationDispatcher:

    def __init__(self, store=None, tokens: Optional[TokenRegistry] = None, sender=None):
        self.store = store if store is not None else firestore_service
        self.tokens = tokens if tokens is not None else TokenRegistry(self.store)
        self.sender = sender if sender is not None else push_service

    def _finish(self, path, status: str, **fields) -> str:
        update = {"status": status, "processedAt": self.store.server_timestamp()}
        update.update(fields)
        self.store.set(path, update, merge=True)
        return status

    def dispatch(self, notification_id: str) -> Optional[str]:
        """
        Process one queued notification.

        Returns the terminal status written (or found), None when the record
        no longer exists. Errors from the multicast send or the store are not
        caught so the trigger infrastructure can redeliver.
        """
        path = paths.notification(notification_id)
        record = self.store.get(path)

        if record is None:
            logger.warning(f"[DISPATCH] Notification {notification_id} not found")
            return None

        current_status = record.get("status")
        if current_status in TERMINAL_STATUSES:
            logger.info(f"[DISPATCH] Notification {notification_id} already {current_status}, skipping")
            return current_status

        recipient_id = record.get("recipientUserId")
        if not recipient_id:
            logger.warning(f"[DISPATCH] Notification {notification_id} missing recipientUserId")
            return self._finish(path, STATUS_INVALID, error="missing recipientUserId")

        registrations = self.tokens.registrations(recipient_id)
        tokens = list(registrations)
        if not tokens:
            logger.info(f"[DISPATCH] No tokens for recipient={recipient_id}")
            return self._finish(path, STATUS_NO_TOKENS)

        neutral = build_neutral_notification()
        result = self.sender.send_multicast(
            tokens,
            title=neutral["title"],
            body=neutral["body"],
            data=build_data_payload(record),
            link=APP_URL,
        )

        bad_docs = [
            doc_id
            for r in result.responses
            if not r.success and r.error_code in INVALID_TOKEN_ERROR_CODES
            for doc_id in registrations.get(r.token, [])
        ]
        if bad_docs:
            self.tokens.remove_tokens(recipient_id, bad_docs)

        logger.info(
            f"[DISPATCH] Notification {notification_id} sent: "
            f"success={result.success_count}, failure={result.failure_count}, pruned={len(bad_docs)}"
        )
        return self._finish(
            path,
            STATUS_SENT,
            successCount=result.success_count,
            failureCount=result.failure_count,
        )

    def sweep(
        self,
        limit: int = DEFAULT_SWEEP_LIMIT,
        page_size: int = SWEEP_PAGE_SIZE,
    ) -> List[Tuple[str, Optional[str]]]:
        """
        Dispatch queued records that never got a status (missed trigger).

        Pages through the queue by document id until `limit` pending records
        were dispatched or the queue ends; processed records stay in the
        queue, so they are skipped rather than counted.
        """
        processed = []
        cursor = None
        while len(processed) < limit:
            page = self.store.list_documents(
                paths.notification_queue(), limit=page_size, start_after=cursor
            )
            for notification_id, record in page:
                if record.get("status") in TERMINAL_STATUSES:
                    continue
                processed.append((notification_id, self.dispatch(notification_id)))
                if len(processed) >= limit:
                    break
            if len(page) < page_size:
                break
            cursor = page[-1][0]

        if processed:
            logger.info(f"[DISPATCH] Sweep processed {len(processed)} pending notification(s)")
        return processed


# Singleton instance
notification_dispatcher = NotificationDispatcher()
