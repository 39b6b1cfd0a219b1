"""In-memory stand-ins for Firestore and FCM used by the tests."""

import copy
from datetime import datetime, timezone

from roster.push_service import MulticastResult, PushResult


class MissingDocumentError(LookupError):
    """Raised on update() of a document that does not exist (Firestore NOT_FOUND)."""


def _merge(existing, data, merge):
    if merge and existing is not None:
        merged = dict(existing)
        merged.update(data)
        return merged
    return dict(data)


class FakeTransaction:
    """Buffers writes; the store applies them all at commit or none at all."""

    def __init__(self, store):
        self._store = store
        self.writes = []

    def get(self, path):
        self._store.reads.append(tuple(path))
        return copy.deepcopy(self._store.docs.get(tuple(path)))

    def set(self, path, data, merge=False):
        self.writes.append(("set", tuple(path), dict(data), merge))

    def update(self, path, data):
        self.writes.append(("update", tuple(path), dict(data), True))

    def delete(self, path):
        self.writes.append(("delete", tuple(path), None, False))


class FakeStore:
    """Path-keyed document store with the FirestoreService interface."""

    def __init__(self):
        self.docs = {}
        self.reads = []
        self.transactions = 0
        self.batches = []
        self.pages = []
        self.fail_delete = False

    def is_available(self):
        return True

    def server_timestamp(self):
        return datetime.now(timezone.utc)

    def get(self, path):
        return copy.deepcopy(self.docs.get(tuple(path)))

    def set(self, path, data, merge=False):
        path = tuple(path)
        self.docs[path] = _merge(self.docs.get(path), data, merge)

    def update(self, path, data):
        path = tuple(path)
        if path not in self.docs:
            raise MissingDocumentError(f"No document to update: {'/'.join(path)}")
        self.docs[path] = _merge(self.docs[path], data, True)

    def delete(self, path):
        if self.fail_delete:
            raise RuntimeError("delete failed")
        self.docs.pop(tuple(path), None)

    def list_documents(self, collection_path, limit=None, start_after=None):
        collection_path = tuple(collection_path)
        self.pages.append(start_after)
        found = [
            (path[-1], copy.deepcopy(data))
            for path, data in sorted(self.docs.items())
            if path[:-1] == collection_path and (start_after is None or path[-1] > start_after)
        ]
        return found[:limit] if limit else found

    def delete_many(self, paths):
        paths = [tuple(p) for p in paths]
        if not paths:
            return 0
        self.batches.append(paths)
        for path in paths:
            self.docs.pop(path, None)
        return len(paths)

    def run_transaction(self, fn):
        self.transactions += 1
        txn = FakeTransaction(self)
        result = fn(txn)

        staged = dict(self.docs)
        for op, path, data, merge in txn.writes:
            if op == "delete":
                staged.pop(path, None)
                continue
            if op == "update" and path not in staged:
                raise MissingDocumentError(f"No document to update: {'/'.join(path)}")
            staged[path] = _merge(staged.get(path), data, merge)
        self.docs = staged
        return result


class FakeSender:
    """Records multicast sends; per-token failures are configured by error code."""

    def __init__(self, failures=None, error=None):
        self.failures = failures or {}
        self.error = error
        self.calls = []

    def send_multicast(self, tokens, title, body, data, link=None):
        self.calls.append({
            "tokens": list(tokens),
            "title": title,
            "body": body,
            "data": dict(data),
            "link": link,
        })
        if self.error is not None:
            raise self.error

        responses = []
        for token in tokens:
            code = self.failures.get(token)
            if code:
                responses.append(PushResult(success=False, token=token, error=code, error_code=code))
            else:
                responses.append(PushResult(success=True, token=token, message_id=f"msg-{token}"))
        return MulticastResult(responses=responses)
