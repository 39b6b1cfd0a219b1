"""
Error taxonomy.

RosterError subclasses are the classified failures returned to callable
clients. StoreUnavailableError / PushUnavailableError are infrastructure
failures that propagate to whoever invoked the unit of work.
"""


class RosterError(Exception):
    """Classified failure reported back to a callable client"""

    status = "INTERNAL"
    http_status = 500
    default_message = "Internal error"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"status": self.status, "message": self.message}


class Unauthenticated(RosterError):
    status = "UNAUTHENTICATED"
    http_status = 401
    default_message = "User not authenticated"


class InvalidArgument(RosterError):
    status = "INVALID_ARGUMENT"
    http_status = 400
    default_message = "Invalid argument"


class NotFound(RosterError):
    status = "NOT_FOUND"
    http_status = 404
    default_message = "Not found"


class Internal(RosterError):
    pass


class StoreUnavailableError(RuntimeError):
    """Firestore is not configured"""


class PushUnavailableError(RuntimeError):
    """Firebase Cloud Messaging is not configured"""
