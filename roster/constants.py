import os

APP_ID = os.environ.get("ROSTER_APP_ID", "timeroster-app")
APP_URL = os.environ.get("ROSTER_APP_URL", "https://tejari49.github.io/Meal/")

# Visible notification text never carries event details
NOTIFICATION_TITLE = os.environ.get("ROSTER_NOTIFICATION_TITLE", "Kalender aktualisiert")
NOTIFICATION_BODY = os.environ.get("ROSTER_NOTIFICATION_BODY", "Es gibt neue Updates.")
DEFAULT_NOTIFICATION_TYPE = "update"

# Firestore collections (under artifacts/{APP_ID})
ROOT_COLLECTION = "artifacts"
USERS_COLLECTION = "users"
TOKENS_COLLECTION = "fcm_tokens"
FRIENDS_COLLECTION = "friends"
SECRET_CONTACTS_COLLECTION = "secret_contacts"
PUBLIC_PROFILES_COLLECTION = "public_profiles"
NOTIFICATION_QUEUE_COLLECTION = "notification_queue"
SECRET_REQUESTS_COLLECTION = "secret_requests"

# Queued notification terminal statuses
STATUS_INVALID = "invalid"
STATUS_NO_TOKENS = "no_tokens"
STATUS_SENT = "sent"
TERMINAL_STATUSES = frozenset({STATUS_INVALID, STATUS_NO_TOKENS, STATUS_SENT})

# Friend edge statuses
EDGE_PENDING_SENT = "pending_sent"
EDGE_PENDING_RECEIVED = "pending_received"
EDGE_ACCEPTED = "accepted"

SECRET_REQUEST_ACCEPTED = "accepted"

DEFAULT_FRIEND_NAME = "Friend"
DISPLAY_ID_LENGTH = 6

# FCM error codes meaning the registration will never work again
INVALID_TOKEN_ERROR_CODES = frozenset({"UNREGISTERED", "INVALID_ARGUMENT"})

DEFAULT_SWEEP_LIMIT = 100
MAX_SWEEP_LIMIT = 500
SWEEP_PAGE_SIZE = 100
