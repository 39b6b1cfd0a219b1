# Models are stored in Firebase Firestore, not Django DB.
# This file is kept for Django app structure compatibility.
#
# Firestore documents (under artifacts/{APP_ID}):
# - users/{uid}: profile (name, shareCode) with fcm_tokens, friends, secret_contacts subcollections
# - public_profiles/{shareCode}: {userId, name}
# - notification_queue/{id}: queued pushes, status written back by the dispatcher
# - secret_requests/{id}: secret chat requests, consumed once accepted
#
# See firebase_service.py and paths.py for Firestore operations.
