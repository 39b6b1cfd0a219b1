from django.urls import path
from . import views

urlpatterns = [
    # Health check
    path("health", views.health, name="health"),

    # Callable functions (Firebase callable protocol)
    path("callable/addFriendRequest", views.add_friend_request, name="add_friend_request"),
    path("callable/acceptFriendRequest", views.accept_friend_request, name="accept_friend_request"),
    path("callable/updateUserProfile", views.update_user_profile, name="update_user_profile"),

    # Firestore event triggers
    # Note: clients write notification_queue/ and secret_requests/ directly in Firestore
    path("triggers/notification-created", views.notification_created, name="notification_created"),
    path("triggers/secret-request-written", views.secret_request_written, name="secret_request_written"),
    path("notifications/sweep", views.notification_sweep, name="notification_sweep"),
]
