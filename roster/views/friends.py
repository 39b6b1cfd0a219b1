from ..friends import friend_service
from ..http import callable_view


@callable_view("FRIENDS/REQUEST")
def add_friend_request(data, uid):
    friend_name = friend_service.request_friend(uid, data.get("friendCode"))
    return {"success": True, "friendName": friend_name}


@callable_view("FRIENDS/ACCEPT")
def accept_friend_request(data, uid):
    friend_service.accept_friend(uid, data.get("friendUid"))
    return {"success": True}
