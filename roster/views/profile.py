from ..http import callable_view
from ..profiles import profile_directory


@callable_view("PROFILE/UPDATE")
def update_user_profile(data, uid):
    profile_directory.update_profile(uid, name=data.get("name"), share_code=data.get("shareCode"))
    return {"success": True}
