from django.http import JsonResponse, HttpResponseNotAllowed
from django.views.decorators.csrf import csrf_exempt

from ..constants import APP_ID
from ..firebase_service import firestore_service
from ..push_service import push_service


@csrf_exempt
def health(request):
    """Liveness plus whether the Firestore store and FCM push are usable"""
    if request.method != "GET":
        return HttpResponseNotAllowed(["GET"])

    return JsonResponse({
        "status": "ok",
        "appId": APP_ID,
        "firestore": "connected" if firestore_service.is_available() else "not_configured",
        "push": "configured" if push_service.is_configured() else "not_configured",
    })
