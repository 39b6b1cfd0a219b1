"""
Event trigger endpoints.

The event source posts here once per document write. Store and push errors
are not caught: the resulting 500 lets the event source redeliver, which is
safe because every handler skips records it already processed.
"""
import logging

from django.http import JsonResponse, HttpResponseNotAllowed
from django.views.decorators.csrf import csrf_exempt

from ..constants import DEFAULT_SWEEP_LIMIT, MAX_SWEEP_LIMIT
from ..dispatcher import notification_dispatcher
from ..http import json_body, require_trigger_secret
from ..secret_contacts import secret_contact_mirror

logger = logging.getLogger("roster")


@csrf_exempt
def notification_created(request):
    logger.info(f"[TRIGGER/NOTIFICATION] {request.method} from {request.META.get('REMOTE_ADDR')}")

    if request.method != "POST":
        return HttpResponseNotAllowed(["POST"])

    forbidden = require_trigger_secret(request)
    if forbidden:
        return forbidden

    data, error = json_body(request)
    if error:
        return error

    notification_id = data.get("notificationId")
    if not notification_id or not isinstance(notification_id, str):
        return JsonResponse({"error": "missing_notification_id"}, status=400)

    status = notification_dispatcher.dispatch(notification_id)

    return JsonResponse({
        "success": True,
        "notificationId": notification_id,
        "status": status,
    })


@csrf_exempt
def secret_request_written(request):
    logger.info(f"[TRIGGER/SECRET] {request.method} from {request.META.get('REMOTE_ADDR')}")

    if request.method != "POST":
        return HttpResponseNotAllowed(["POST"])

    forbidden = require_trigger_secret(request)
    if forbidden:
        return forbidden

    data, error = json_body(request)
    if error:
        return error

    request_id = data.get("requestId")
    if not request_id or not isinstance(request_id, str):
        return JsonResponse({"error": "missing_request_id"}, status=400)

    mirrored = secret_contact_mirror.handle(request_id)

    return JsonResponse({
        "success": True,
        "requestId": request_id,
        "mirrored": mirrored,
    })


@csrf_exempt
def notification_sweep(request):
    """
    Dispatch queued notifications that never received a status.
    """
    logger.info(f"[NOTIFICATION/SWEEP] {request.method} from {request.META.get('REMOTE_ADDR')}")

    if request.method != "POST":
        return HttpResponseNotAllowed(["POST"])

    forbidden = require_trigger_secret(request)
    if forbidden:
        return forbidden

    data, error = json_body(request)
    if error:
        return error

    limit = data.get("limit", DEFAULT_SWEEP_LIMIT)
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        return JsonResponse({"error": "invalid_limit"}, status=400)
    if limit <= 0:
        return JsonResponse({"error": "invalid_limit"}, status=400)
    limit = min(limit, MAX_SWEEP_LIMIT)

    processed = notification_dispatcher.sweep(limit)

    return JsonResponse({
        "success": True,
        "limit": limit,
        "processed": [
            {"notificationId": notification_id, "status": status}
            for notification_id, status in processed
        ],
    })
