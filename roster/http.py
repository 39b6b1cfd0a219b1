import functools
import hmac
import json
import logging
import os
from typing import Tuple

from django.http import HttpResponseNotAllowed, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from . import auth
from .errors import InvalidArgument, RosterError

logger = logging.getLogger("roster")

TRIGGER_SECRET_HEADER = "HTTP_X_TRIGGER_SECRET"


def json_body(request) -> Tuple[dict, JsonResponse]:
    try:
        body = request.body.decode("utf-8") if request.body else "{}"
        data = json.loads(body)
        if not isinstance(data, dict):
            raise ValueError("JSON body must be an object")
        return data, None
    except (json.JSONDecodeError, ValueError) as exc:
        return None, JsonResponse({"error": f"invalid_json: {exc}"}, status=400)


def require_env(*keys):
    missing = [key for key in keys if not os.environ.get(key)]
    if missing:
        return JsonResponse({"error": "missing_env", "missing": missing}, status=500)
    return None


def require_trigger_secret(request):
    """Reject event deliveries that do not carry the shared trigger secret"""
    missing_env = require_env("ROSTER_TRIGGER_SECRET")
    if missing_env:
        return missing_env

    expected = os.environ["ROSTER_TRIGGER_SECRET"]
    provided = request.META.get(TRIGGER_SECRET_HEADER, "")
    if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        logger.warning(f"[TRIGGER] Bad secret from {request.META.get('REMOTE_ADDR')}")
        return JsonResponse({"error": "forbidden"}, status=403)
    return None


def callable_error(exc: RosterError) -> JsonResponse:
    return JsonResponse({"error": exc.to_dict()}, status=exc.http_status)


def callable_view(name):
    """
    Serve fn(data, uid) with the Firebase callable protocol.

    Request body is {"data": {...}}, the caller identity comes from the
    Authorization bearer ID token. Success is {"result": ...}; classified
    failures are {"error": {"status", "message"}}.
    """

    def decorator(fn):
        @csrf_exempt
        @functools.wraps(fn)
        def view(request):
            logger.info(f"[{name}] {request.method} from {request.META.get('REMOTE_ADDR')}")

            if request.method != "POST":
                return HttpResponseNotAllowed(["POST"])

            body, error = json_body(request)
            if error:
                return callable_error(InvalidArgument("Request body must be a JSON object"))

            data = body.get("data") or {}
            if not isinstance(data, dict):
                return callable_error(InvalidArgument("data must be an object"))

            uid = auth.caller_uid(request)
            try:
                result = fn(data, uid)
            except RosterError as exc:
                logger.warning(f"[{name}] {exc.status}: {exc.message}")
                return callable_error(exc)

            return JsonResponse({"result": result})

        return view

    return decorator
