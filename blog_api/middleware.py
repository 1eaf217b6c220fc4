"""
Error boundary for blog_api.

Add to MIDDLEWARE:

    "blog_api.middleware.JsonErrorMiddleware",
"""
import logging

from django.core.exceptions import PermissionDenied, SuspiciousOperation
from django.http import Http404, JsonResponse

from .conf import blog_settings
from .exceptions import BlogApiError

logger = logging.getLogger(__name__)


class JsonErrorMiddleware:
    """Turn exceptions raised by views into JSON error payloads."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, (Http404, PermissionDenied)):
            return None

        if isinstance(exception, BlogApiError):
            if exception.status_code >= 500:
                logger.error("%s %s failed: %s", request.method, request.path, exception.message)
            return JsonResponse(
                {"success": False, "message": exception.message},
                status=exception.status_code,
            )

        # Oversized or malformed request data (RequestDataTooBig, TooManyFieldsSent, ...)
        if isinstance(exception, SuspiciousOperation):
            logger.warning("Rejected %s %s: %s", request.method, request.path, exception)
            return JsonResponse({"success": False, "message": "Bad request"}, status=400)

        logger.exception("Unhandled exception for %s %s", request.method, request.path)
        payload = {"success": False, "message": "An internal server error occurred."}
        if blog_settings.EXPOSE_ERROR_DETAILS:
            payload["error"] = str(exception)
        return JsonResponse(payload, status=500)
