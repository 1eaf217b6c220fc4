"""
Error taxonomy for blog_api.

Services raise these; JsonErrorMiddleware turns them into JSON responses
using ``status_code`` and ``message``.
"""


class BlogApiError(Exception):
    """Base class for every error the API reports to clients."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BlogApiError):
    status_code = 400
    default_message = "Invalid input"


class AuthenticationError(BlogApiError):
    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(BlogApiError):
    status_code = 403
    default_message = "You are not allowed to do that"


class NotFoundError(BlogApiError):
    status_code = 404
    default_message = "Not found"


class ConflictError(BlogApiError):
    """Duplicate resource, e.g. an email that is already registered."""

    status_code = 400
    default_message = "Already exists"


class UpstreamError(BlogApiError):
    """An external service call failed."""

    status_code = 502
    default_message = "Upstream service failed"


class StorageError(UpstreamError):
    default_message = "Object storage request failed"
