"""
Request authentication for blog_api views.

The session token travels in the cookie named by TOKEN_COOKIE_NAME; these
mixins resolve it to an active user before the view method runs.
"""
from .conf import blog_settings
from .exceptions import AuthenticationError
from .models import User
from .services import get_services


def authenticate_request(request):
    """
    Return the user identified by the request's session cookie.

    Raises:
        AuthenticationError: no cookie, bad token, or unknown/inactive user
    """
    token = request.COOKIES.get(blog_settings.TOKEN_COOKIE_NAME)
    user_id = get_services().tokens.verify(token)
    user = User.objects.filter(pk=user_id, is_active=True).first()
    if user is None:
        raise AuthenticationError("User not authenticated")
    return user


class TokenRequiredMixin:
    """Verify the session cookie; the view sees the user as request.user."""

    def dispatch(self, request, *args, **kwargs):
        request.user = authenticate_request(request)
        return super().dispatch(request, *args, **kwargs)

