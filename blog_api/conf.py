"""
Configuration settings for blog_api.

Override these in your Django settings.py:

    BLOG_API = {
        'TOKEN_COOKIE_NAME': 'token',
        'TOKEN_LIFETIME': 24 * 60 * 60,
        'STORAGE_ALIAS': 'media',
        ...
    }

Media is written through Django's storage API, so pointing STORAGE_ALIAS at
an S3 backend (django-storages) is enough to move uploads to a bucket.
"""
from django.conf import settings

DEFAULTS = {
    # Session token
    "TOKEN_COOKIE_NAME": "token",
    "TOKEN_LIFETIME": 24 * 60 * 60,  # seconds
    "TOKEN_ALGORITHM": "HS256",

    # Registration
    "PASSWORD_MIN_LENGTH": 6,
    "EMAIL_PATTERN": r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$",

    # Comments
    "COMMENT_MAX_LENGTH": 5000,

    # Media
    "STORAGE_ALIAS": "default",
    "AVATAR_PREFIX": "avatars/",
    "THUMBNAIL_PREFIX": "thumbnails/",
    "DELETE_REPLACED_ASSETS": True,

    # Signup alerts
    "NOTIFY_SUBJECT": "New User Registered on BlogApp",

    # Errors; None follows settings.DEBUG
    "EXPOSE_ERROR_DETAILS": None,
}


class BlogApiSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from blog_api.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid blog_api setting: {name}")

        user_settings = getattr(settings, "BLOG_API", {})
        return user_settings.get(name, DEFAULTS[name])

    @property
    def EXPOSE_ERROR_DETAILS(self):
        """Return whether raw exception text may be sent to clients."""
        user_settings = getattr(settings, "BLOG_API", {})
        value = user_settings.get("EXPOSE_ERROR_DETAILS", DEFAULTS["EXPOSE_ERROR_DETAILS"])
        if value is None:
            return settings.DEBUG
        return value


blog_settings = BlogApiSettings()
