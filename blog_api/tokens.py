"""
Credentials and session tokens for blog_api.

Passwords go through Django's password hashers (salted, adaptive). Sessions
are HS256 JWTs carried in an http-only, SameSite=Strict cookie.
"""
from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password

from .conf import blog_settings
from .exceptions import AuthenticationError


def hash_password(raw_password):
    """Return a one-way hash of ``raw_password`` with a fresh salt."""
    return make_password(raw_password)


def verify_password(raw_password, hashed):
    """Check ``raw_password`` against a stored hash."""
    if not hashed:
        return False
    return check_password(raw_password, hashed)


class TokenIssuer:
    """
    Issue and verify signed session tokens.

    Args:
        secret: signing key, defaults to settings.SECRET_KEY
        lifetime: validity in seconds, defaults to TOKEN_LIFETIME
        algorithm: JWT algorithm, defaults to TOKEN_ALGORITHM
    """

    def __init__(self, secret=None, lifetime=None, algorithm=None):
        self._secret = secret
        self._lifetime = lifetime
        self._algorithm = algorithm

    @property
    def secret(self):
        return self._secret or settings.SECRET_KEY

    @property
    def lifetime(self):
        """Token validity in seconds."""
        if self._lifetime is not None:
            return self._lifetime
        return blog_settings.TOKEN_LIFETIME

    @property
    def algorithm(self):
        return self._algorithm or blog_settings.TOKEN_ALGORITHM

    @property
    def cookie_name(self):
        return blog_settings.TOKEN_COOKIE_NAME

    def issue(self, user_id):
        """Return a token for ``user_id`` that expires after ``lifetime``."""
        now = datetime.now(timezone.utc)
        payload = {
            "userId": str(user_id),
            "iat": now,
            "exp": now + timedelta(seconds=self.lifetime),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token):
        """
        Return the user id embedded in ``token``.

        Raises:
            AuthenticationError: token missing, expired, tampered or malformed
        """
        if not token:
            raise AuthenticationError("User not authenticated")
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Session expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid session token")

        user_id = payload.get("userId")
        if not user_id:
            raise AuthenticationError("Invalid session token")
        return user_id

    def set_cookie(self, response, token):
        response.set_cookie(
            self.cookie_name,
            token,
            max_age=self.lifetime,
            httponly=True,
            samesite="Strict",
        )
        return response

    def clear_cookie(self, response):
        response.set_cookie(
            self.cookie_name,
            "",
            max_age=0,
            httponly=True,
            samesite="Strict",
        )
        return response
