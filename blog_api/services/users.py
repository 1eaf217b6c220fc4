"""
User directory: registration, login and profiles.
"""
import logging
import re

from django.db import IntegrityError, transaction

from ..conf import blog_settings
from ..exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..models import User
from ..tokens import hash_password, verify_password

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "occupation",
    "bio",
    "instagram",
    "facebook",
    "linkedin",
    "github",
)

# Same message for unknown email and wrong password.
LOGIN_FAILED = "Incorrect email or password"


class UserService:
    """
    Register users, log them in and edit their profiles.

    Args:
        storage: ObjectStorageClient used for avatars
        tokens: TokenIssuer used on login
        notifier: SignupNotifier told about every new registration
    """

    def __init__(self, storage, tokens, notifier):
        self.storage = storage
        self.tokens = tokens
        self.notifier = notifier
        self.email_re = re.compile(blog_settings.EMAIL_PATTERN)

    def get(self, user_id):
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            raise NotFoundError("User not found")
        return user

    def register(self, first_name, last_name, email, password):
        """
        Create an account.

        Raises:
            ValidationError: missing field, bad email or short password
            ConflictError: email already registered
        """
        first_name = str(first_name or "").strip()
        last_name = str(last_name or "").strip()
        email = str(email or "").strip().lower()
        password = str(password or "")

        if not first_name or not last_name or not email or not password:
            logger.warning("Register attempt with missing fields (email=%s)", email)
            raise ValidationError("All fields are required")
        if not self.email_re.match(email):
            logger.warning("Invalid email format during registration (email=%s)", email)
            raise ValidationError("Invalid email")
        if len(password) < blog_settings.PASSWORD_MIN_LENGTH:
            logger.warning("Password too short during registration (email=%s)", email)
            raise ValidationError(
                f"Password must be at least {blog_settings.PASSWORD_MIN_LENGTH} characters"
            )
        if User.objects.filter(email__iexact=email).exists():
            logger.warning("Email already registered (email=%s)", email)
            raise ConflictError("Email already exists")

        try:
            with transaction.atomic():
                user = User.objects.create(
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    password=hash_password(password),
                )
                self.notifier.notify_signup(user)
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email.
            raise ConflictError("Email already exists")

        logger.info("User registered successfully (email=%s)", email)
        return user

    def login(self, email, password):
        """
        Check credentials and issue a session token.

        Returns:
            (user, token)
        """
        email = str(email or "").strip().lower()
        if not email or not password:
            logger.warning("Login attempt with missing fields")
            raise ValidationError("All fields are required")

        user = User.objects.filter(email__iexact=email, is_active=True).first()
        if user is None:
            logger.warning("Login failed: user not found (email=%s)", email)
            raise AuthenticationError(LOGIN_FAILED)
        if not verify_password(password, user.password):
            logger.warning("Login failed: invalid password (email=%s)", email)
            raise AuthenticationError(LOGIN_FAILED)

        token = self.tokens.issue(user.pk)
        logger.info("Login successful (email=%s)", email)
        return user, token

    def update_profile(self, user_id, fields, avatar=None):
        """
        Apply a partial profile update.

        Only non-empty values in ``fields`` are written; everything else is
        left as it was. ``avatar`` replaces the profile photo when given.
        """
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            logger.warning("Profile update failed: user not found (user=%s)", user_id)
            raise NotFoundError("User not found")

        changed = []
        for name in PROFILE_FIELDS:
            value = fields.get(name)
            if value:
                setattr(user, name, str(value).strip())
                changed.append(name)

        old_key = None
        new_asset = None
        if avatar is not None:
            new_asset = self.storage.upload_file(avatar, prefix=blog_settings.AVATAR_PREFIX)
            old_key = user.photo_key
            user.photo_url = new_asset.url
            user.photo_key = new_asset.key
            changed += ["photo_url", "photo_key"]

        try:
            with transaction.atomic():
                if changed:
                    user.save(update_fields=changed)
                if old_key:
                    transaction.on_commit(lambda: self.storage.discard(old_key))
        except Exception:
            if new_asset is not None:
                self.storage.discard(new_asset.key)
            raise

        logger.info("Profile updated (user=%s)", user_id)
        return user

    def list_all(self):
        return list(User.objects.all())
