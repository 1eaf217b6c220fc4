"""
Shared fixtures for blog_api tests.
"""
import pytest
from django.core.files.storage import InMemoryStorage
from django.core.files.uploadedfile import SimpleUploadedFile

from blog_api.models import Comment, Post, User
from blog_api.notifications import SignupNotifier
from blog_api.services import build_services
from blog_api.storage import ObjectStorageClient
from blog_api.tokens import TokenIssuer


class BrokenStorage(InMemoryStorage):
    """Storage backend whose every write fails."""

    def save(self, name, content, max_length=None):
        raise OSError("bucket unreachable")

    def delete(self, name):
        raise OSError("bucket unreachable")


@pytest.fixture
def sent_alerts():
    """Alerts delivered by the signup notifier, as (subject, message)."""
    return []


@pytest.fixture
def storage():
    return ObjectStorageClient(InMemoryStorage(base_url="https://media.example.com/"))


@pytest.fixture
def services(storage, sent_alerts):
    """Services wired with in-memory storage and a recording notifier."""
    notifier = SignupNotifier(
        send=lambda subject, message: sent_alerts.append((subject, message)),
    )
    return build_services(storage=storage, tokens=TokenIssuer(), notifier=notifier)


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        email="author@example.com",
        password="secret1",
        first_name="Ada",
        last_name="Lovelace",
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        email="reader@example.com",
        password="secret2",
        first_name="Grace",
        last_name="Hopper",
    )


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(
        email="staff@example.com",
        password="secret3",
        first_name="Staff",
        last_name="Member",
        is_staff=True,
    )


@pytest.fixture
def post(db, user):
    """Create a test post."""
    return Post.objects.create(
        title="Test Post",
        category="Testing",
        description="This is a test post body.",
        author=user,
    )


@pytest.fixture
def comment(db, post, other_user):
    return Comment.objects.create(post=post, user=other_user, content="Nice post!")


@pytest.fixture
def image():
    """Factory for small uploaded image files."""
    def make(name="picture.png", content=b"\x89PNG fake image", content_type="image/png"):
        return SimpleUploadedFile(name, content, content_type=content_type)
    return make
