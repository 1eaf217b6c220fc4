"""
Service layer for blog_api.

Services receive their collaborators explicitly. The app builds one set at
startup (see BlogApiConfig.ready); views reach it through get_services().
"""
from collections import namedtuple

from django.apps import apps

from ..notifications import SignupNotifier
from ..storage import ObjectStorageClient
from ..tokens import TokenIssuer
from .comments import CommentService
from .posts import PostService
from .users import UserService

Services = namedtuple("Services", ["storage", "tokens", "notifier", "users", "posts", "comments"])


def build_services(storage=None, tokens=None, notifier=None):
    """Wire the services together, creating default collaborators as needed."""
    storage = storage or ObjectStorageClient()
    tokens = tokens or TokenIssuer()
    notifier = notifier or SignupNotifier()
    comments = CommentService()
    return Services(
        storage=storage,
        tokens=tokens,
        notifier=notifier,
        users=UserService(storage, tokens, notifier),
        posts=PostService(storage, comments),
        comments=comments,
    )


def get_services():
    """Return the services built when the app started."""
    return apps.get_app_config("blog_api").services


__all__ = [
    "CommentService",
    "PostService",
    "UserService",
    "Services",
    "build_services",
    "get_services",
]
