"""
Models for blog_api.

All models are importable from blog_api.models:

    from blog_api.models import User, Post, Comment
"""
from .users import User, UserManager
from .posts import Post
from .comments import Comment

__all__ = [
    "User",
    "UserManager",
    "Post",
    "Comment",
]
