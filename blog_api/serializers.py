"""
JSON representations of blog_api models.

Every user dict is built from PUBLIC_USER_FIELDS, so credential fields
never leave the process whatever the endpoint.
"""

PUBLIC_USER_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "bio",
    "occupation",
    "instagram",
    "facebook",
    "linkedin",
    "github",
    "photo_url",
)

_CAMEL = {
    "first_name": "firstName",
    "last_name": "lastName",
    "photo_url": "photoUrl",
}


def _isoformat(value):
    return value.isoformat() if value else None


def user_summary(user):
    """Short author/commenter card."""
    return {
        "id": user.pk,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "photoUrl": user.photo_url or None,
    }


def user_to_dict(user):
    data = {"id": user.pk}
    for name in PUBLIC_USER_FIELDS:
        data[_CAMEL.get(name, name)] = getattr(user, name)
    data["photoUrl"] = user.photo_url or None
    data["createdAt"] = _isoformat(user.date_joined)
    return data


def comment_to_dict(comment):
    return {
        "id": comment.pk,
        "content": comment.content,
        "postId": comment.post_id,
        "user": user_summary(comment.user),
        "createdAt": _isoformat(comment.created_at),
    }


def post_to_dict(post):
    """
    Serialize a post with its author, like-set and comments.

    Expects the relations to be prefetched (see PostService._queryset).
    """
    return {
        "id": post.pk,
        "title": post.title,
        "subtitle": post.subtitle,
        "description": post.description,
        "category": post.category,
        "thumbnail": post.thumbnail or None,
        "author": user_summary(post.author),
        "isPublished": post.is_published,
        "likes": [user.pk for user in post.likes.all()],
        "comments": [comment_to_dict(c) for c in post.comments.all()],
        "createdAt": _isoformat(post.created_at),
        "updatedAt": _isoformat(post.updated_at),
    }
