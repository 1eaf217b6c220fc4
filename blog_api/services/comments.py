"""
Comment store.
"""
import logging

from ..conf import blog_settings
from ..exceptions import AuthorizationError, NotFoundError, ValidationError
from ..models import Comment, Post

logger = logging.getLogger(__name__)


class CommentService:
    """Create, list and delete comments attached to posts."""

    def create(self, post_id, user_id, text):
        text = str(text or "").strip()
        if not text:
            raise ValidationError("Comment text is required")
        if len(text) > blog_settings.COMMENT_MAX_LENGTH:
            raise ValidationError(
                f"Comment must be at most {blog_settings.COMMENT_MAX_LENGTH} characters"
            )
        if not Post.objects.filter(pk=post_id).exists():
            raise NotFoundError("Blog not found")

        comment = Comment.objects.create(post_id=post_id, user_id=user_id, content=text)
        logger.info("Comment %s added to post %s", comment.pk, post_id)
        return Comment.objects.select_related("user").get(pk=comment.pk)

    def list_by_post(self, post_id):
        """Return the post's comments, newest first."""
        return list(Comment.objects.filter(post_id=post_id).select_related("user"))

    def delete(self, comment_id, requester_id):
        """
        Delete a single comment.

        Allowed for the comment's author and for the author of the post it
        belongs to.
        """
        comment = Comment.objects.select_related("post").filter(pk=comment_id).first()
        if comment is None:
            raise NotFoundError("Comment not found")

        allowed = {str(comment.user_id), str(comment.post.author_id)}
        if str(requester_id) not in allowed:
            raise AuthorizationError("Unauthorized to delete this comment")

        comment.delete()
        logger.info("Comment %s deleted by user %s", comment_id, requester_id)

    def delete_by_post(self, post_id):
        """Delete every comment on a post. Returns how many were removed."""
        deleted, _ = Comment.objects.filter(post_id=post_id).delete()
        return deleted
