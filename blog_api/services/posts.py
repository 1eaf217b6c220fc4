"""
Post repository.
"""
import logging

from django.db import transaction
from django.db.models import Count, Prefetch

from ..conf import blog_settings
from ..exceptions import AuthorizationError, NotFoundError, ValidationError
from ..models import Comment, Post

logger = logging.getLogger(__name__)


class PostService:
    """
    Create, edit, publish, like and delete posts.

    Args:
        storage: ObjectStorageClient used for thumbnails
        comments: CommentService used to cascade deletes
    """

    def __init__(self, storage, comments):
        self.storage = storage
        self.comments = comments

    def _queryset(self):
        return Post.objects.select_related("author").prefetch_related(
            "likes",
            Prefetch("comments", queryset=Comment.objects.select_related("user")),
        )

    def _get_or_404(self, post_id):
        post = Post.objects.filter(pk=post_id).first()
        if post is None:
            raise NotFoundError("Blog not found")
        return post

    @staticmethod
    def _check_author(post, requester_id, action):
        if str(post.author_id) != str(requester_id):
            raise AuthorizationError(f"Unauthorized to {action} this blog")

    def get(self, post_id):
        """Return a post with author, likes and comments loaded."""
        post = self._queryset().filter(pk=post_id).first()
        if post is None:
            raise NotFoundError("Blog not found")
        return post

    def create(self, title, category, author_id, subtitle="", description=""):
        title = str(title or "").strip()
        category = str(category or "").strip()
        if not title or not category:
            raise ValidationError("Blog title and category is required.")

        post = Post.objects.create(
            title=title,
            category=category,
            subtitle=subtitle or "",
            description=description or "",
            author_id=author_id,
        )
        logger.info("Post %s created by user %s", post.pk, author_id)
        return self.get(post.pk)

    def update(self, post_id, fields, requester_id, thumbnail=None):
        """
        Overwrite the editable fields given in ``fields``.

        Args:
            post_id: post to edit
            fields: mapping; keys outside Post.EDITABLE_FIELDS are ignored
            requester_id: must be the post's author
            thumbnail: optional UploadedFile replacing the current thumbnail

        Returns:
            The updated post.
        """
        post = self._get_or_404(post_id)
        self._check_author(post, requester_id, "update")

        changes = {
            name: str(fields[name]).strip()
            for name in Post.EDITABLE_FIELDS
            if name in fields and fields[name] is not None
        }
        for required in ("title", "category"):
            if required in changes and not changes[required]:
                raise ValidationError(f"Blog {required} cannot be empty.")

        old_key = None
        new_asset = None
        if thumbnail is not None:
            new_asset = self.storage.upload_file(thumbnail, prefix=blog_settings.THUMBNAIL_PREFIX)
            old_key = post.thumbnail_key
            changes["thumbnail"] = new_asset.url
            changes["thumbnail_key"] = new_asset.key

        for name, value in changes.items():
            setattr(post, name, value)

        try:
            with transaction.atomic():
                if changes:
                    post.save(update_fields=[*changes, "updated_at"])
                if old_key:
                    transaction.on_commit(lambda: self.storage.discard(old_key))
        except Exception:
            if new_asset is not None:
                self.storage.discard(new_asset.key)
            raise

        logger.info("Post %s updated", post.pk)
        return self.get(post.pk)

    def toggle_publish(self, post_id, requester_id):
        """Flip the publish flag. Returns the new state only."""
        post = self._get_or_404(post_id)
        self._check_author(post, requester_id, "publish")
        published = post.toggle_published()
        logger.info("Post %s is now %s", post.pk, "published" if published else "unpublished")
        return published

    def delete(self, post_id, requester_id):
        """Delete a post and its comments in one transaction."""
        post = self._get_or_404(post_id)
        if str(post.author_id) != str(requester_id):
            raise AuthorizationError("Unauthorized to delete this blog")

        thumbnail_key = post.thumbnail_key
        with transaction.atomic():
            removed = self.comments.delete_by_post(post.pk)
            post.delete()
            if thumbnail_key:
                transaction.on_commit(lambda: self.storage.discard(thumbnail_key))

        logger.info("Post %s deleted with %d comments", post_id, removed)

    def like(self, post_id, user_id):
        """Add ``user_id`` to the like-set. Liking twice changes nothing."""
        post = self._get_or_404(post_id)
        post.likes.add(user_id)
        return self.get(post.pk)

    def unlike(self, post_id, user_id):
        post = self._get_or_404(post_id)
        post.likes.remove(user_id)
        return self.get(post.pk)

    def list_all(self):
        return list(self._queryset())

    def list_published(self):
        return list(self._queryset().filter(is_published=True))

    def list_by_author(self, author_id):
        return list(self._queryset().filter(author_id=author_id))

    def aggregate_likes_for_author(self, author_id):
        """Return how many posts the author has and their total likes."""
        totals = Post.objects.filter(author_id=author_id).aggregate(
            total_blogs=Count("id", distinct=True),
            total_likes=Count("likes"),
        )
        return {
            "total_blogs": totals["total_blogs"] or 0,
            "total_likes": totals["total_likes"] or 0,
        }
