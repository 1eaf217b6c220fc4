"""
Post model for blog_api.
"""
from django.conf import settings
from django.db import models
from django.db.models import Case, Value, When


class Post(models.Model):
    """
    Blog post.

    Posts start unpublished. ``likes`` is the like-set: the M2M through
    table holds one row per (post, user) pair, so a user likes a post at
    most once and adding/removing is a single statement.
    """

    # Content
    title = models.CharField(max_length=255)
    subtitle = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=100)
    thumbnail = models.URLField(max_length=1000, blank=True)
    thumbnail_key = models.CharField(
        max_length=500,
        blank=True,
        help_text="Storage key of the current thumbnail",
    )

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="posts",
    )
    is_published = models.BooleanField(default=False)
    likes = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="liked_posts",
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    EDITABLE_FIELDS = ("title", "subtitle", "description", "category")

    class Meta:
        ordering = ["-created_at", "-pk"]
        indexes = [
            models.Index(fields=["is_published", "-created_at"], name="post_published_idx"),
            models.Index(fields=["author", "-created_at"], name="post_author_idx"),
        ]

    def __str__(self):
        return self.title

    def toggle_published(self):
        """
        Flip the publish flag in the database and return the new value.

        The flip is a single UPDATE so concurrent toggles never read a stale
        flag.
        """
        Post.objects.filter(pk=self.pk).update(
            is_published=Case(
                When(is_published=True, then=Value(False)),
                default=Value(True),
            )
        )
        self.refresh_from_db(fields=["is_published"])
        return self.is_published
