"""
Comment model for blog_api.
"""
from django.conf import settings
from django.db import models


class Comment(models.Model):
    """Comment left by a user on a post."""

    post = models.ForeignKey(
        "blog_api.Post",
        on_delete=models.CASCADE,
        related_name="comments",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comments",
    )
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-pk"]
        indexes = [
            models.Index(fields=["post", "-created_at"], name="comment_post_idx"),
        ]

    def __str__(self):
        return f"Comment by {self.user} on {self.post}"

    @property
    def preview(self):
        """Return truncated content for admin display."""
        if len(self.content) > 100:
            return self.content[:100] + "..."
        return self.content
