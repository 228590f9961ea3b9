"""
Comment and Like models for django-techblog.
"""
from django.conf import settings
from django.db import models

from ..conf import blog_settings


class Comment(models.Model):
    """
    Comment on a blog.

    Replies point at their parent; threads are one level deep in the API
    (top-level comments with their replies).
    """

    blog = models.ForeignKey(
        "techblog.Blog",
        on_delete=models.CASCADE,
        related_name="comments",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_comments",
    )
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="replies",
    )
    content = models.TextField(max_length=blog_settings.COMMENT_MAX_LENGTH)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["blog", "parent", "-created_at"], name="techblog_comment_thread_idx"),
        ]

    def __str__(self):
        return f"Comment by {self.author} on {self.blog}"

    @property
    def preview(self):
        """Return truncated content for admin display."""
        if len(self.content) > 100:
            return self.content[:100] + "..."
        return self.content

    @property
    def is_reply(self):
        return self.parent_id is not None

    def can_delete(self, user):
        return bool(user and user.is_authenticated and user.pk == self.author_id)

    @classmethod
    def thread_for(cls, blog):
        """Top-level comments newest first, each with replies oldest first."""
        replies = models.Prefetch(
            "replies",
            queryset=cls.objects.select_related("author").order_by("created_at"),
        )
        return (
            cls.objects.filter(blog=blog, parent=None)
            .select_related("author")
            .prefetch_related(replies)
            .order_by("-created_at")
        )


class Like(models.Model):
    """A user's like on a blog. One per user per blog."""

    blog = models.ForeignKey(
        "techblog.Blog",
        on_delete=models.CASCADE,
        related_name="likes",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_likes",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ["blog", "user"]
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.user} likes {self.blog}"

    @classmethod
    def toggle(cls, blog, user):
        """
        Like the blog, or remove the like if there already is one.

        Returns True when the blog is now liked.
        """
        deleted, _ = cls.objects.filter(blog=blog, user=user).delete()
        if deleted:
            return False
        cls.objects.create(blog=blog, user=user)
        return True
