"""
In-app notifications for campus_blog.
"""
from django.conf import settings
from django.db import models


class NotificationType(models.TextChoices):
    POST_APPROVED = "post_approved", "Post approved"
    POST_REJECTED = "post_rejected", "Post rejected"
    POST_PUBLISHED = "post_published", "Post published"
    POST_EDITED = "post_edited", "Post edited"
    POST_STATUS_CHANGED = "post_status_changed", "Post status changed"
    COMMENT_ADDED = "comment_added", "Comment added"
    COMMENT_REPLY = "comment_reply", "Comment reply"


class Notification(models.Model):
    """Message shown to a user about activity on their posts or comments."""

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_notifications",
    )
    # Empty for system notifications
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    type = models.CharField(max_length=30, choices=NotificationType.choices)
    title = models.CharField(max_length=200)
    message = models.TextField()
    post = models.ForeignKey(
        "campus_blog.Post",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    comment = models.ForeignKey(
        "campus_blog.Comment",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    is_read = models.BooleanField(default=False)
    data = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "is_read", "-created_at"]),
        ]

    def __str__(self):
        return f"{self.get_type_display()} for {self.recipient}"
