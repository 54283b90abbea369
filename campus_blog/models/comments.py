"""
Comment model for campus_blog.
"""
from django.conf import settings
from django.db import models

from ..conf import blog_settings


class Comment(models.Model):
    """
    Comment on a published post.

    Supports:
    - Threaded replies via parent field
    - Moderation through the approval flag
    """

    post = models.ForeignKey(
        "campus_blog.Post",
        on_delete=models.CASCADE,
        related_name="comments",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="campus_comments",
    )
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="replies",
    )
    content = models.TextField(max_length=blog_settings.COMMENT_MAX_LENGTH)
    is_approved = models.BooleanField(
        default=True,
        help_text="Whether comment is approved and visible",
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["post", "is_approved", "created_at"]),
        ]

    def __str__(self):
        return f"Comment by {self.author} on {self.post}"

    @property
    def preview(self):
        """Return truncated content for admin display."""
        if len(self.content) > 100:
            return self.content[:100] + "..."
        return self.content

    @property
    def is_reply(self):
        """Check if this is a reply to another comment."""
        return self.parent_id is not None

    @property
    def thread_depth(self):
        """Calculate nesting depth of this comment."""
        depth = 0
        current = self.parent
        while current:
            depth += 1
            current = current.parent
        return depth

    def get_visible_replies(self):
        """Recursively get approved replies, depth first."""
        replies = []
        for reply in self.replies.filter(is_approved=True):
            replies.append(reply)
            replies.extend(reply.get_visible_replies())
        return replies

    def approve(self):
        """Approve the comment for display."""
        self.is_approved = True
        self.save(update_fields=["is_approved", "updated_at"])

    def reject(self):
        """Hide the comment."""
        self.is_approved = False
        self.save(update_fields=["is_approved", "updated_at"])

    @classmethod
    def submit(cls, post, actor, content, parent_id=None):
        """
        Create a comment on ``post`` on behalf of ``actor``.

        The post and the parent comment are checked at write time; the
        store does not enforce that a reply belongs to the same post.

        Raises:
            AuthenticationRequired, AuthorizationDenied: actor may not comment.
            ValidationError: content is empty or too long, or the parent id is
                not a number.
            NotFound: the parent comment is not on this post.
        """
        from .. import notifications
        from ..exceptions import NotFound, ValidationError
        from ..permissions import can_comment, require

        require(can_comment, actor, post)

        content = (content or "").strip()
        if not content:
            raise ValidationError("Comment content is required.")
        if len(content) > blog_settings.COMMENT_MAX_LENGTH:
            raise ValidationError(
                f"Comment cannot exceed {blog_settings.COMMENT_MAX_LENGTH} characters."
            )

        parent = None
        if parent_id:
            try:
                parent_id = int(parent_id)
            except (TypeError, ValueError):
                raise ValidationError("Parent comment id must be a number.")
            parent = cls.objects.filter(pk=parent_id, post=post).first()
            if parent is None:
                raise NotFound("Parent comment not found.")

        comment = cls.objects.create(
            post=post,
            author_id=actor.id,
            parent=parent,
            content=content,
            is_approved=blog_settings.AUTO_APPROVE_COMMENTS,
        )
        notifications.notify_new_comment(comment)
        return comment
