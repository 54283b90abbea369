"""
Notification sink for workflow and comment events.

Every call is fire-and-forget: a failure is logged and swallowed so it can
never undo the status change or comment that triggered it.
"""
import logging

from django.db import DatabaseError, transaction

from .models import Notification, NotificationType, PostStatus

logger = logging.getLogger(__name__)

APPROVAL_MESSAGE = (
    NotificationType.POST_APPROVED,
    "Post Approved!",
    'Your post "{title}" has been approved and is now live.',
)

STATUS_MESSAGES = {
    PostStatus.PUBLISHED.value: (
        NotificationType.POST_PUBLISHED,
        "Post Published!",
        'Your post "{title}" is now live and visible to everyone.',
    ),
    PostStatus.REJECTED.value: (
        NotificationType.POST_REJECTED,
        "Post Rejected",
        'Your post "{title}" was rejected. Please review the feedback and resubmit.',
    ),
}


def send(recipient_id, kind, title, message, sender_id=None, post=None, comment=None, data=None):
    """
    Store a notification, returning it or None when the write failed.

    Runs in its own savepoint so a failure does not break the caller's
    transaction.
    """
    try:
        with transaction.atomic():
            return Notification.objects.create(
                recipient_id=recipient_id,
                sender_id=sender_id,
                type=kind,
                title=title,
                message=message,
                post=post,
                comment=comment,
                data=data or {},
            )
    except DatabaseError:
        logger.exception("Failed to send %s notification to user %s", kind, recipient_id)
        return None


def notify_status_change(post, new_status, sender_id=None, action=None):
    """
    Tell the author of ``post`` that it moved to ``new_status``.

    A moderator approving a pending post sends ``post_approved``; any other
    route to published sends ``post_published``.
    """
    if action == "approve":
        kind, title, template = APPROVAL_MESSAGE
    elif str(new_status) in STATUS_MESSAGES:
        kind, title, template = STATUS_MESSAGES[str(new_status)]
    else:
        kind = NotificationType.POST_STATUS_CHANGED
        title = "Post Status Updated"
        template = 'Your post "{title}" status has been updated to {status}.'

    message = template.format(title=post.title, status=new_status)
    if new_status == PostStatus.REJECTED and post.rejection_reason:
        message = f"{message} Reason: {post.rejection_reason}"

    return send(
        post.author_id,
        kind,
        title,
        message,
        sender_id=sender_id,
        post=post,
        data={
            "post_title": post.title,
            "new_status": str(new_status),
            "rejection_reason": post.rejection_reason,
        },
    )


def notify_post_edited(post, editor_id, changed_fields):
    """Tell the author that someone else changed their post."""
    if editor_id == post.author_id:
        return None
    changes = ", ".join(changed_fields)
    return send(
        post.author_id,
        NotificationType.POST_EDITED,
        "Your Post Was Edited",
        f'An admin has made changes to your post "{post.title}". Changes: {changes}',
        sender_id=editor_id,
        post=post,
        data={"post_title": post.title, "changes": changes},
    )


def notify_new_comment(comment):
    """Tell the post author, and the parent comment's author for replies."""
    post = comment.post
    preview = comment.content[:100]
    sent = []

    if comment.author_id != post.author_id:
        sent.append(send(
            post.author_id,
            NotificationType.COMMENT_ADDED,
            "New Comment on Your Post",
            f'Someone commented on your post "{post.title}": "{preview}"',
            sender_id=comment.author_id,
            post=post,
            comment=comment,
            data={"post_title": post.title, "comment_preview": preview},
        ))

    parent = comment.parent
    if (
        parent is not None
        and parent.author_id != comment.author_id
        and parent.author_id != post.author_id
    ):
        sent.append(send(
            parent.author_id,
            NotificationType.COMMENT_REPLY,
            "New Reply to Your Comment",
            f'Someone replied to your comment on "{post.title}": "{preview}"',
            sender_id=comment.author_id,
            post=post,
            comment=comment,
            data={"post_title": post.title, "comment_preview": preview},
        ))

    return [notification for notification in sent if notification is not None]
