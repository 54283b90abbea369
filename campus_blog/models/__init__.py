"""
Models for campus_blog.

All models are importable from campus_blog.models:

    from campus_blog.models import Post, PostStatus, Comment, SiteSettings
"""
from .posts import PostStatus, Post, PostRevision
from .profiles import Role, AuthorProfile
from .comments import Comment
from .site import SiteSettings
from .notifications import NotificationType, Notification

__all__ = [
    # Posts
    "PostStatus",
    "Post",
    "PostRevision",
    # Accounts
    "Role",
    "AuthorProfile",
    # Comments
    "Comment",
    # Site
    "SiteSettings",
    # Notifications
    "NotificationType",
    "Notification",
]
