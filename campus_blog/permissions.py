"""
Visibility and authorization rules for posts.

Every check is a plain function of the actor (id, role, approval) and the
post (status, author id), so the rules can be tested without a database.
"""
from dataclasses import dataclass
from typing import Optional

from django.db.models import Q

from .exceptions import AuthenticationRequired, AuthorizationDenied
from .models import AuthorProfile, PostStatus, Role


@dataclass(frozen=True)
class Actor:
    """Identity on whose behalf an operation is requested."""

    id: Optional[int] = None
    role: Optional[str] = None
    is_approved: bool = False

    @property
    def is_authenticated(self):
        return self.id is not None

    @property
    def is_admin(self):
        return self.is_authenticated and self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user):
        """
        Resolve a Django user (or AnonymousUser/None) into an Actor.

        Users without a blog profile are treated as unapproved authors.
        """
        if user is None or not user.is_authenticated:
            return ANONYMOUS
        try:
            profile = user.blog_profile
        except AuthorProfile.DoesNotExist:
            return cls(id=user.pk, role=Role.AUTHOR, is_approved=False)
        return cls(id=user.pk, role=profile.role, is_approved=profile.is_approved)


ANONYMOUS = Actor()


def is_signed_in(actor):
    return actor.is_authenticated


def is_owner(actor, post):
    return actor.is_authenticated and actor.id == post.author_id


def can_moderate(actor):
    """Approve, reject and force-publish require an approved admin."""
    return actor.is_admin and actor.is_approved


def can_view(actor, post):
    """Published posts are public; anything else is for its author and moderators."""
    if post.status == PostStatus.PUBLISHED:
        return True
    return is_owner(actor, post) or can_moderate(actor)


def can_edit(actor, post):
    """
    Authors may edit their own posts in any state; moderators may edit any post.

    An author's edit of a published post sends it back for review.
    """
    if can_moderate(actor):
        return True
    return is_owner(actor, post) and actor.is_approved


def can_comment(actor, post):
    return (
        actor.is_authenticated
        and actor.is_approved
        and post.status == PostStatus.PUBLISHED
    )


def can_submit(actor, post):
    """Only the approved author of a post may send it for review."""
    return is_owner(actor, post) and actor.is_approved


def can_request_review(actor, post):
    return can_moderate(actor) or can_submit(actor, post)


def require(check, actor, *args, message=None):
    """
    Run ``check(actor, *args)`` and raise when it fails.

    Raises:
        AuthenticationRequired: the actor is anonymous.
        AuthorizationDenied: the actor is known but not allowed.
    """
    if check(actor, *args):
        return
    if not actor.is_authenticated:
        raise AuthenticationRequired()
    if message:
        raise AuthorizationDenied(message)
    raise AuthorizationDenied()


def visible_posts(actor, queryset):
    """Filter ``queryset`` down to the posts ``can_view`` allows."""
    if can_moderate(actor):
        return queryset
    visible = Q(status=PostStatus.PUBLISHED)
    if actor.is_authenticated:
        visible |= Q(author_id=actor.id)
    return queryset.filter(visible)
