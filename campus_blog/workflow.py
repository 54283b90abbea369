"""
Post review workflow.

This module is the only place that changes ``Post.status``:

    draft ──submit──> pending ──approve──> published
      ^                  │                    │
      │                reject          request_review
      │                  v                    v
      └─(edit)──── rejected ──submit──> pending

Moderators can also force-publish a draft, pending or rejected post.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Tuple

from django.db import DatabaseError
from django.utils import timezone

from . import notifications
from .conf import blog_settings
from .exceptions import (
    AuthenticationRequired,
    AuthorizationDenied,
    InvalidTransition,
    SlugConflict,
    ValidationError,
)
from .models import Post, PostRevision, PostStatus
from .permissions import (
    can_edit,
    can_moderate,
    can_request_review,
    can_submit,
    is_owner,
    require,
)
from .site_settings import get_settings
from .slugs import save_with_unique_slug

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ["title", "body", "excerpt", "category"]


def _moderator(actor, post):
    return can_moderate(actor)


@dataclass(frozen=True)
class Transition:
    sources: Tuple[str, ...]
    target: str
    allowed: Callable


TRANSITIONS = {
    "submit": Transition(
        (PostStatus.DRAFT, PostStatus.REJECTED),
        PostStatus.PENDING,
        can_submit,
    ),
    "approve": Transition(
        (PostStatus.PENDING,),
        PostStatus.PUBLISHED,
        _moderator,
    ),
    "reject": Transition(
        (PostStatus.PENDING,),
        PostStatus.REJECTED,
        _moderator,
    ),
    "request_review": Transition(
        (PostStatus.PUBLISHED,),
        PostStatus.PENDING,
        can_request_review,
    ),
    "force_publish": Transition(
        (PostStatus.DRAFT, PostStatus.PENDING, PostStatus.REJECTED),
        PostStatus.PUBLISHED,
        _moderator,
    ),
}


def perform(action, post, actor, reason=""):
    """
    Move ``post`` through the named workflow action on behalf of ``actor``.

    Permission is checked before the source state. Asking for the state the
    post is already in is a no-op.

    Returns:
        True if the status changed, False for a no-op

    Raises:
        ValidationError: unknown action.
        AuthenticationRequired, AuthorizationDenied: actor may not do this;
            the post is left unchanged.
        InvalidTransition: the post's current status does not allow it.
        SlugConflict: publishing could not store a unique slug.
    """
    try:
        transition = TRANSITIONS[action]
    except KeyError:
        raise ValidationError(f"Unknown workflow action: {action}")

    require(
        transition.allowed,
        actor,
        post,
        message=f"You may not {action.replace('_', ' ')} this post.",
    )

    if post.status == transition.target:
        return False
    if post.status not in transition.sources:
        raise InvalidTransition(action, post.status)

    previous = post.status
    _enter_status(post, transition.target, reason=reason)
    logger.info(
        "Post %s moved from %s to %s by user %s (%s)",
        post.pk,
        previous,
        post.status,
        actor.id,
        action,
    )

    if transition.target != PostStatus.PENDING or actor.id != post.author_id:
        notifications.notify_status_change(
            post, transition.target, sender_id=actor.id, action=action
        )
    return True


def submit(post, actor):
    return perform("submit", post, actor)


def approve(post, actor):
    return perform("approve", post, actor)


def reject(post, actor, reason=""):
    return perform("reject", post, actor, reason=reason)


def request_review(post, actor):
    return perform("request_review", post, actor)


def force_publish(post, actor):
    return perform("force_publish", post, actor)


def _enter_status(post, status, reason=""):
    saved = (post.status, post.published_at, post.rejection_reason)
    post.status = status
    fields = ["status", "updated_at"]

    if status == PostStatus.REJECTED:
        post.rejection_reason = (reason or "").strip()
        fields.append("rejection_reason")

    try:
        if status == PostStatus.PUBLISHED:
            if not post.published_at:
                post.published_at = timezone.now()
            post.rejection_reason = ""
            fields += ["published_at", "rejection_reason"]
            save_with_unique_slug(post, update_fields=fields)
        else:
            post.save(update_fields=fields)
    except (SlugConflict, DatabaseError):
        post.status, post.published_at, post.rejection_reason = saved
        raise


def clean_post_data(data, partial=False):
    """
    Validate post content fields.

    Args:
        data: mapping of field name to value
        partial: when False, title, body and category are required

    Returns:
        Dict of cleaned values for the fields present in ``data``

    Raises:
        ValidationError: unknown field, missing or invalid value.
    """
    unknown = sorted(set(data) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(unknown)}")

    if not partial:
        missing = [
            field for field in ("title", "body", "category")
            if not str(data.get(field) or "").strip()
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cleaned = {}
    for field, value in data.items():
        value = "" if value is None else str(value).strip()
        if field in ("title", "body", "category") and not value:
            raise ValidationError(f"{field.capitalize()} cannot be empty.")
        cleaned[field] = value

    if len(cleaned.get("title", "")) > blog_settings.TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title cannot exceed {blog_settings.TITLE_MAX_LENGTH} characters."
        )
    if len(cleaned.get("excerpt", "")) > blog_settings.EXCERPT_MAX_LENGTH:
        raise ValidationError(
            f"Excerpt cannot exceed {blog_settings.EXCERPT_MAX_LENGTH} characters."
        )
    if "category" in cleaned and cleaned["category"] not in blog_settings.CATEGORY_VALUES:
        raise ValidationError(f"Unknown category: {cleaned['category']}")
    return cleaned


def create_post(actor, title, body, category, excerpt="", submit=True):
    """
    Create a post authored by ``actor``.

    A post that is not submitted starts as a draft. A submitted post is
    published straight away when the ``auto_publish`` site setting is on,
    and waits for review otherwise.
    """
    if not actor.is_authenticated:
        raise AuthenticationRequired()
    if not actor.is_approved:
        raise AuthorizationDenied("Your account is awaiting approval.")

    data = clean_post_data(
        {"title": title, "body": body, "category": category, "excerpt": excerpt},
    )
    post = Post(author_id=actor.id, **data)

    if not submit:
        post.status = PostStatus.DRAFT
        post.save()
    elif get_settings().auto_publish:
        post.status = PostStatus.PUBLISHED
        post.published_at = timezone.now()
        save_with_unique_slug(post)
    else:
        post.status = PostStatus.PENDING
        post.save()

    logger.info("User %s created post %s as %s", actor.id, post.pk, post.status)
    return post


def edit_post(actor, post, changes, submit_for_review=False):
    """
    Apply content ``changes`` to ``post``.

    The stored content is appended to the post's revisions before the new
    content is written. When the author edits a published post it goes back
    to pending for another review; the slug does not change.

    Returns:
        List of the field names that changed
    """
    require(can_edit, actor, post, message="You may not edit this post.")
    data = clean_post_data(changes, partial=True)
    changed = [field for field, value in data.items() if getattr(post, field) != value]
    author_edit = is_owner(actor, post)

    if changed:
        PostRevision.record(post, actor.id, changed, is_admin_edit=not author_edit)
        for field in changed:
            setattr(post, field, data[field])
        post.last_edited_by_id = actor.id
        fields = changed + ["last_edited_by", "updated_at"]

        if author_edit and post.status == PostStatus.PUBLISHED:
            post.status = PostStatus.PENDING
            fields.append("status")
            logger.info("Post %s sent back for review after edit by its author", post.pk)

        post.save(update_fields=fields)

        if not author_edit:
            notifications.notify_post_edited(post, actor.id, changed)

    if submit_for_review and post.status in (PostStatus.DRAFT, PostStatus.REJECTED):
        perform("submit", post, actor)

    return changed


def assign_slug(post, actor):
    """Give ``post`` a slug ahead of publication. Moderators only."""
    require(_moderator, actor, post, message="You may not assign slugs.")
    return save_with_unique_slug(post, update_fields=["updated_at"])
