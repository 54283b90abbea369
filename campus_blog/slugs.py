"""
Slug generation and collision-free slug assignment for posts.
"""
import logging
import re

from django.db import IntegrityError, transaction

from .conf import blog_settings
from .exceptions import SlugConflict

logger = logging.getLogger(__name__)

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-{2,}")


def generate_slug(title):
    """
    Turn a title into a URL slug candidate.

    "Hello, World! 2024" becomes "hello-world-2024". Titles with no letters
    or digits produce an empty string.
    """
    slug = (title or "").lower()
    slug = _DISALLOWED.sub("", slug)
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = _HYPHENS.sub("-", slug)
    slug = slug[:blog_settings.SLUG_MAX_LENGTH]
    return slug.strip("-")


def slug_base_for(post):
    """Return the slug candidate for ``post``, falling back when the title has none."""
    return generate_slug(post.title) or blog_settings.SLUG_FALLBACK


def resolve_unique_slug(base, is_taken):
    """
    Return ``base`` or the first of ``base-1``, ``base-2``, ... not taken.

    Args:
        base: slug candidate
        is_taken: callable answering whether a slug is already used

    Returns:
        A slug for which ``is_taken`` is false
    """
    slug = base
    counter = 1
    while is_taken(slug):
        slug = f"{base}-{counter}"
        counter += 1
    return slug


def unique_post_slug(base, exclude_pk=None):
    """
    Resolve ``base`` against the slugs stored on posts.

    The post identified by ``exclude_pk`` is ignored, so re-saving a post
    keeps its own slug.
    """
    from .models import Post

    def is_taken(slug):
        return Post.objects.filter(slug=slug).exclude(pk=exclude_pk).exists()

    return resolve_unique_slug(base, is_taken)


def _slug_is_taken(post):
    from .models import Post

    return Post.objects.filter(slug=post.slug).exclude(pk=post.pk).exists()


def save_with_unique_slug(post, update_fields=None):
    """
    Save ``post``, assigning a unique slug first if it has none.

    The check-then-write is not atomic; the unique index on ``slug`` is the
    backstop. When a concurrent writer takes the slug between the check and
    the save, the slug is resolved again and the save retried.

    Raises:
        SlugConflict: no attempt out of SLUG_MAX_ATTEMPTS succeeded.
    """
    if post.slug:
        post.save(update_fields=update_fields)
        return post.slug

    if update_fields is not None:
        update_fields = list(update_fields) + ["slug"]

    base = slug_base_for(post)
    attempts = blog_settings.SLUG_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        post.slug = unique_post_slug(base, exclude_pk=post.pk)
        try:
            with transaction.atomic():
                post.save(update_fields=update_fields)
        except IntegrityError:
            if not _slug_is_taken(post):
                post.slug = None
                raise
            logger.warning(
                "Slug %r was taken concurrently (attempt %d of %d)",
                post.slug,
                attempt,
                attempts,
            )
            continue
        logger.info("Assigned slug %r to post %s", post.slug, post.pk)
        return post.slug

    post.slug = None
    raise SlugConflict(
        f"Could not assign a unique slug for {base!r} after {attempts} attempts."
    )
