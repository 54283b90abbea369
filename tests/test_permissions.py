"""
Tests for the visibility and authorization rules.

The rules only look at the actor and at the post's status and author id,
so these tests build plain objects and need no database.
"""
from types import SimpleNamespace

import pytest

from campus_blog.exceptions import AuthenticationRequired, AuthorizationDenied
from campus_blog.models import PostStatus, Role
from campus_blog.permissions import (
    ANONYMOUS,
    Actor,
    can_comment,
    can_edit,
    can_moderate,
    can_view,
    require,
)

AUTHOR_ID = 1
OTHER_ID = 2
ADMIN_ID = 3

AUTHOR = Actor(id=AUTHOR_ID, role=Role.AUTHOR, is_approved=True)
OTHER = Actor(id=OTHER_ID, role=Role.AUTHOR, is_approved=True)
UNAPPROVED_AUTHOR = Actor(id=AUTHOR_ID, role=Role.AUTHOR, is_approved=False)
UNAPPROVED_OTHER = Actor(id=OTHER_ID, role=Role.AUTHOR, is_approved=False)
ADMIN = Actor(id=ADMIN_ID, role=Role.ADMIN, is_approved=True)
UNAPPROVED_ADMIN = Actor(id=ADMIN_ID, role=Role.ADMIN, is_approved=False)

ALL_STATUSES = [status for status, _label in PostStatus.choices]
HIDDEN_STATUSES = [s for s in ALL_STATUSES if s != PostStatus.PUBLISHED]


def post(status, author_id=AUTHOR_ID):
    return SimpleNamespace(status=status, author_id=author_id)


class TestActor:
    """Tests for the Actor value."""

    def test_anonymous(self):
        assert not ANONYMOUS.is_authenticated
        assert not ANONYMOUS.is_admin

    def test_admin_role(self):
        assert ADMIN.is_admin
        assert not AUTHOR.is_admin

    def test_from_anonymous_user(self):
        assert Actor.from_user(None) is ANONYMOUS
        assert Actor.from_user(SimpleNamespace(is_authenticated=False)) is ANONYMOUS

    def test_from_user_with_profile(self, author, admin_user):
        assert Actor.from_user(author) == Actor(author.pk, Role.AUTHOR, True)
        assert Actor.from_user(admin_user) == Actor(admin_user.pk, Role.ADMIN, True)

    def test_from_user_without_profile(self, db, django_user_model):
        user = django_user_model.objects.create_user(username="plain", password="pass")
        assert Actor.from_user(user) == Actor(user.pk, Role.AUTHOR, False)


class TestCanView:
    """Tests for can_view."""

    @pytest.mark.parametrize("actor", [ANONYMOUS, AUTHOR, OTHER, UNAPPROVED_OTHER, ADMIN])
    def test_published_visible_to_everyone(self, actor):
        assert can_view(actor, post(PostStatus.PUBLISHED))

    @pytest.mark.parametrize("status", HIDDEN_STATUSES)
    def test_hidden_from_anonymous_and_others(self, status):
        assert not can_view(ANONYMOUS, post(status))
        assert not can_view(OTHER, post(status))

    @pytest.mark.parametrize("status", HIDDEN_STATUSES)
    def test_author_and_admin_see_unpublished(self, status):
        assert can_view(AUTHOR, post(status))
        assert can_view(UNAPPROVED_AUTHOR, post(status))
        assert can_view(ADMIN, post(status))

    def test_unapproved_admin_cannot_see_pending(self):
        assert not can_view(UNAPPROVED_ADMIN, post(PostStatus.PENDING))


class TestCanEdit:
    """Tests for can_edit."""

    @pytest.mark.parametrize("status", ALL_STATUSES)
    def test_author_edits_own_post(self, status):
        assert can_edit(AUTHOR, post(status))

    @pytest.mark.parametrize("status", ALL_STATUSES)
    def test_other_author_cannot_edit(self, status):
        assert not can_edit(OTHER, post(status))

    @pytest.mark.parametrize("status", ALL_STATUSES)
    def test_admin_edits_any_post(self, status):
        assert can_edit(ADMIN, post(status))

    def test_anonymous_and_unapproved_cannot_edit(self):
        assert not can_edit(ANONYMOUS, post(PostStatus.DRAFT))
        assert not can_edit(UNAPPROVED_AUTHOR, post(PostStatus.DRAFT))
        assert not can_edit(UNAPPROVED_ADMIN, post(PostStatus.DRAFT))


class TestCanModerate:
    """Tests for can_moderate."""

    def test_only_approved_admins(self):
        assert can_moderate(ADMIN)
        assert not can_moderate(UNAPPROVED_ADMIN)
        assert not can_moderate(AUTHOR)
        assert not can_moderate(ANONYMOUS)

    def test_role_without_identity(self):
        assert not can_moderate(Actor(id=None, role=Role.ADMIN, is_approved=True))


class TestCanComment:
    """Tests for can_comment."""

    @pytest.mark.parametrize("actor", [AUTHOR, OTHER, ADMIN])
    def test_approved_users_comment_on_published(self, actor):
        assert can_comment(actor, post(PostStatus.PUBLISHED))

    @pytest.mark.parametrize("status", HIDDEN_STATUSES)
    def test_no_comments_before_publication(self, status):
        assert not can_comment(AUTHOR, post(status))
        assert not can_comment(ADMIN, post(status))

    def test_anonymous_and_unapproved(self):
        assert not can_comment(ANONYMOUS, post(PostStatus.PUBLISHED))
        assert not can_comment(UNAPPROVED_OTHER, post(PostStatus.PUBLISHED))


class TestRequire:
    """Tests for require."""

    def test_passes(self):
        require(can_edit, AUTHOR, post(PostStatus.DRAFT))

    def test_anonymous_needs_authentication(self):
        with pytest.raises(AuthenticationRequired):
            require(can_edit, ANONYMOUS, post(PostStatus.DRAFT))

    def test_known_actor_is_denied(self):
        with pytest.raises(AuthorizationDenied) as excinfo:
            require(can_edit, OTHER, post(PostStatus.DRAFT), message="Not yours.")
        assert excinfo.value.detail == "Not yours."
        assert excinfo.value.status_code == 403
