"""
Tests for the campus_blog admin.
"""
from types import SimpleNamespace
from unittest import mock

import pytest
from django.contrib import messages
from django.contrib.admin.sites import AdminSite
from django.test import RequestFactory

from campus_blog.admin import PostAdmin
from campus_blog.models import (
    Notification,
    NotificationType,
    Post,
    PostRevision,
    PostStatus,
)


@pytest.fixture
def post_admin():
    return PostAdmin(Post, AdminSite())


def admin_request(user):
    request = RequestFactory().post("/admin/campus_blog/post/")
    request.user = user
    return request


def changed(*fields):
    return SimpleNamespace(changed_data=list(fields))


class TestPostAdminSave:
    """Tests for saving posts from the change form."""

    def test_content_edit_records_revision(self, post_admin, published_post, admin_user, author):
        obj = Post.objects.get(pk=published_post.pk)
        obj.title = "Sharper Title"

        post_admin.save_model(admin_request(admin_user), obj, changed("title"), change=True)

        post = Post.objects.get(pk=published_post.pk)
        assert post.title == "Sharper Title"
        assert post.status == PostStatus.PUBLISHED
        assert post.last_edited_by == admin_user

        revision = post.revisions.get()
        assert revision.title == "Hello, World! 2024"
        assert revision.is_admin_edit
        assert Notification.objects.filter(
            recipient=author, type=NotificationType.POST_EDITED
        ).exists()

    def test_unchanged_form_records_nothing(self, post_admin, published_post, admin_user):
        obj = Post.objects.get(pk=published_post.pk)
        post_admin.save_model(admin_request(admin_user), obj, changed(), change=True)
        assert not PostRevision.objects.exists()

    def test_denied_edit_is_reported(self, post_admin, draft_post, other_author):
        obj = Post.objects.get(pk=draft_post.pk)
        obj.body = "Overwritten"

        with mock.patch.object(post_admin, "message_user") as message_user:
            post_admin.save_model(admin_request(other_author), obj, changed("body"), change=True)

        assert message_user.call_args.kwargs["level"] == messages.ERROR
        assert Post.objects.get(pk=draft_post.pk).body == "This is a test post body."
        assert not PostRevision.objects.exists()

    def test_new_post_is_saved_as_draft(self, post_admin, admin_user, author):
        obj = Post(title="From the admin", body="Body", category="events", author=author)
        post_admin.save_model(admin_request(admin_user), obj, changed("title"), change=False)
        assert Post.objects.get(pk=obj.pk).status == PostStatus.DRAFT

    def test_author_is_read_only_on_change(self, post_admin, published_post, admin_user):
        request = admin_request(admin_user)
        assert "author" in post_admin.get_readonly_fields(request, published_post)
        assert "author" not in post_admin.get_readonly_fields(request)


class TestPostAdminActions:
    """Tests for the bulk workflow actions."""

    def test_approve_posts(self, post_admin, pending_post, draft_post, admin_user):
        with mock.patch.object(post_admin, "message_user") as message_user:
            post_admin.approve_posts(admin_request(admin_user), Post.objects.all())

        assert Post.objects.get(pk=pending_post.pk).status == PostStatus.PUBLISHED
        assert Post.objects.get(pk=draft_post.pk).status == PostStatus.DRAFT
        assert message_user.call_args_list[-1].args[1] == "1 posts approved."
