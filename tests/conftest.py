"""
Shared fixtures for campus_blog tests.
"""
import pytest

from campus_blog import workflow
from campus_blog.models import PostStatus, Role
from campus_blog.permissions import Actor
from campus_blog.site_settings import clear_cache

from .factories import make_post, make_user


@pytest.fixture(autouse=True)
def fresh_settings_cache():
    """Start and end every test with an empty settings cache."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def author(db):
    return make_user("author")


@pytest.fixture
def other_author(db):
    return make_user("other")


@pytest.fixture
def admin_user(db):
    return make_user("admin", role=Role.ADMIN)


@pytest.fixture
def unapproved_user(db):
    return make_user("newcomer", approved=False)


@pytest.fixture
def author_actor(author):
    return Actor.from_user(author)


@pytest.fixture
def other_actor(other_author):
    return Actor.from_user(other_author)


@pytest.fixture
def admin_actor(admin_user):
    return Actor.from_user(admin_user)


@pytest.fixture
def draft_post(author):
    return make_post(author, title="Draft Post", status=PostStatus.DRAFT)


@pytest.fixture
def pending_post(author):
    return make_post(author, title="Hello, World! 2024")


@pytest.fixture
def published_post(pending_post, admin_actor):
    workflow.approve(pending_post, admin_actor)
    return pending_post
