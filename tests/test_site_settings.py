"""
Tests for the cached site settings.
"""
from unittest import mock

import pytest
from django.db import DatabaseError

from campus_blog.models import SiteSettings
from campus_blog.site_settings import SettingsCache, get_settings, settings_cache


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fetch():
    return mock.Mock(side_effect=lambda: SiteSettings(site_name="Fetched"))


class TestSettingsCache:
    """Tests for SettingsCache."""

    def test_reads_within_ttl_are_cached(self, fetch, clock):
        cache = SettingsCache(fetch=fetch, ttl=300, clock=clock)
        first = cache.get()
        clock.advance(299)
        assert cache.get() is first
        assert fetch.call_count == 1

    def test_refetches_after_ttl(self, fetch, clock):
        cache = SettingsCache(fetch=fetch, ttl=300, clock=clock)
        first = cache.get()
        clock.advance(300)
        assert cache.get() is not first
        assert fetch.call_count == 2

    def test_force_refresh(self, fetch, clock):
        cache = SettingsCache(fetch=fetch, ttl=300, clock=clock)
        cache.get()
        cache.get(force_refresh=True)
        assert fetch.call_count == 2

    def test_clear(self, fetch, clock):
        cache = SettingsCache(fetch=fetch, ttl=300, clock=clock)
        cache.get()
        cache.clear()
        assert not cache.is_fresh()
        cache.get()
        assert fetch.call_count == 2

    def test_database_failure_returns_uncached_defaults(self, clock):
        fetch = mock.Mock(side_effect=DatabaseError("no such table"))
        cache = SettingsCache(fetch=fetch, ttl=300, clock=clock)

        settings = cache.get()
        assert not settings.maintenance_mode
        assert settings.allow_registration
        assert settings.require_approval
        assert not settings.auto_publish
        assert settings.pk is None

        cache.get()
        assert fetch.call_count == 2

    def test_recovers_after_failure(self, clock):
        fetch = mock.Mock(side_effect=[DatabaseError("down"), SiteSettings(site_name="Back")])
        cache = SettingsCache(fetch=fetch, ttl=300, clock=clock)
        cache.get()
        assert cache.get().site_name == "Back"

    def test_ttl_defaults_to_setting(self, settings):
        settings.CAMPUS_BLOG = {"SETTINGS_CACHE_TTL": 42}
        assert SettingsCache().ttl == 42


class TestGetSettings:
    """Tests for the process-wide cache."""

    def test_loads_row(self, db):
        assert get_settings().pk == SiteSettings.SINGLETON_PK

    def test_update_invalidates_cache(self, db):
        assert not get_settings().maintenance_mode
        SiteSettings.update({"maintenance_mode": True})
        assert settings_cache.value is None
        assert get_settings().maintenance_mode

    def test_stale_value_served_until_expiry(self, db):
        get_settings()
        # Bypass save() so the invalidation signal does not fire
        SiteSettings.objects.update(auto_publish=True)
        assert not get_settings().auto_publish
        assert get_settings(force_refresh=True).auto_publish
