"""
Time-boxed cache for the site settings row.

Request entry points and the workflow read settings on nearly every
request, so the row is kept in memory for SETTINGS_CACHE_TTL seconds.
The cache is not locked: two concurrent refreshes may both hit the
database and the last one wins.
"""
import logging
import time

from django.db import DatabaseError

from .conf import blog_settings
from .models import SiteSettings

logger = logging.getLogger(__name__)


def default_settings():
    """Return unsaved settings used when the database cannot be read."""
    return SiteSettings(
        maintenance_mode=False,
        allow_registration=True,
        require_approval=True,
        auto_publish=False,
    )


class SettingsCache:
    """
    Holds the last fetched settings together with the time they were read.

    Args:
        fetch: callable returning a fresh settings object
        ttl: seconds a fetched value stays valid, SETTINGS_CACHE_TTL if None
        clock: monotonic time source, in seconds
    """

    def __init__(self, fetch=SiteSettings.load, ttl=None, clock=time.monotonic):
        self.fetch = fetch
        self._ttl = ttl
        self.clock = clock
        self.value = None
        self.fetched_at = None

    @property
    def ttl(self):
        if self._ttl is None:
            return blog_settings.SETTINGS_CACHE_TTL
        return self._ttl

    def is_fresh(self, now=None):
        if self.value is None or self.fetched_at is None:
            return False
        if now is None:
            now = self.clock()
        return now - self.fetched_at < self.ttl

    def get(self, force_refresh=False):
        """
        Return the cached settings, refetching when stale or forced.

        A database failure yields ``default_settings()``; the defaults are
        not cached, so the next call tries the database again.
        """
        now = self.clock()
        if not force_refresh and self.is_fresh(now):
            return self.value

        try:
            value = self.fetch()
        except DatabaseError:
            logger.warning("Could not load site settings; using defaults", exc_info=True)
            return default_settings()

        self.value = value
        self.fetched_at = now
        return value

    def clear(self):
        """Forget the cached value so the next read refetches."""
        self.value = None
        self.fetched_at = None


settings_cache = SettingsCache()


def get_settings(force_refresh=False):
    return settings_cache.get(force_refresh=force_refresh)


def clear_cache():
    settings_cache.clear()
