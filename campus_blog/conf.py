"""
Configuration settings for campus_blog.

Override these in your Django settings.py:

    CAMPUS_BLOG = {
        'SLUG_MAX_LENGTH': 50,
        'SETTINGS_CACHE_TTL': 300,
        'AUTO_APPROVE_COMMENTS': True,
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    # Slugs
    "SLUG_MAX_LENGTH": 50,
    "SLUG_FALLBACK": "untitled-post",
    "SLUG_MAX_ATTEMPTS": 5,

    # Posts
    "TITLE_MAX_LENGTH": 200,
    "EXCERPT_MAX_LENGTH": 300,
    "POSTS_PER_PAGE": 10,
    "CATEGORY_CHOICES": [
        ("research", "Research"),
        ("achievements", "Achievements"),
        ("events", "Events"),
        ("patents", "Patents"),
        ("case-studies", "Case Studies"),
        ("blogs", "Blogs"),
        ("industry-collaborations", "Industry Collaborations"),
    ],

    # Comments
    "COMMENT_MAX_LENGTH": 1000,
    "AUTO_APPROVE_COMMENTS": True,

    # Site settings cache, in seconds
    "SETTINGS_CACHE_TTL": 300,

    # Paths that stay reachable while maintenance mode is on
    "MAINTENANCE_EXEMPT_PATHS": ["/admin/"],
}


class CampusBlogSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from campus_blog.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid campus_blog setting: {name}")

        user_settings = getattr(settings, "CAMPUS_BLOG", {})
        return user_settings.get(name, DEFAULTS[name])

    @property
    def CATEGORY_VALUES(self):
        """Return the accepted category keys."""
        return [value for value, _label in self.CATEGORY_CHOICES]


blog_settings = CampusBlogSettings()
