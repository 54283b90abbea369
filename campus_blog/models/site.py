"""
Site-wide settings singleton for campus_blog.
"""
from django.conf import settings
from django.db import models
from django.utils import timezone

DEFAULT_MAINTENANCE_MESSAGE = (
    "We are currently performing scheduled maintenance. Please check back soon."
)


class SiteSettings(models.Model):
    """
    Global flags owned by the whole process.

    There is a single row; ``load()`` creates it with defaults on first use.
    Read it through ``campus_blog.site_settings.get_settings()`` so the
    cached copy is used.
    """

    SINGLETON_PK = 1

    EDITABLE_FIELDS = [
        "site_name",
        "admin_email",
        "maintenance_mode",
        "maintenance_message",
        "allow_registration",
        "require_approval",
        "auto_publish",
    ]

    site_name = models.CharField(max_length=150, default="University Insights")
    admin_email = models.EmailField(blank=True)

    # User management
    allow_registration = models.BooleanField(default=True)
    require_approval = models.BooleanField(default=True)

    # Content
    auto_publish = models.BooleanField(default=False)

    # System
    maintenance_mode = models.BooleanField(default=False)
    maintenance_message = models.TextField(default=DEFAULT_MAINTENANCE_MESSAGE)

    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = "Site Settings"
        verbose_name_plural = "Site Settings"

    def __str__(self):
        return self.site_name

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        """Return the settings row, creating it with defaults if absent."""
        obj, _ = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        return obj

    @classmethod
    def update(cls, changes, user=None):
        """
        Apply ``changes`` (field name -> value) to the settings row.

        Unknown field names are ignored. Saving fires ``post_save``, which
        clears the settings cache.
        """
        obj = cls.load()
        for field, value in changes.items():
            if field in cls.EDITABLE_FIELDS:
                setattr(obj, field, value)
        obj.updated_at = timezone.now()
        obj.updated_by = user
        obj.save()
        return obj

    def as_dict(self):
        return {field: getattr(self, field) for field in self.EDITABLE_FIELDS}
