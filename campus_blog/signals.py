"""Signal handlers for campus_blog."""
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import SiteSettings
from .site_settings import clear_cache


@receiver(post_save, sender=SiteSettings)
@receiver(post_delete, sender=SiteSettings)
def invalidate_settings_cache(sender, **kwargs):
    """Drop the cached settings whenever the row changes."""
    clear_cache()
