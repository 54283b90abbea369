"""
Management command to give published posts without a slug a unique one.

Usage:
    python manage.py fix_slugs
    python manage.py fix_slugs --dry-run
"""

import logging

from django.core.management.base import BaseCommand
from django.db.models import Q

from campus_blog.exceptions import SlugConflict
from campus_blog.models import Post
from campus_blog.slugs import save_with_unique_slug, slug_base_for

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Assign unique slugs to published posts that are missing one."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List the posts that would be fixed without saving",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]

        posts = list(
            Post.objects.published()
            .filter(Q(slug__isnull=True) | Q(slug=""))
            .order_by("published_at", "pk")
        )

        if not posts:
            self.stdout.write(self.style.SUCCESS("No published posts are missing a slug."))
            return

        self.stdout.write(f"Found {len(posts)} published post(s) without a slug")

        fixed = 0
        for post in posts:
            if dry_run:
                self.stdout.write(f"  Would fix: {post.pk} ({slug_base_for(post)})")
                continue
            post.slug = None
            try:
                slug = save_with_unique_slug(post, update_fields=["updated_at"])
            except SlugConflict as exc:
                logger.warning("Could not fix slug for post %s: %s", post.pk, exc.detail)
                self.stdout.write(self.style.ERROR(f"  Failed: {post.pk} ({exc.detail})"))
                continue
            fixed += 1
            self.stdout.write(f"  Fixed: {post.pk} -> {slug}")

        if not dry_run:
            self.stdout.write(self.style.SUCCESS(f"Assigned {fixed} slug(s)."))
