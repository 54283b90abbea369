"""
Author profiles for campus_blog.

Role, approval and department live next to whatever user model the host
project uses.
"""
from django.conf import settings
from django.db import models


class Role(models.TextChoices):
    AUTHOR = "author", "Author"
    ADMIN = "admin", "Administrator"


class AuthorProfile(models.Model):
    """
    Blog-specific data for a user account.

    Unapproved members cannot publish content or moderate.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_profile",
    )
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.AUTHOR)
    is_approved = models.BooleanField(default=False, db_index=True)
    department = models.CharField(max_length=150, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["role"]),
        ]

    def __str__(self):
        return f"{self.user} ({self.get_role_display()})"

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    def approve(self):
        """Approve the account so it can publish and comment."""
        self.is_approved = True
        self.save(update_fields=["is_approved", "updated_at"])
