"""
Post and PostRevision models for campus_blog.
"""
from django.conf import settings
from django.db import models
from django.urls import reverse
from django.utils import timezone

from ..conf import blog_settings


class PostStatus(models.TextChoices):
    """Review lifecycle of a post.

    Only ``campus_blog.workflow`` moves a post between these states.
    """

    DRAFT = "draft", "Draft"
    PENDING = "pending", "Pending review"
    PUBLISHED = "published", "Published"
    REJECTED = "rejected", "Rejected"


class PostQuerySet(models.QuerySet):
    def published(self):
        return self.filter(status=PostStatus.PUBLISHED)

    def pending(self):
        return self.filter(status=PostStatus.PENDING)

    def by_author(self, user_id):
        return self.filter(author_id=user_id)


class Post(models.Model):
    """
    Blog post submitted by a university member.

    Supports:
    - Review workflow (draft, pending, published, rejected)
    - Human-readable slugs assigned on publication
    - Append-only edit history (see PostRevision)
    """

    CATEGORY_CHOICES = blog_settings.CATEGORY_CHOICES

    # Content
    title = models.CharField(max_length=blog_settings.TITLE_MAX_LENGTH)
    slug = models.SlugField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
        help_text="Assigned when the post is first published",
    )
    body = models.TextField()
    excerpt = models.CharField(
        max_length=blog_settings.EXCERPT_MAX_LENGTH,
        blank=True,
    )
    category = models.CharField(max_length=50, choices=CATEGORY_CHOICES)

    # Author - uses Django's AUTH_USER_MODEL
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="campus_posts",
    )
    last_edited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )

    # Review
    status = models.CharField(
        max_length=20,
        choices=PostStatus.choices,
        default=PostStatus.DRAFT,
        db_index=True,
    )
    rejection_reason = models.TextField(blank=True)
    published_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="When post was first published",
    )

    # Engagement stats
    views = models.PositiveIntegerField(default=0)

    # Timestamps
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PostQuerySet.as_manager()

    class Meta:
        ordering = ["-published_at", "-created_at"]
        indexes = [
            models.Index(fields=["status", "-published_at"]),
            models.Index(fields=["category", "status"]),
        ]

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        if self.slug:
            return reverse("campus_blog:post_detail_slug", kwargs={"slug": self.slug})
        return reverse("campus_blog:post_detail", kwargs={"pk": self.pk})

    @property
    def preview(self):
        """Return the excerpt, or a truncated body for listings."""
        if self.excerpt:
            return self.excerpt
        if len(self.body) > 280:
            return self.body[:280] + "..."
        return self.body

    @property
    def is_published(self):
        return self.status == PostStatus.PUBLISHED

    def increment_view_count(self):
        """Increment view count atomically."""
        Post.objects.filter(pk=self.pk).update(views=models.F("views") + 1)

    def related_posts(self, limit=4):
        """Other published posts in the same category, newest first."""
        return (
            Post.objects.published()
            .filter(category=self.category)
            .exclude(pk=self.pk)
            .select_related("author")[:limit]
        )

    def snapshot(self):
        """Return the editable content of the post as a dict."""
        return {
            "title": self.title,
            "body": self.body,
            "excerpt": self.excerpt,
            "category": self.category,
        }


class PostRevision(models.Model):
    """
    Edit history for posts.

    Stores the content of a post as it was before an edit. Rows are only
    ever appended.
    """

    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name="revisions",
    )
    version = models.PositiveIntegerField()
    title = models.CharField(max_length=blog_settings.TITLE_MAX_LENGTH)
    body = models.TextField()
    excerpt = models.CharField(max_length=blog_settings.EXCERPT_MAX_LENGTH, blank=True)
    category = models.CharField(max_length=50)
    changes = models.CharField(max_length=255, blank=True)
    is_admin_edit = models.BooleanField(default=False)
    edited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    edited_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["post", "version"]
        unique_together = ["post", "version"]

    def __str__(self):
        return f"Revision {self.version} of post {self.post_id}"

    @classmethod
    def record(cls, post, edited_by_id, changed_fields, is_admin_edit=False):
        """
        Append a snapshot of ``post`` as currently stored.

        Call before applying new content so the row holds the pre-edit
        version.
        """
        version = cls.objects.filter(post=post).count() + 1
        previous = Post.objects.get(pk=post.pk).snapshot()
        return cls.objects.create(
            post=post,
            version=version,
            edited_by_id=edited_by_id,
            changes="Updated: " + ", ".join(changed_fields),
            is_admin_edit=is_admin_edit,
            **previous,
        )
