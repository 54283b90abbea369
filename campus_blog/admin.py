"""
Django admin configuration for campus_blog.

Status changes made from the admin go through the workflow, so the same
permission rules, slug assignment and notifications apply.
"""
from django.contrib import admin, messages

from . import workflow
from .exceptions import BlogError
from .models import (
    AuthorProfile,
    Comment,
    Notification,
    Post,
    PostRevision,
    SiteSettings,
)
from .permissions import Actor


class PostRevisionInline(admin.TabularInline):
    """Read-only edit history of a post."""

    model = PostRevision
    extra = 0
    can_delete = False
    fields = ["version", "title", "changes", "edited_by", "edited_at", "is_admin_edit"]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = [
        "title_preview",
        "author",
        "status",
        "category",
        "slug",
        "published_at",
        "created_at",
    ]
    list_filter = ["status", "category", "created_at"]
    search_fields = ["title", "body", "author__username", "slug"]
    raw_id_fields = ["author"]
    date_hierarchy = "created_at"
    inlines = [PostRevisionInline]
    readonly_fields = [
        "status",
        "slug",
        "rejection_reason",
        "published_at",
        "last_edited_by",
        "created_at",
        "updated_at",
    ]

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "body", "excerpt", "category", "author")
        }),
        ("Review", {
            "fields": ("status", "rejection_reason", "published_at", "last_edited_by"),
        }),
        ("Metadata", {
            "fields": ("created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["approve_posts", "reject_posts", "force_publish_posts", "assign_slugs"]

    def title_preview(self, obj):
        """Truncated title for list display."""
        return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title

    title_preview.short_description = "Title"

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return self.readonly_fields
        return self.readonly_fields + ["author"]

    def save_model(self, request, obj, form, change):
        """Content edits go through the workflow so they leave a revision."""
        if not change:
            super().save_model(request, obj, form, change)
            return

        stored = Post.objects.get(pk=obj.pk)
        changes = {
            field: getattr(obj, field)
            for field in workflow.EDITABLE_FIELDS
            if field in form.changed_data
        }
        try:
            workflow.edit_post(Actor.from_user(request.user), stored, changes)
        except BlogError as exc:
            self.message_user(request, exc.detail, level=messages.ERROR)

    def _run(self, request, queryset, label, operation):
        actor = Actor.from_user(request.user)
        done = 0
        for post in queryset:
            try:
                if operation(post, actor):
                    done += 1
            except BlogError as exc:
                self.message_user(request, f"{post}: {exc.detail}", level=messages.ERROR)
        self.message_user(request, f"{done} posts {label}.")

    @admin.action(description="Approve selected posts")
    def approve_posts(self, request, queryset):
        self._run(request, queryset, "approved", workflow.approve)

    @admin.action(description="Reject selected posts")
    def reject_posts(self, request, queryset):
        self._run(request, queryset, "rejected", workflow.reject)

    @admin.action(description="Publish selected posts without review")
    def force_publish_posts(self, request, queryset):
        self._run(request, queryset, "published", workflow.force_publish)

    @admin.action(description="Assign slugs to selected posts")
    def assign_slugs(self, request, queryset):
        self._run(request, queryset.filter(slug__isnull=True), "given a slug", workflow.assign_slug)


@admin.register(AuthorProfile)
class AuthorProfileAdmin(admin.ModelAdmin):
    list_display = ["user", "role", "department", "is_approved", "created_at"]
    list_filter = ["role", "is_approved", "department"]
    search_fields = ["user__username", "user__email", "department"]
    raw_id_fields = ["user"]
    actions = ["approve_profiles"]

    @admin.action(description="Approve selected accounts")
    def approve_profiles(self, request, queryset):
        count = 0
        for profile in queryset.filter(is_approved=False):
            profile.approve()
            count += 1
        self.message_user(request, f"{count} accounts approved.")


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = [
        "preview",
        "author",
        "post",
        "is_approved",
        "created_at",
    ]
    list_filter = ["is_approved", "created_at"]
    search_fields = ["content", "author__username", "post__title"]
    raw_id_fields = ["post", "author", "parent"]
    readonly_fields = ["created_at", "updated_at"]
    actions = ["approve_comments", "reject_comments"]

    @admin.action(description="Approve selected comments")
    def approve_comments(self, request, queryset):
        queryset.update(is_approved=True)
        self.message_user(request, f"{queryset.count()} comments approved.")

    @admin.action(description="Reject selected comments")
    def reject_comments(self, request, queryset):
        queryset.update(is_approved=False)
        self.message_user(request, f"{queryset.count()} comments rejected.")


@admin.register(SiteSettings)
class SiteSettingsAdmin(admin.ModelAdmin):
    list_display = [
        "site_name",
        "maintenance_mode",
        "allow_registration",
        "require_approval",
        "auto_publish",
        "updated_at",
    ]
    readonly_fields = ["updated_by", "updated_at"]

    def has_add_permission(self, request):
        return not SiteSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        obj.updated_by = request.user
        super().save_model(request, obj, form, change)


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["recipient", "type", "title", "is_read", "created_at"]
    list_filter = ["type", "is_read", "created_at"]
    search_fields = ["recipient__username", "title", "message"]
    raw_id_fields = ["recipient", "sender", "post", "comment"]
