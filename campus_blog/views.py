"""
JSON views for campus_blog.

Errors raised by the core are answered with their status code and a body
of the form ``{"error": ..., "code": ...}``.
"""
import json
import logging

from django.contrib.auth import get_user_model
from django.core.paginator import Paginator
from django.db import IntegrityError, OperationalError, transaction
from django.http import JsonResponse
from django.views import View

from . import workflow
from .conf import blog_settings
from .exceptions import (
    AuthorizationDenied,
    BlogError,
    ConflictError,
    NotFound,
    UpstreamUnavailable,
    ValidationError,
)
from .models import AuthorProfile, Comment, Notification, Post, PostStatus, SiteSettings
from .permissions import (
    Actor,
    can_edit,
    can_moderate,
    can_view,
    is_signed_in,
    require,
    visible_posts,
)
from .site_settings import get_settings

logger = logging.getLogger(__name__)

User = get_user_model()


def serialize_post(post, full=False):
    data = {
        "id": post.pk,
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.preview,
        "category": post.category,
        "status": post.status,
        "author": {
            "id": post.author_id,
            "name": post.author.get_full_name() or post.author.get_username(),
        },
        "published_at": post.published_at.isoformat() if post.published_at else None,
        "created_at": post.created_at.isoformat(),
        "updated_at": post.updated_at.isoformat() if post.updated_at else None,
        "views": post.views,
    }
    if full:
        data["body"] = post.body
        data["rejection_reason"] = post.rejection_reason
    return data


def serialize_comment(comment):
    return {
        "id": comment.pk,
        "content": comment.content,
        "author": comment.author.get_username(),
        "parent_id": comment.parent_id,
        "is_approved": comment.is_approved,
        "created_at": comment.created_at.isoformat(),
    }


class BlogApiView(View):
    """Base view: resolves the actor, parses payloads and renders errors."""

    def dispatch(self, request, *args, **kwargs):
        self.actor = Actor.from_user(getattr(request, "user", None))
        try:
            return super().dispatch(request, *args, **kwargs)
        except OperationalError:
            logger.exception("Database unavailable while handling %s", request.path)
            return self.error_response(UpstreamUnavailable("Service temporarily unavailable."))
        except BlogError as exc:
            return self.error_response(exc)

    def error_response(self, exc):
        return JsonResponse({"error": exc.detail, "code": exc.code}, status=exc.status_code)

    def get_payload(self):
        """Return the request body as a dict, from JSON or form data."""
        if self.request.content_type == "application/json":
            try:
                payload = json.loads(self.request.body or b"{}")
            except ValueError:
                raise ValidationError("Malformed JSON body.")
            if not isinstance(payload, dict):
                raise ValidationError("JSON body must be an object.")
            return payload
        return self.request.POST.dict()

    def get_post(self, pk=None, slug=None):
        queryset = Post.objects.select_related("author")
        lookup = {"slug": slug} if slug is not None else {"pk": pk}
        post = queryset.filter(**lookup).first()
        if post is None:
            raise NotFound("Post not found.")
        return post


def _flag(value):
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("1", "true", "yes", "on")


def paginated_posts(request, queryset):
    """Return one page of ``queryset`` as response data, using ``?page=``."""
    paginator = Paginator(queryset, blog_settings.POSTS_PER_PAGE)
    page = paginator.get_page(request.GET.get("page"))
    return {
        "posts": [serialize_post(post) for post in page],
        "pagination": {
            "current": page.number,
            "total": paginator.num_pages,
            "has_next": page.has_next(),
            "has_prev": page.has_previous(),
            "total_items": paginator.count,
        },
    }


class PostListView(BlogApiView):
    """List published posts with pagination."""

    def get(self, request):
        queryset = Post.objects.published().select_related("author")
        category = request.GET.get("category")
        if category:
            queryset = queryset.filter(category=category)
        return JsonResponse(paginated_posts(request, queryset))


class AuthorPostListView(BlogApiView):
    """List the published posts of one author."""

    def get(self, request, pk):
        author = User.objects.filter(pk=pk).first()
        if author is None:
            raise NotFound("Author not found.")
        queryset = Post.objects.published().by_author(author.pk).select_related("author")
        profile = AuthorProfile.objects.filter(user=author).first()
        data = paginated_posts(request, queryset)
        data["author"] = {
            "id": author.pk,
            "name": author.get_full_name() or author.get_username(),
            "department": profile.department if profile else "",
        }
        return JsonResponse(data)


class PostDetailView(BlogApiView):
    """Display a single post with its approved comments."""

    def get(self, request, pk=None, slug=None):
        post = self.get_post(pk=pk, slug=slug)

        # Hidden posts are reported as missing
        if not can_view(self.actor, post):
            raise NotFound("Post not found.")

        post.increment_view_count()
        post.refresh_from_db(fields=["views"])

        comments = []
        for comment in post.comments.filter(is_approved=True, parent=None).select_related("author"):
            entry = serialize_comment(comment)
            entry["replies"] = [serialize_comment(reply) for reply in comment.get_visible_replies()]
            comments.append(entry)

        return JsonResponse({
            "post": serialize_post(post, full=True),
            "comments": comments,
            "related_posts": [serialize_post(related) for related in post.related_posts()],
            "permissions": {
                "can_edit": can_edit(self.actor, post),
                "can_moderate": can_moderate(self.actor),
            },
        })


class PostCreateView(BlogApiView):
    """Create a new post."""

    def post(self, request):
        payload = self.get_payload()
        post = workflow.create_post(
            self.actor,
            title=payload.get("title"),
            body=payload.get("body"),
            category=payload.get("category"),
            excerpt=payload.get("excerpt", ""),
            submit=_flag(payload.get("submit", True)),
        )
        if post.status == PostStatus.PUBLISHED:
            message = "Post published successfully!"
        elif post.status == PostStatus.PENDING:
            message = "Post submitted for review!"
        else:
            message = "Draft saved."
        return JsonResponse(
            {"post": serialize_post(post, full=True), "message": message},
            status=201,
        )


class PostUpdateView(BlogApiView):
    """Edit an existing post."""

    def post(self, request, pk):
        post = self.get_post(pk=pk)
        payload = self.get_payload()
        submit_for_review = _flag(payload.pop("submit_for_review", False))
        changes = {field: payload[field] for field in workflow.EDITABLE_FIELDS if field in payload}
        changed = workflow.edit_post(self.actor, post, changes, submit_for_review=submit_for_review)
        return JsonResponse({
            "post": serialize_post(post, full=True),
            "changes": changed,
            "message": "Post updated successfully",
        })


class PostTransitionView(BlogApiView):
    """Run one workflow action on a post."""

    action = None

    def get_action(self, payload):
        return self.action

    def post(self, request, pk):
        post = self.get_post(pk=pk)
        payload = self.get_payload()
        action = self.get_action(payload)
        changed = workflow.perform(action, post, self.actor, reason=payload.get("reason", ""))
        return JsonResponse({
            "post": serialize_post(post, full=True),
            "changed": changed,
        })


class PostSubmitView(PostTransitionView):
    action = "submit"


class PostReviewRequestView(PostTransitionView):
    action = "request_review"


class PostModerateView(PostTransitionView):
    """Approve, reject or force-publish a post."""

    ACTIONS = {
        "approve": "approve",
        "reject": "reject",
        "publish": "force_publish",
    }

    def get_action(self, payload):
        try:
            return self.ACTIONS[payload.get("action")]
        except KeyError:
            raise ValidationError("Action must be one of: approve, reject, publish.")


class CommentCreateView(BlogApiView):
    """Add a comment to a post."""

    def post(self, request, pk):
        post = self.get_post(pk=pk)
        payload = self.get_payload()
        comment = Comment.submit(
            post,
            self.actor,
            payload.get("content", ""),
            parent_id=payload.get("parent_id") or None,
        )
        return JsonResponse(
            {"comment": serialize_comment(comment), "message": "Comment posted successfully"},
            status=201,
        )


class DashboardView(BlogApiView):
    """The actor's own posts in every status."""

    def get(self, request):
        require(is_signed_in, self.actor)
        posts = Post.objects.by_author(self.actor.id).select_related("author")
        return JsonResponse({"posts": [serialize_post(post, full=True) for post in posts]})


class ModerationQueueView(BlogApiView):
    """Posts waiting for review."""

    def get(self, request):
        require(can_moderate, self.actor)
        posts = Post.objects.pending().select_related("author").order_by("created_at")
        return JsonResponse({"posts": [serialize_post(post, full=True) for post in posts]})


class VisiblePostSearchView(BlogApiView):
    """Title search across every post the actor may see."""

    def get(self, request):
        query = request.GET.get("q", "").strip()
        if not query:
            raise ValidationError("Search query is required.")
        posts = visible_posts(self.actor, Post.objects.select_related("author"))
        posts = posts.filter(title__icontains=query)[:blog_settings.POSTS_PER_PAGE]
        return JsonResponse({"posts": [serialize_post(post) for post in posts]})


class NotificationListView(BlogApiView):
    """List the actor's notifications, or mark them all read."""

    def get(self, request):
        require(is_signed_in, self.actor)
        notifications = Notification.objects.filter(recipient_id=self.actor.id)[:50]
        return JsonResponse({
            "notifications": [
                {
                    "id": notification.pk,
                    "type": notification.type,
                    "title": notification.title,
                    "message": notification.message,
                    "post_id": notification.post_id,
                    "is_read": notification.is_read,
                    "created_at": notification.created_at.isoformat(),
                }
                for notification in notifications
            ],
            "unread": Notification.objects.filter(
                recipient_id=self.actor.id, is_read=False
            ).count(),
        })

    def post(self, request):
        require(is_signed_in, self.actor)
        updated = Notification.objects.filter(
            recipient_id=self.actor.id, is_read=False
        ).update(is_read=True)
        return JsonResponse({"marked_read": updated})


class SiteSettingsView(BlogApiView):
    """Read or update the site settings. Moderators only."""

    BOOLEAN_FIELDS = {
        "maintenance_mode",
        "allow_registration",
        "require_approval",
        "auto_publish",
    }

    def get(self, request):
        require(can_moderate, self.actor)
        return JsonResponse({"settings": get_settings().as_dict()})

    def post(self, request):
        require(can_moderate, self.actor)
        payload = self.get_payload()
        changes = {}
        for field in SiteSettings.EDITABLE_FIELDS:
            if field in payload:
                value = payload[field]
                changes[field] = _flag(value) if field in self.BOOLEAN_FIELDS else value
        site = SiteSettings.update(changes, user=request.user)
        logger.info("Site settings updated by user %s: %s", self.actor.id, sorted(changes))
        return JsonResponse({"settings": site.as_dict(), "message": "Settings updated"})


class MaintenanceStatusView(BlogApiView):
    """Public maintenance flag and message."""

    def get(self, request):
        site = get_settings()
        return JsonResponse({
            "maintenance_mode": site.maintenance_mode,
            "maintenance_message": site.maintenance_message,
        })


class RegisterView(BlogApiView):
    """Create an account, honouring the registration settings."""

    def post(self, request):
        site = get_settings()
        if not site.allow_registration:
            raise AuthorizationDenied(
                "Registration is currently closed.", code="registration_closed"
            )

        payload = self.get_payload()
        email = (payload.get("email") or "").strip().lower()
        password = payload.get("password") or ""
        name = (payload.get("name") or "").strip()
        department = (payload.get("department") or "").strip()

        if not email or not name or not department:
            raise ValidationError("Name, email and department are required.")
        if len(password) < 6:
            raise ValidationError("Password must be at least 6 characters.")
        if User.objects.filter(email__iexact=email).exists():
            raise ConflictError("An account with this email already exists.", code="email_taken")

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=email,
                    email=email,
                    password=password,
                    first_name=name,
                )
                profile = AuthorProfile.objects.create(
                    user=user,
                    department=department,
                    is_approved=not site.require_approval,
                )
        except IntegrityError:
            # Another request registered the same email first
            raise ConflictError("An account with this email already exists.", code="email_taken")

        if profile.is_approved:
            message = "Registration successful. You can sign in now."
        else:
            message = "Registration successful. Your account is awaiting approval."
        return JsonResponse(
            {"id": user.pk, "is_approved": profile.is_approved, "message": message},
            status=201,
        )
