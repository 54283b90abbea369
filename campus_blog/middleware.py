"""
Maintenance-mode middleware for campus_blog.

Add to MIDDLEWARE after AuthenticationMiddleware:

    "campus_blog.middleware.MaintenanceModeMiddleware",
"""
from django.http import JsonResponse
from django.urls import NoReverseMatch, reverse

from .conf import blog_settings
from .permissions import Actor, can_moderate
from .site_settings import get_settings


class MaintenanceModeMiddleware:
    """Answer 503 to everyone but moderators while maintenance mode is on."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        site = get_settings()
        if site.maintenance_mode and not self._is_exempt(request):
            return JsonResponse(
                {
                    "error": site.maintenance_message,
                    "code": "maintenance",
                    "maintenance_mode": True,
                },
                status=503,
            )
        return self.get_response(request)

    def _is_exempt(self, request):
        path = request.path
        if any(path.startswith(prefix) for prefix in blog_settings.MAINTENANCE_EXEMPT_PATHS):
            return True
        try:
            if path == reverse("campus_blog:maintenance_status"):
                return True
        except NoReverseMatch:
            pass
        user = getattr(request, "user", None)
        return can_moderate(Actor.from_user(user))
