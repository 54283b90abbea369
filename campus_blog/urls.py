"""
URL configuration for campus_blog.

Include in your project urls.py:

    path('blog/', include('campus_blog.urls')),
"""
from django.urls import path

from . import views

app_name = "campus_blog"

urlpatterns = [
    # Post list and creation
    path("", views.PostListView.as_view(), name="post_list"),
    path("post/new/", views.PostCreateView.as_view(), name="post_create"),
    path("search/", views.VisiblePostSearchView.as_view(), name="post_search"),
    path("author/<int:pk>/", views.AuthorPostListView.as_view(), name="author_posts"),

    # Post detail; slugs can be all digits, so they need their own prefix
    path("post/<int:pk>/", views.PostDetailView.as_view(), name="post_detail"),
    path("p/<slug:slug>/", views.PostDetailView.as_view(), name="post_detail_slug"),

    # Editing and workflow
    path("post/<int:pk>/edit/", views.PostUpdateView.as_view(), name="post_update"),
    path("post/<int:pk>/submit/", views.PostSubmitView.as_view(), name="post_submit"),
    path("post/<int:pk>/review/", views.PostReviewRequestView.as_view(), name="post_review"),
    path("post/<int:pk>/moderate/", views.PostModerateView.as_view(), name="post_moderate"),

    # Interactions
    path("post/<int:pk>/comment/", views.CommentCreateView.as_view(), name="comment_create"),

    # Per-user and admin views
    path("dashboard/", views.DashboardView.as_view(), name="dashboard"),
    path("moderation/", views.ModerationQueueView.as_view(), name="moderation_queue"),
    path("notifications/", views.NotificationListView.as_view(), name="notifications"),
    path("settings/", views.SiteSettingsView.as_view(), name="site_settings"),

    # Public
    path("maintenance/", views.MaintenanceStatusView.as_view(), name="maintenance_status"),
    path("register/", views.RegisterView.as_view(), name="register"),
]
