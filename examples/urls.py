"""URL configuration for the forum development server."""

from django.contrib import admin
from django.contrib.auth import views as auth_views
from django.urls import include, path
from django.views.generic import RedirectView

urlpatterns = [
    path("", RedirectView.as_view(pattern_name="admin:index"), name="root"),
    path("admin/", admin.site.urls),
    path("accounts/login/", auth_views.LoginView.as_view(template_name="admin/login.html"), name="login"),
    path("accounts/logout/", auth_views.LogoutView.as_view(), name="logout"),
    path("dashboard/tickets/", include("aisf_forum.registration.urls")),
    path("dashboard/applications/", include("aisf_forum.applications.urls")),
    path("dashboard/profile/", include("aisf_forum.accounts.urls")),
    path("webhooks/", include("aisf_forum.registration.webhook_urls")),
]
