"""URL configuration for the accounts app.

Mount under the dashboard profile prefix in the host project::

    urlpatterns = [
        path("dashboard/profile/", include("aisf_forum.accounts.urls")),
    ]
"""

from django.urls import path

from aisf_forum.accounts.views import ProfileUpdateView

app_name = "accounts"

urlpatterns = [
    path("edit/", ProfileUpdateView.as_view(), name="profile-update"),
]
