"""URL configuration for the applications app.

Mount under the dashboard prefix in the host project::

    urlpatterns = [
        path("applications/", include("aisf_forum.applications.urls")),
    ]
"""

from django.urls import path

from aisf_forum.applications.views import ApplicationDeleteView, ProposalUpdateView, ScholarshipUpdateView

app_name = "applications"

urlpatterns = [
    path("speaker/<int:pk>/edit/", ProposalUpdateView.as_view(), name="proposal-update"),
    path("scholarship/<int:pk>/edit/", ScholarshipUpdateView.as_view(), name="scholarship-update"),
    path("<str:kind>/<int:pk>/delete/", ApplicationDeleteView.as_view(), name="application-delete"),
]
