"""URL configuration for the registration app.

Mount under the dashboard prefix in the host project; the Stripe webhook
lives in :mod:`aisf_forum.registration.webhook_urls`::

    urlpatterns = [
        path("tickets/", include("aisf_forum.registration.urls")),
    ]
"""

from django.urls import path

from aisf_forum.registration.views import (
    OrderCancellationInfoView,
    OrderCancelView,
    RegistrationCancellationInfoView,
    RegistrationCancelView,
)

app_name = "registration"

urlpatterns = [
    path("orders/<int:pk>/cancel/", OrderCancelView.as_view(), name="order-cancel"),
    path("orders/<int:pk>/cancellation/", OrderCancellationInfoView.as_view(), name="order-cancellation-info"),
    path("tickets/<int:pk>/cancel/", RegistrationCancelView.as_view(), name="registration-cancel"),
    path(
        "tickets/<int:pk>/cancellation/",
        RegistrationCancellationInfoView.as_view(),
        name="registration-cancellation-info",
    ),
]
