"""URL configuration for the Stripe webhook endpoint.

Kept apart from the dashboard URLs so the endpoint Stripe posts to does not
move with the dashboard prefix.  Mount it at the site level::

    urlpatterns = [
        path("webhooks/", include("aisf_forum.registration.webhook_urls")),
    ]

which serves the endpoint at ``/webhooks/stripe/``.
"""

from django.urls import path

from aisf_forum.registration.webhooks import stripe_webhook

app_name = "webhooks"

urlpatterns = [
    path("stripe/", stripe_webhook, name="stripe"),
]
