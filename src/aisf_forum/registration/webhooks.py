"""Stripe webhook handling for the registration app.

Provides a registry-based dispatch system for Stripe webhook events.  Each
event kind (e.g. ``checkout.session.completed``) maps to a handler class that
wraps idempotent processing and error capture.

The ``stripe_webhook`` view verifies the event signature with the configured
webhook secret, deduplicates by Stripe event ID, and delegates to the
registered handler.

The view is routed by :mod:`aisf_forum.registration.webhook_urls`.
"""

import logging
import traceback
from typing import TYPE_CHECKING

import stripe
from django.http import HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from aisf_forum.registration.models import EventProcessingException, Order, StripeEvent
from aisf_forum.registration.services.completion import CompletionService
from aisf_forum.settings import get_config

if TYPE_CHECKING:
    from django.http import HttpRequest

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class WebhookRegistry:
    """Registry mapping Stripe event kinds to handler classes."""

    def __init__(self) -> None:
        self._registry: dict[str, type["Webhook"]] = {}

    def register(self, kind: str, handler_class: type["Webhook"]) -> None:
        """Register a handler class for a Stripe event kind."""
        self._registry[kind] = handler_class

    def get(self, kind: str) -> type["Webhook"] | None:
        """Return the handler class for *kind*, or ``None``."""
        return self._registry.get(kind)

    def keys(self) -> list[str]:
        """Return all registered event kinds."""
        return list(self._registry.keys())


registry = WebhookRegistry()


def event_data_object(payload: object) -> dict[str, object]:
    """Return ``payload["data"]["object"]`` when every level is a dict, else ``{}``."""
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, dict):
            obj = data.get("object")
            if isinstance(obj, dict):
                return obj
    return {}


# ---------------------------------------------------------------------------
# Base handler
# ---------------------------------------------------------------------------


class Webhook:
    """Base class for Stripe webhook event handlers.

    Subclasses set ``name`` to the event kind they handle and implement
    ``process_webhook()``.  ``process()`` skips events that were already
    handled and records a traceback on failure.

    Attributes:
        name: The Stripe event kind this handler processes.
        event: The ``StripeEvent`` being handled.
    """

    name: str = ""

    def __init__(self, event: StripeEvent) -> None:
        self.event = event

    def process(self) -> None:
        """Run the handler, mark the event processed, and capture failures."""
        if self.event.processed:
            logger.info("Event %s already processed, skipping", self.event.stripe_id)
            return

        try:
            self.process_webhook()
            self.event.processed = True
            self.event.save(update_fields=["processed"])
        except Exception:
            self.log_exception()
            raise

    def process_webhook(self) -> None:
        """Implement event-specific processing.

        Raises:
            NotImplementedError: Subclasses must override this method.
        """
        raise NotImplementedError

    def log_exception(self) -> None:
        """Store the current traceback as an ``EventProcessingException``."""
        tb = traceback.format_exc()
        logger.error("Error processing webhook %s (event %s): %s", self.name, self.event.stripe_id, tb)
        EventProcessingException.objects.create(
            event=self.event,
            data=str(self.event.payload),
            message=str(tb)[:500],
            traceback=tb,
        )

    @property
    def data_object(self) -> dict[str, object]:
        """The ``data.object`` dict of the event payload, or ``{}``."""
        return event_data_object(self.event.payload)

    def order_for_session(self) -> Order | None:
        """Return the order created for the event's checkout session, if any."""
        session_id = str(self.data_object.get("id", "") or "")
        if not session_id:
            return None
        order = Order.objects.filter(stripe_session_id=session_id).first()
        if order is None:
            logger.warning("No order found for checkout session %s", session_id)
        return order


# ---------------------------------------------------------------------------
# Concrete handlers
# ---------------------------------------------------------------------------


class CheckoutSessionCompletedWebhook(Webhook):
    """Handles ``checkout.session.completed`` by completing the matching order."""

    name = "checkout.session.completed"

    def process_webhook(self) -> None:
        order = self.order_for_session()
        if order is None:
            return
        payment_intent = self.data_object.get("payment_intent")
        CompletionService.complete_order(order, str(payment_intent) if payment_intent else None)


class CheckoutSessionExpiredWebhook(Webhook):
    """Handles ``checkout.session.expired`` by cancelling the unpaid order."""

    name = "checkout.session.expired"

    def process_webhook(self) -> None:
        order = self.order_for_session()
        if order is None:
            return
        CompletionService.expire_checkout(order)


class PaymentIntentPaymentFailedWebhook(Webhook):
    """Handles ``payment_intent.payment_failed``.

    The order stays ``pending`` so the purchaser can retry from the same
    checkout session; the failure reason is logged for support.
    """

    name = "payment_intent.payment_failed"

    def process_webhook(self) -> None:
        intent = self.data_object
        error = intent.get("last_payment_error")
        reason = "No error details"
        if isinstance(error, dict):
            msg = error.get("message")
            reason = str(msg) if isinstance(msg, str) else "Unknown error"
        logger.warning("Payment failed for intent %s: %s", intent.get("id"), reason)


class ChargeDisputeCreatedWebhook(Webhook):
    """Handles ``charge.dispute.created``; logged for manual review only."""

    name = "charge.dispute.created"

    def process_webhook(self) -> None:
        dispute = self.data_object
        logger.warning(
            "Stripe dispute created: id=%s, charge=%s, amount=%s, reason=%s",
            dispute.get("id"),
            dispute.get("charge"),
            dispute.get("amount"),
            dispute.get("reason"),
        )


registry.register(CheckoutSessionCompletedWebhook.name, CheckoutSessionCompletedWebhook)
registry.register(CheckoutSessionExpiredWebhook.name, CheckoutSessionExpiredWebhook)
registry.register(PaymentIntentPaymentFailedWebhook.name, PaymentIntentPaymentFailedWebhook)
registry.register(ChargeDisputeCreatedWebhook.name, ChargeDisputeCreatedWebhook)


# ---------------------------------------------------------------------------
# Webhook endpoint view
# ---------------------------------------------------------------------------


@csrf_exempt
@require_POST
def stripe_webhook(request: "HttpRequest") -> HttpResponse:
    """Receive and process a Stripe webhook event.

    Always returns HTTP 200 so Stripe does not retry events we have chosen
    to drop; rejected signatures and handler errors are logged, and handler
    errors are also captured to ``EventProcessingException``.

    Args:
        request: The incoming HTTP request from Stripe.

    Returns:
        An ``HttpResponse`` with status 200.
    """
    config = get_config()
    webhook_secret = config.stripe.webhook_secret
    if not webhook_secret:
        logger.error("Stripe webhook secret is not configured; set AISF_FORUM['stripe']['webhook_secret']")
        return HttpResponse(status=200)

    payload = request.body
    sig_header = request.META.get("HTTP_STRIPE_SIGNATURE", "")

    try:
        event = stripe.Webhook.construct_event(
            payload,
            sig_header,
            str(webhook_secret),
            tolerance=config.stripe.webhook_tolerance,
        ).to_dict()
    except (stripe.SignatureVerificationError, ValueError):
        logger.warning("Invalid Stripe webhook payload or signature")
        return HttpResponse(status=200)
    except (AttributeError, TypeError):
        # JSON bodies that are not objects cannot be built into an Event
        logger.warning("Stripe webhook payload is not an event object")
        return HttpResponse(status=200)
    if "id" not in event or "type" not in event:
        logger.warning("Stripe webhook payload is not an event object")
        return HttpResponse(status=200)

    stripe_id = event["id"]
    kind = event["type"]

    if StripeEvent.objects.filter(stripe_id=stripe_id).exists():
        logger.info("Duplicate Stripe event %s, returning 200", stripe_id)
        return HttpResponse(status=200)

    customer_id = event_data_object(event).get("customer", "") or ""

    stripe_event = StripeEvent.objects.create(
        stripe_id=stripe_id,
        kind=kind,
        livemode=event.get("livemode", False),
        payload=event,
        customer_id=str(customer_id),
        api_version=event.get("api_version", "") or "",
    )

    handler_class = registry.get(kind)
    if handler_class is None:
        logger.info("No handler registered for event kind '%s'", kind)
        return HttpResponse(status=200)

    try:
        handler_class(stripe_event).process()
    except Exception:
        logger.exception("Error processing Stripe event %s (kind=%s)", stripe_id, kind)

    return HttpResponse(status=200)
