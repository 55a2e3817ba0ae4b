"""Stripe client wrapper used as the forum's payment gateway adapter.

The client is initialised from the ``AISF_FORUM['stripe']`` settings and uses
the modern ``stripe.StripeClient`` pattern (v1 namespace) for all API calls.
Stripe SDK errors are translated into the forum's gateway error types so the
lifecycle services can tell a network failure from an explicit rejection.
"""

import logging

import stripe

from aisf_forum.exceptions import GatewayConnectionError, GatewayUnavailable, RefundFailed
from aisf_forum.registration.stripe_utils import obfuscate_key
from aisf_forum.settings import get_config

logger = logging.getLogger(__name__)


class StripeClient:
    """Forum-wide Stripe API client.

    Wraps ``stripe.StripeClient`` (v1 namespace) and binds every call to the
    configured secret key and API version.

    Raises:
        GatewayUnavailable: If no Stripe secret key is configured.
    """

    def __init__(self) -> None:
        """Initialize the client with the configured Stripe credentials.

        Raises:
            GatewayUnavailable: If ``AISF_FORUM['stripe']['secret_key']`` is unset.
        """
        config = get_config()
        secret_key = config.stripe.secret_key
        if not secret_key:
            logger.error("Stripe secret key is not configured; set AISF_FORUM['stripe']['secret_key']")
            raise GatewayUnavailable

        self.client = stripe.StripeClient(
            str(secret_key),
            stripe_version=config.stripe.api_version,
        )

        logger.debug("Initialized StripeClient with key %s", obfuscate_key(str(secret_key)))

    def create_refund(
        self,
        payment_intent_id: str,
        amount: int | None = None,
        *,
        idempotency_key: str,
        reason: str = "requested_by_customer",
    ) -> stripe.Refund:
        """Create a full or partial refund for a PaymentIntent.

        Args:
            payment_intent_id: The Stripe PaymentIntent ID to refund.
            amount: Optional partial refund amount in the smallest currency
                unit. When ``None`` the remaining PaymentIntent balance is
                refunded.
            idempotency_key: Key that makes retried requests return the
                original refund instead of issuing a second one.
            reason: The Stripe refund reason string (e.g.
                ``"requested_by_customer"``, ``"duplicate"``, ``"fraudulent"``).

        Returns:
            The created ``stripe.Refund`` object.

        Raises:
            GatewayConnectionError: If Stripe could not be reached.
            RefundFailed: If Stripe rejected the refund.
        """
        params: dict[str, object] = {
            "payment_intent": payment_intent_id,
            "reason": reason,
        }
        if amount is not None:
            params["amount"] = amount

        try:
            refund = self.client.v1.refunds.create(
                params=params,
                options={"idempotency_key": idempotency_key},
            )
        except stripe.APIConnectionError as exc:
            logger.exception("Could not reach Stripe to refund %s", payment_intent_id)
            raise GatewayConnectionError from exc
        except stripe.StripeError as exc:
            logger.exception("Stripe rejected refund for %s: %s", payment_intent_id, exc.user_message or exc)
            raise RefundFailed from exc

        logger.info(
            "Stripe refund %s created for %s (amount=%s, key=%s)",
            refund.id,
            payment_intent_id,
            amount if amount is not None else "full",
            idempotency_key,
        )
        return refund
