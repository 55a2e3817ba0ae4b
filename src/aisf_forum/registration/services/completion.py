"""Order completion service.

Moves orders from ``pending`` to ``paid`` once money has arrived, whether by
a completed Stripe Checkout session, a bank transfer recorded by staff, or a
fully discounted order, and cancels orders whose checkout session expired.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from aisf_forum.accounts.models import Profile, normalize_email
from aisf_forum.registration.models import Order, Registration
from aisf_forum.registration.signals import order_cancelled, order_paid

logger = logging.getLogger(__name__)


def _link_profiles(order: Order) -> int:
    """Attach each unlinked ticket on *order* to the profile with the attendee's email.

    Returns:
        The number of registrations that were linked.
    """
    unlinked = list(order.registrations.filter(profile__isnull=True))
    emails = {normalize_email(reg.email) for reg in unlinked}
    profiles = {p.email: p for p in Profile.objects.filter(email__in=emails)}

    linked = 0
    for registration in unlinked:
        profile = profiles.get(normalize_email(registration.email))
        if profile is None:
            continue
        registration.profile = profile
        registration.save(update_fields=["profile", "updated_at"])
        linked += 1
    return linked


class CompletionService:
    """Stateless service for completing and expiring orders."""

    @staticmethod
    def complete_order(order: Order, payment_reference: str | None = None) -> Order:
        """Mark an order and all of its pending tickets as paid.

        Completing an already paid order is a no-op, so redelivered webhooks
        are harmless.

        Args:
            order: The order to complete.
            payment_reference: The Stripe PaymentIntent id for card orders, or
                a bank transaction id for invoices.

        Returns:
            The refreshed order.

        Raises:
            ValidationError: If the order has been cancelled.
        """
        with transaction.atomic():
            order = Order.objects.select_for_update().get(pk=order.pk)
            if order.payment_status == Order.PaymentStatus.PAID:
                logger.info("Order %s already paid, nothing to complete", order.reference)
                return order
            if not order.can_transition_to(Order.PaymentStatus.PAID):
                raise ValidationError(f"Order {order.reference} is {order.payment_status} and cannot be completed.")

            order.payment_status = Order.PaymentStatus.PAID
            update_fields = ["payment_status", "updated_at"]
            if payment_reference:
                order.stripe_payment_id = payment_reference
                update_fields.append("stripe_payment_id")
            order.save(update_fields=update_fields)

            paid = order.registrations.filter(status=Registration.Status.PENDING).update(
                status=Registration.Status.PAID,
                updated_at=timezone.now(),
            )
            linked = _link_profiles(order)

        logger.info(
            "Order %s marked paid with %d ticket(s), %d linked to profiles",
            order.reference,
            paid,
            linked,
        )
        order_paid.send(sender=Order, order=order)
        return order

    @staticmethod
    def mark_invoice_paid(order: Order, transaction_reference: str | None = None) -> Order:
        """Record that an invoice order's bank transfer has been received.

        Args:
            order: The invoice order.
            transaction_reference: Optional bank transaction id to store.

        Returns:
            The completed order.

        Raises:
            ValidationError: If the order is not a pending invoice order.
        """
        if not order.is_invoice:
            raise ValidationError("Only invoice orders can be marked as paid manually.")
        if order.payment_status != Order.PaymentStatus.PENDING:
            raise ValidationError("Only pending invoices can be marked as paid.")
        return CompletionService.complete_order(order, transaction_reference)

    @staticmethod
    def expire_checkout(order: Order) -> bool:
        """Cancel a pending order whose Stripe Checkout session expired.

        Paid or already cancelled orders are left alone.

        Args:
            order: The order linked to the expired session.

        Returns:
            ``True`` if the order was cancelled.
        """
        with transaction.atomic():
            order = Order.objects.select_for_update().get(pk=order.pk)
            if order.payment_status != Order.PaymentStatus.PENDING:
                logger.info(
                    "Checkout expired for order %s but it is %s; leaving it",
                    order.reference,
                    order.payment_status,
                )
                return False

            now = timezone.now()
            order.payment_status = Order.PaymentStatus.CANCELLED
            order.cancelled_at = now
            order.save(update_fields=["payment_status", "cancelled_at", "updated_at"])
            cancelled = order.registrations.exclude(status__in=Registration.TERMINAL_STATUSES).update(
                status=Registration.Status.CANCELLED,
                cancelled_at=now,
                updated_at=now,
            )

        logger.info("Order %s and %d ticket(s) cancelled (checkout expired)", order.reference, cancelled)
        order_cancelled.send(sender=Order, order=order, refund_id=None)
        return True
