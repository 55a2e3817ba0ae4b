"""Cancellation service for orders and individual tickets.

Handles ownership checks, refund eligibility, Stripe full and partial
refunds, and the status bookkeeping that keeps an order consistent with its
tickets.  All methods are stateless, take the requester's email explicitly,
and report their outcome as an :class:`~aisf_forum.results.ActionResult`
instead of raising.

Every state change runs inside one ``transaction.atomic()`` block with the
order row locked, and the Stripe refund is issued inside that block before
anything is written: a failed refund leaves the database untouched, and a
failed commit after a successful refund is retried safely because the refund
call carries a stable idempotency key.
"""

import logging
from dataclasses import dataclass

from django.db import DatabaseError, transaction
from django.utils import timezone

from aisf_forum.accounts.ownership import ORDER_OWNER_FIELDS, REGISTRATION_OWNER_FIELDS, is_owner
from aisf_forum.exceptions import (
    InvalidState,
    LifecycleError,
    NotAuthenticated,
    NotAuthorized,
    NotFound,
    PersistenceFailure,
)
from aisf_forum.registration.models import Order, Registration
from aisf_forum.registration.signals import order_cancelled, registration_cancelled
from aisf_forum.registration.stripe_client import StripeClient
from aisf_forum.results import ActionResult, CancellationInfo

logger = logging.getLogger(__name__)

MANUAL_REFUND_MESSAGE = "Invoice payments require a manual refund. Please contact us for refund processing."
NO_PAYMENT_RECORD_MESSAGE = "No payment record found for automatic refund."
NOTHING_TO_REFUND_MESSAGE = "No payment was taken, so there is nothing to refund."


@dataclass(frozen=True, slots=True)
class RefundDecision:
    """Whether a refund can be issued automatically, and why not if it can't."""

    eligible: bool
    message: str | None = None


def refund_eligibility(
    *,
    subject: str,
    is_paid: bool,
    is_cancelled: bool,
    payment_method: str,
    payment_reference: str,
    amount: int,
) -> RefundDecision:
    """Decide whether a Stripe refund can be issued for an order or ticket.

    A refund is possible only for a paid card purchase with a recorded
    PaymentIntent and a positive amount.  This single predicate backs both
    the cancellation operations and the read-only capability queries.

    Args:
        subject: ``"order"`` or ``"ticket"``, used in the user-facing reason.
        is_paid: Whether the entity is currently paid.
        is_cancelled: Whether the entity is already cancelled or refunded.
        payment_method: ``"card"`` or ``"invoice"``.
        payment_reference: The Stripe PaymentIntent id, or ``""``.
        amount: The amount that would be refunded, in cents.

    Returns:
        The :class:`RefundDecision`, with a message whenever it is not eligible.
    """
    if is_cancelled:
        return RefundDecision(False, f"This {subject} has already been cancelled.")
    if not is_paid:
        return RefundDecision(False, f"This {subject} has not been paid yet.")
    if payment_method == Order.PaymentMethod.INVOICE:
        return RefundDecision(False, MANUAL_REFUND_MESSAGE)
    if payment_method != Order.PaymentMethod.CARD or not payment_reference:
        return RefundDecision(False, NO_PAYMENT_RECORD_MESSAGE)
    if amount <= 0:
        return RefundDecision(False, NOTHING_TO_REFUND_MESSAGE)
    return RefundDecision(True)


def order_refund_eligibility(order: Order) -> RefundDecision:
    """Apply :func:`refund_eligibility` to a whole order."""
    return refund_eligibility(
        subject="order",
        is_paid=order.payment_status == Order.PaymentStatus.PAID,
        is_cancelled=order.is_cancelled,
        payment_method=order.payment_method,
        payment_reference=order.stripe_payment_id,
        amount=order.total_amount,
    )


def registration_refund_eligibility(registration: Registration) -> RefundDecision:
    """Apply :func:`refund_eligibility` to a single ticket.

    The amount tested is ``amount_paid`` so complimentary seats are never
    refunded, even when they carry a nominal ``ticket_price``.
    """
    return refund_eligibility(
        subject="ticket",
        is_paid=registration.status == Registration.Status.PAID,
        is_cancelled=registration.is_terminal,
        payment_method=registration.payment_method,
        payment_reference=registration.payment_reference,
        amount=registration.amount_paid,
    )


def order_refund_key(order: Order) -> str:
    """Stripe idempotency key for a full-order refund, e.g. ``refund-order-AISF-A1B2C3D4``.

    Built from the random order reference rather than the row id, so a
    database reset cannot replay a key Stripe still remembers.
    """
    return f"refund-order-{order.reference}"


def registration_refund_key(registration: Registration) -> str:
    """Stripe idempotency key for a single-ticket refund.

    Scoped by the parent order's reference, or by the ticket's own
    PaymentIntent id for legacy tickets without an order.
    """
    scope = registration.order.reference if registration.order is not None else registration.payment_reference
    return f"refund-ticket-{scope}-{registration.pk}"


def _require_requester(requester_email: str | None) -> str:
    if not requester_email or not requester_email.strip():
        raise NotAuthenticated
    return requester_email


def _lookup(queryset, pk: object, not_found_message: str):  # noqa: ANN001, ANN202
    try:
        instance = queryset.filter(pk=pk).first()
    except (ValueError, TypeError):
        instance = None
    if instance is None:
        raise NotFound(not_found_message)
    return instance


def _unsupported_refund(issue_refund: bool, decision: RefundDecision) -> dict[str, object]:
    if issue_refund and not decision.eligible:
        return {"refund_unsupported": True, "message": decision.message}
    return {}


def _cancel_live_registrations(order: Order, refund_id: str | None) -> None:
    """Move every non-terminal ticket of *order* to its terminal status.

    Paid tickets become ``refunded`` when the order-level refund succeeded;
    everything else still live becomes ``cancelled``.  Tickets that were
    already cancelled or refunded individually are left untouched.
    """
    now = timezone.now()
    live = order.registrations.exclude(status__in=Registration.TERMINAL_STATUSES)
    if refund_id:
        live.filter(status=Registration.Status.PAID).update(
            status=Registration.Status.REFUNDED,
            stripe_refund_id=refund_id,
            cancelled_at=now,
            updated_at=now,
        )
    live.update(status=Registration.Status.CANCELLED, cancelled_at=now, updated_at=now)


def _mark_order_cancelled(order: Order, refund_id: str | None = None) -> None:
    """Transition a locked order to ``cancelled``."""
    if not order.can_transition_to(Order.PaymentStatus.CANCELLED):
        raise InvalidState("Order is already cancelled")
    order.payment_status = Order.PaymentStatus.CANCELLED
    order.cancelled_at = timezone.now()
    update_fields = ["payment_status", "cancelled_at", "updated_at"]
    if refund_id:
        order.stripe_refund_id = refund_id
        update_fields.append("stripe_refund_id")
    order.save(update_fields=update_fields)


class CancellationService:
    """Stateless service for cancelling orders and tickets.

    Cancelling an order cancels all of its tickets; cancelling the last live
    ticket of an order cancels the order.  Orders are never marked refunded
    themselves, only their tickets are.
    """

    @staticmethod
    def cancel_order(order_id: object, requester_email: str | None, *, issue_refund: bool = False) -> ActionResult:
        """Cancel an entire order, optionally refunding the card payment in full.

        Args:
            order_id: Primary key of the order.
            requester_email: Email of the authenticated caller; must match the
                purchaser's email (case-insensitive).
            issue_refund: Refund the Stripe payment when the order is
                refund-eligible.  Invoice orders and unpaid orders are still
                cancelled, and the result reports ``refund_unsupported``.

        Returns:
            An :class:`ActionResult`; ``refund_id`` is set when Stripe refunded.
        """
        try:
            order, result = CancellationService._cancel_order(order_id, requester_email, issue_refund=issue_refund)
        except LifecycleError as exc:
            logger.info("Order %s not cancelled: %s", order_id, exc.message)
            return ActionResult.failed(exc)

        order_cancelled.send(sender=Order, order=order, refund_id=result.refund_id)
        return result

    @staticmethod
    def _cancel_order(order_id: object, requester_email: str | None, *, issue_refund: bool) -> tuple[Order, ActionResult]:
        _require_requester(requester_email)
        order = _lookup(Order.objects.all(), order_id, "Order not found")

        if not is_owner(order, requester_email, ORDER_OWNER_FIELDS):
            raise NotAuthorized("Not authorized to cancel this order")
        if order.is_cancelled:
            raise InvalidState("Order is already cancelled")

        refund_id: str | None = None
        try:
            with transaction.atomic():
                order = Order.objects.select_for_update().get(pk=order.pk)
                if order.is_cancelled:
                    raise InvalidState("Order is already cancelled")

                decision = order_refund_eligibility(order)
                if issue_refund and decision.eligible:
                    refund = StripeClient().create_refund(
                        order.stripe_payment_id,
                        idempotency_key=order_refund_key(order),
                    )
                    refund_id = refund.id

                _mark_order_cancelled(order, refund_id)
                _cancel_live_registrations(order, refund_id)
        except DatabaseError as exc:
            if refund_id:
                logger.exception(
                    "Stripe refund %s succeeded but order %s could not be saved; retry is safe",
                    refund_id,
                    order.reference,
                )
            else:
                logger.exception("Failed to cancel order %s", order.reference)
            raise PersistenceFailure("Failed to cancel order. Please try again.") from exc

        logger.info(
            "Order %s cancelled by purchaser (refund=%s)",
            order.reference,
            refund_id or "none",
        )
        return order, ActionResult(success=True, refund_id=refund_id, **_unsupported_refund(issue_refund, decision))

    @staticmethod
    def cancel_registration(
        registration_id: object,
        requester_email: str | None,
        *,
        issue_refund: bool = False,
    ) -> ActionResult:
        """Cancel a single ticket, optionally refunding its share of the payment.

        The purchaser, the attendee, and the owner of the linked profile may
        each cancel the ticket.  When the ticket was the last live one on its
        order, the order is cancelled as well.

        Args:
            registration_id: Primary key of the registration.
            requester_email: Email of the authenticated caller.
            issue_refund: Issue a partial Stripe refund of the ticket price
                when the ticket is refund-eligible.

        Returns:
            An :class:`ActionResult`; ``refund_id`` is set when Stripe refunded.
        """
        try:
            registration, order_was_cancelled, result = CancellationService._cancel_registration(
                registration_id,
                requester_email,
                issue_refund=issue_refund,
            )
        except LifecycleError as exc:
            logger.info("Registration %s not cancelled: %s", registration_id, exc.message)
            return ActionResult.failed(exc)

        registration_cancelled.send(sender=Registration, registration=registration, refund_id=result.refund_id)
        if order_was_cancelled:
            order_cancelled.send(sender=Order, order=registration.order, refund_id=None)
        return result

    @staticmethod
    def _cancel_registration(
        registration_id: object,
        requester_email: str | None,
        *,
        issue_refund: bool,
    ) -> tuple[Registration, bool, ActionResult]:
        _require_requester(requester_email)
        registration = _lookup(
            Registration.objects.select_related("order", "profile"),
            registration_id,
            "Registration not found",
        )

        if not is_owner(registration, requester_email, REGISTRATION_OWNER_FIELDS):
            raise NotAuthorized("Not authorized to cancel this ticket")
        if registration.is_terminal:
            raise InvalidState("Ticket is already cancelled")

        refund_id: str | None = None
        order_was_cancelled = False
        try:
            with transaction.atomic():
                order = None
                if registration.order_id is not None:
                    order = Order.objects.select_for_update().get(pk=registration.order_id)
                registration = Registration.objects.select_for_update().get(pk=registration.pk)
                registration.order = order
                if registration.is_terminal:
                    raise InvalidState("Ticket is already cancelled")

                decision = registration_refund_eligibility(registration)
                if issue_refund and decision.eligible:
                    refund = StripeClient().create_refund(
                        registration.payment_reference,
                        registration.refund_amount,
                        idempotency_key=registration_refund_key(registration),
                    )
                    refund_id = refund.id

                registration.status = Registration.Status.REFUNDED if refund_id else Registration.Status.CANCELLED
                registration.cancelled_at = timezone.now()
                update_fields = ["status", "cancelled_at", "updated_at"]
                if refund_id:
                    registration.stripe_refund_id = refund_id
                    update_fields.append("stripe_refund_id")
                registration.save(update_fields=update_fields)

                if order is not None and not order.is_cancelled:
                    still_live = order.registrations.exclude(status__in=Registration.TERMINAL_STATUSES).exists()
                    if not still_live:
                        _mark_order_cancelled(order)
                        order_was_cancelled = True
        except DatabaseError as exc:
            if refund_id:
                logger.exception(
                    "Stripe refund %s succeeded but registration %s could not be saved; retry is safe",
                    refund_id,
                    registration.pk,
                )
            else:
                logger.exception("Failed to cancel registration %s", registration.pk)
            raise PersistenceFailure("Failed to cancel ticket. Please try again.") from exc

        logger.info(
            "Registration %s cancelled (refund=%s, order cancelled=%s)",
            registration.pk,
            refund_id or "none",
            order_was_cancelled,
        )
        result = ActionResult(success=True, refund_id=refund_id, **_unsupported_refund(issue_refund, decision))
        return registration, order_was_cancelled, result

    @staticmethod
    def get_order_cancellation_info(order_id: object) -> CancellationInfo:
        """Report which cancellation actions the UI should offer for an order.

        Args:
            order_id: Primary key of the order.

        Returns:
            A :class:`CancellationInfo`; unknown orders report nothing available.
        """
        try:
            order = _lookup(Order.objects.all(), order_id, "Order not found")
        except NotFound:
            return CancellationInfo(can_cancel=False, can_refund=False)

        decision = order_refund_eligibility(order)
        return CancellationInfo(
            can_cancel=not order.is_cancelled,
            can_refund=decision.eligible,
            refund_message=decision.message,
            amount=order.total_amount,
            payment_method=order.payment_method,
        )

    @staticmethod
    def get_registration_cancellation_info(registration_id: object) -> CancellationInfo:
        """Report which cancellation actions the UI should offer for a ticket.

        Args:
            registration_id: Primary key of the registration.

        Returns:
            A :class:`CancellationInfo`; ``amount`` is the amount a refund would return.
        """
        try:
            registration = _lookup(Registration.objects.select_related("order"), registration_id, "Registration not found")
        except NotFound:
            return CancellationInfo(can_cancel=False, can_refund=False)

        decision = registration_refund_eligibility(registration)
        return CancellationInfo(
            can_cancel=not registration.is_terminal,
            can_refund=decision.eligible,
            refund_message=decision.message,
            amount=registration.refund_amount,
            payment_method=registration.payment_method,
        )
