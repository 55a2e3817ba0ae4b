"""Tests for CompletionService in aisf_forum.registration.services.completion."""

from unittest.mock import MagicMock

import pytest
from django.core.exceptions import ValidationError

from aisf_forum.accounts.models import Profile
from aisf_forum.registration.models import Order, Registration
from aisf_forum.registration.services.completion import CompletionService
from aisf_forum.registration.signals import order_cancelled, order_paid

# -- Fixtures -----------------------------------------------------------------


@pytest.fixture
def card_order():
    order = Order.objects.create(
        purchaser_email="buyer@example.com",
        purchaser_name="Bea Buyer",
        total_amount=30000,
        stripe_session_id="cs_test_123",
    )
    for email in ("first@example.com", "Second@Example.com"):
        Registration.objects.create(
            order=order,
            name="Attendee",
            email=email,
            ticket_type="General",
            ticket_price=15000,
            amount_paid=15000,
        )
    return order


@pytest.fixture
def invoice_order():
    order = Order.objects.create(
        purchaser_email="finance@example.org",
        purchaser_name="Finance Team",
        total_amount=15000,
        payment_method=Order.PaymentMethod.INVOICE,
        invoice_number="INV-0001",
    )
    Registration.objects.create(order=order, name="Staffer", email="staff@example.org", ticket_type="General")
    return order


@pytest.fixture
def paid_handler():
    handler = MagicMock()
    order_paid.connect(handler)
    yield handler
    order_paid.disconnect(handler)


# =============================================================================
# complete_order
# =============================================================================


@pytest.mark.django_db
class TestCompleteOrder:
    def test_marks_order_and_tickets_paid(self, card_order, paid_handler):
        order = CompletionService.complete_order(card_order, "pi_test_999")

        assert order.payment_status == Order.PaymentStatus.PAID
        assert order.stripe_payment_id == "pi_test_999"
        assert set(order.registrations.values_list("status", flat=True)) == {Registration.Status.PAID}
        paid_handler.assert_called_once()
        assert paid_handler.call_args.kwargs["order"].pk == card_order.pk

    def test_links_existing_profiles_by_email(self, card_order):
        profile = Profile.objects.create(email="second@example.com")

        CompletionService.complete_order(card_order, "pi_test_999")

        linked = card_order.registrations.get(email="Second@Example.com")
        unlinked = card_order.registrations.get(email="first@example.com")
        assert linked.profile == profile
        assert unlinked.profile is None

    def test_is_idempotent(self, card_order, paid_handler):
        CompletionService.complete_order(card_order, "pi_test_999")
        CompletionService.complete_order(card_order, "pi_other")

        card_order.refresh_from_db()
        assert card_order.stripe_payment_id == "pi_test_999"
        paid_handler.assert_called_once()

    def test_cancelled_order_cannot_be_completed(self, card_order):
        card_order.payment_status = Order.PaymentStatus.CANCELLED
        card_order.save()

        with pytest.raises(ValidationError, match="cannot be completed"):
            CompletionService.complete_order(card_order, "pi_test_999")

    def test_terminal_tickets_stay_terminal(self, card_order):
        ticket = card_order.registrations.first()
        ticket.status = Registration.Status.CANCELLED
        ticket.save()

        CompletionService.complete_order(card_order, "pi_test_999")

        ticket.refresh_from_db()
        assert ticket.status == Registration.Status.CANCELLED


# =============================================================================
# mark_invoice_paid
# =============================================================================


@pytest.mark.django_db
class TestMarkInvoicePaid:
    def test_marks_pending_invoice_paid(self, invoice_order):
        order = CompletionService.mark_invoice_paid(invoice_order, "BANK-123")

        assert order.payment_status == Order.PaymentStatus.PAID
        assert order.stripe_payment_id == "BANK-123"

    def test_rejects_card_orders(self, card_order):
        with pytest.raises(ValidationError, match="Only invoice orders"):
            CompletionService.mark_invoice_paid(card_order)

    def test_rejects_already_paid_invoice(self, invoice_order):
        CompletionService.mark_invoice_paid(invoice_order)
        invoice_order.refresh_from_db()

        with pytest.raises(ValidationError, match="Only pending invoices"):
            CompletionService.mark_invoice_paid(invoice_order)


# =============================================================================
# expire_checkout
# =============================================================================


@pytest.mark.django_db
class TestExpireCheckout:
    def test_cancels_pending_order_and_tickets(self, card_order):
        handler = MagicMock()
        order_cancelled.connect(handler)
        try:
            assert CompletionService.expire_checkout(card_order) is True
        finally:
            order_cancelled.disconnect(handler)

        card_order.refresh_from_db()
        assert card_order.payment_status == Order.PaymentStatus.CANCELLED
        assert set(card_order.registrations.values_list("status", flat=True)) == {Registration.Status.CANCELLED}
        handler.assert_called_once()
        assert handler.call_args.kwargs["refund_id"] is None

    def test_leaves_paid_order_alone(self, card_order):
        CompletionService.complete_order(card_order, "pi_test_999")

        assert CompletionService.expire_checkout(card_order) is False
        card_order.refresh_from_db()
        assert card_order.payment_status == Order.PaymentStatus.PAID
