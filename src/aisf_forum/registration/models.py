"""Order, ticket registration, and Stripe event models for aisf-forum.

All monetary amounts are stored as integers in the smallest currency unit
(cents for AUD), matching what the Stripe API expects.
"""

import secrets
import string

from django.db import models

from aisf_forum.settings import get_config

_REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
_REFERENCE_LENGTH = 8


def generate_order_reference() -> str:
    """Generate an order reference like ``AISF-A1B2C3D4``.

    Returns:
        The configured prefix followed by 8 random uppercase alphanumeric
        characters.
    """
    chars = "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(_REFERENCE_LENGTH))
    return f"{get_config().order_reference_prefix}-{chars}"


class Order(models.Model):
    """One checkout transaction covering one or more tickets.

    Orders are created by the checkout flow in ``pending`` (card checkout
    awaiting Stripe, or an issued invoice) and move to ``paid`` once money is
    received.  Cancellation is one-way: a cancelled order never comes back.
    """

    class PaymentMethod(models.TextChoices):
        """How the purchaser pays for the order."""

        CARD = "card", "Card"
        INVOICE = "invoice", "Invoice"

    class PaymentStatus(models.TextChoices):
        """Lifecycle states for an order."""

        PENDING = "pending", "Pending"
        PAID = "paid", "Paid"
        CANCELLED = "cancelled", "Cancelled"

    TRANSITIONS: dict[str, frozenset[str]] = {
        PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.CANCELLED}),
        PaymentStatus.PAID: frozenset({PaymentStatus.CANCELLED}),
        PaymentStatus.CANCELLED: frozenset(),
    }

    reference = models.CharField(
        max_length=100,
        unique=True,
        help_text='Unique order reference, e.g. "AISF-A1B2C3D4".',
    )
    purchaser_email = models.EmailField()
    purchaser_name = models.CharField(max_length=200)
    total_amount = models.PositiveIntegerField(default=0, help_text="Total charged, in cents.")
    discount_amount = models.PositiveIntegerField(default=0, help_text="Discount applied, in cents.")
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CARD,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    stripe_session_id = models.CharField(max_length=200, unique=True, null=True, blank=True)
    stripe_payment_id = models.CharField(
        max_length=200,
        blank=True,
        default="",
        help_text="Stripe PaymentIntent id, set once the card charge succeeds.",
    )
    stripe_refund_id = models.CharField(max_length=200, blank=True, default="")

    # Invoice-only metadata
    invoice_number = models.CharField(max_length=100, blank=True, default="")
    invoice_due_date = models.DateField(null=True, blank=True)
    organisation = models.CharField(max_length=200, blank=True, default="")
    abn = models.CharField(max_length=20, blank=True, default="", verbose_name="ABN")
    po_number = models.CharField(max_length=100, blank=True, default="", verbose_name="PO number")

    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.reference} ({self.payment_status})"

    def save(self, *args: object, **kwargs: object) -> None:
        """Assign a reference on first save."""
        if not self.reference:
            self.reference = generate_order_reference()
        super().save(*args, **kwargs)

    def can_transition_to(self, status: str) -> bool:
        """Whether the order may move from its current status to *status*."""
        return status in self.TRANSITIONS.get(self.payment_status, frozenset())

    @property
    def is_cancelled(self) -> bool:
        """Whether the order has been cancelled."""
        return self.payment_status == self.PaymentStatus.CANCELLED

    @property
    def is_invoice(self) -> bool:
        """Whether the order is paid by invoice."""
        return self.payment_method == self.PaymentMethod.INVOICE


class Registration(models.Model):
    """A single ticket (seat) for one attendee.

    Each registration belongs to one order, except legacy single-ticket
    records created before multi-ticket checkout, which carry their own
    ``stripe_payment_id`` and have no order.  ``cancelled`` and ``refunded``
    are terminal.
    """

    class Status(models.TextChoices):
        """Lifecycle states for a ticket."""

        PENDING = "pending", "Pending"
        PAID = "paid", "Paid"
        CANCELLED = "cancelled", "Cancelled"
        REFUNDED = "refunded", "Refunded"

    TERMINAL_STATUSES = frozenset({Status.CANCELLED, Status.REFUNDED})

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="registrations",
    )
    profile = models.ForeignKey(
        "forum_accounts.Profile",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="registrations",
    )
    name = models.CharField(max_length=200)
    email = models.EmailField()
    ticket_type = models.CharField(max_length=200)
    ticket_price = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Per-seat price in cents; the amount refunded when this ticket is cancelled.",
    )
    amount_paid = models.PositiveIntegerField(default=0, help_text="Amount paid in cents.")
    discount_amount = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    stripe_payment_id = models.CharField(
        max_length=200,
        blank=True,
        default="",
        help_text="Stripe PaymentIntent id for legacy single-ticket purchases.",
    )
    stripe_refund_id = models.CharField(max_length=200, blank=True, default="")
    dietary_requirements = models.CharField(max_length=500, blank=True, default="")
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(status="refunded") | ~models.Q(stripe_refund_id=""),
                name="registration_refunded_has_refund_id",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.ticket_type} ({self.status})"

    @property
    def is_terminal(self) -> bool:
        """Whether the ticket is cancelled or refunded."""
        return self.status in self.TERMINAL_STATUSES

    @property
    def refund_amount(self) -> int:
        """Amount to refund for this seat, in cents.

        ``ticket_price`` is the per-seat share of a multi-ticket order;
        ``amount_paid`` covers legacy records that stored the whole charge
        on the registration.
        """
        return self.ticket_price or self.amount_paid

    @property
    def payment_reference(self) -> str:
        """The Stripe PaymentIntent id this ticket was paid with, if any."""
        if self.order is not None:
            return self.order.stripe_payment_id
        return self.stripe_payment_id

    @property
    def payment_method(self) -> str:
        """The payment method of the parent order (legacy records were card-only)."""
        if self.order is not None:
            return self.order.payment_method
        return Order.PaymentMethod.CARD


class StripeEvent(models.Model):
    """A raw Stripe webhook event, stored for deduplication and auditing."""

    stripe_id = models.CharField(max_length=200, unique=True)
    kind = models.CharField(max_length=200)
    livemode = models.BooleanField(default=False)
    payload = models.JSONField(default=dict)
    customer_id = models.CharField(max_length=200, blank=True, default="")
    processed = models.BooleanField(default=False)
    api_version = models.CharField(max_length=100, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.kind} ({self.stripe_id})"


class EventProcessingException(models.Model):
    """A captured error raised while handling a Stripe webhook event."""

    event = models.ForeignKey(
        StripeEvent,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="exceptions",
    )
    data = models.TextField(blank=True, default="")
    message = models.CharField(max_length=500)
    traceback = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.message[:60]}"
