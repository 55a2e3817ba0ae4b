"""Django admin configuration for the registration app."""

from typing import TYPE_CHECKING

from django.contrib import admin, messages
from django.core.exceptions import ValidationError

from aisf_forum.registration.models import EventProcessingException, Order, Registration, StripeEvent
from aisf_forum.registration.services.cancellation import CancellationService
from aisf_forum.registration.services.completion import CompletionService
from aisf_forum.registration.stripe_utils import format_amount
from aisf_forum.settings import get_config

if TYPE_CHECKING:
    from django.db.models import QuerySet
    from django.http import HttpRequest


class RegistrationInline(admin.TabularInline):
    """Tickets on an order.

    Status and Stripe fields are read-only; they change only through the
    cancellation and completion services.
    """

    model = Registration
    extra = 0
    fields = ("name", "email", "ticket_type", "ticket_price", "amount_paid", "status", "stripe_refund_id")
    readonly_fields = ("status", "stripe_refund_id")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for managing orders.

    Money and status fields are read-only; use the actions to record invoice
    payments or cancel orders so tickets stay consistent with their order.
    """

    list_display = ("reference", "purchaser_email", "payment_method", "payment_status", "display_total", "created_at")
    list_filter = ("payment_method", "payment_status")
    search_fields = ("reference", "purchaser_email", "purchaser_name", "invoice_number")
    readonly_fields = (
        "reference",
        "total_amount",
        "discount_amount",
        "payment_status",
        "stripe_session_id",
        "stripe_payment_id",
        "stripe_refund_id",
        "cancelled_at",
        "created_at",
        "updated_at",
    )
    inlines = (RegistrationInline,)
    actions = ("mark_invoice_paid", "cancel_without_refund")

    @admin.display(description="Total", ordering="total_amount")
    def display_total(self, obj: Order) -> str:
        """Show the order total in the configured currency."""
        return format_amount(obj.total_amount, get_config().currency)

    @admin.action(description="Mark invoice as paid")
    def mark_invoice_paid(self, request: "HttpRequest", queryset: "QuerySet[Order]") -> None:
        """Complete each selected pending invoice order."""
        completed = 0
        for order in queryset:
            try:
                CompletionService.mark_invoice_paid(order)
            except ValidationError as exc:
                self.message_user(request, f"{order.reference}: {' '.join(exc.messages)}", messages.WARNING)
            else:
                completed += 1
        if completed:
            self.message_user(request, f"Marked {completed} invoice(s) as paid.", messages.SUCCESS)

    @admin.action(description="Cancel selected orders (no refund)")
    def cancel_without_refund(self, request: "HttpRequest", queryset: "QuerySet[Order]") -> None:
        """Cancel each selected order on behalf of its purchaser without moving money."""
        cancelled = 0
        for order in queryset:
            result = CancellationService.cancel_order(order.pk, order.purchaser_email)
            if result.success:
                cancelled += 1
            else:
                self.message_user(request, f"{order.reference}: {result.error}", messages.WARNING)
        if cancelled:
            self.message_user(request, f"Cancelled {cancelled} order(s).", messages.SUCCESS)


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    """Admin interface for individual tickets."""

    list_display = ("name", "email", "ticket_type", "status", "order", "created_at")
    list_filter = ("status", "ticket_type")
    search_fields = ("name", "email", "order__reference")
    raw_id_fields = ("order", "profile")
    readonly_fields = ("status", "stripe_payment_id", "stripe_refund_id", "cancelled_at", "created_at", "updated_at")


@admin.register(StripeEvent)
class StripeEventAdmin(admin.ModelAdmin):
    """Read-only admin for Stripe webhook events."""

    list_display = ("stripe_id", "kind", "processed", "livemode", "created_at")
    list_filter = ("kind", "processed", "livemode")
    search_fields = ("stripe_id", "customer_id")
    readonly_fields = (
        "stripe_id",
        "kind",
        "livemode",
        "payload",
        "customer_id",
        "processed",
        "api_version",
        "created_at",
    )

    def has_add_permission(self, request: "HttpRequest") -> bool:  # noqa: ARG002, D102
        return False

    def has_change_permission(self, request: "HttpRequest", obj: StripeEvent | None = None) -> bool:  # noqa: ARG002, D102
        return False


@admin.register(EventProcessingException)
class EventProcessingExceptionAdmin(admin.ModelAdmin):
    """Read-only admin for webhook processing errors."""

    list_display = ("message", "event", "created_at")
    search_fields = ("message",)
    readonly_fields = ("event", "data", "message", "traceback", "created_at")

    def has_add_permission(self, request: "HttpRequest") -> bool:  # noqa: ARG002, D102
        return False

    def has_change_permission(
        self,
        request: "HttpRequest",  # noqa: ARG002
        obj: EventProcessingException | None = None,  # noqa: ARG002
    ) -> bool:  # noqa: D102
        return False
