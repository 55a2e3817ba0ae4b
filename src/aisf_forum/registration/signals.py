"""Custom signals for the registration app.

Receivers use these to refresh dashboards and send attendee email; the
services send them only after the state change has committed.

Signals:
    order_paid: Sent when an order transitions to ``paid``.
        Sender: The ``Order`` class.
        Kwargs:
            order: The ``Order`` instance that was paid.
    order_cancelled: Sent when an order transitions to ``cancelled``.
        Sender: The ``Order`` class.
        Kwargs:
            order: The cancelled ``Order``.
            refund_id: The Stripe refund id, or ``None`` when no money moved.
    registration_cancelled: Sent when a single ticket is cancelled or refunded.
        Sender: The ``Registration`` class.
        Kwargs:
            registration: The cancelled ``Registration``.
            refund_id: The Stripe refund id, or ``None``.
"""

from django.dispatch import Signal

order_paid = Signal()
order_cancelled = Signal()
registration_cancelled = Signal()
