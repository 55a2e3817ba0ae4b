"""Error taxonomy for the order and application lifecycle services.

Services raise these internally; each public lifecycle operation catches
:class:`LifecycleError` at its boundary and returns a failed
:class:`~aisf_forum.results.ActionResult` carrying ``code`` and the message.
"""


class LifecycleError(Exception):
    """Base class for every rejection a lifecycle operation can report."""

    code = "error"
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticated(LifecycleError):
    """Raised when no caller identity was supplied."""

    code = "not_authenticated"
    default_message = "Not authenticated"


class NotFound(LifecycleError):
    """Raised when an entity id does not resolve."""

    code = "not_found"
    default_message = "Not found"


class NotAuthorized(LifecycleError):
    """Raised when the caller is authenticated but does not own the entity."""

    code = "not_authorized"
    default_message = "Not authorized"


class InvalidState(LifecycleError):
    """Raised when the entity's status does not permit the operation."""

    code = "invalid_state"
    default_message = "This action is not available in the current state"


class InvalidInput(LifecycleError):
    """Raised when submitted content fails validation."""

    code = "invalid_input"
    default_message = "The submitted data is invalid"

    def __init__(self, message: str | None = None, errors: dict[str, list[str]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or {}

    @classmethod
    def from_form(cls, form: object) -> "InvalidInput":
        """Build the error from a bound Django form's ``errors``."""
        errors = {field: [str(msg) for msg in msgs] for field, msgs in form.errors.items()}
        summary = "; ".join(f"{field}: {' '.join(msgs)}" for field, msgs in errors.items())
        return cls(summary or None, errors)


class GatewayFailure(LifecycleError):
    """Raised when the payment gateway could not complete a refund."""

    code = "gateway_failure"
    default_message = "Failed to process Stripe refund. Please contact support."


class GatewayUnavailable(GatewayFailure):
    """Raised when the payment gateway is not configured."""

    code = "gateway_unavailable"
    default_message = "Stripe is not configured. Cannot process refund."


class GatewayConnectionError(GatewayFailure):
    """Raised when the payment gateway could not be reached."""

    code = "gateway_connection_error"
    default_message = "Could not reach the payment processor. Please try again."


class RefundFailed(GatewayFailure):
    """Raised when the payment gateway explicitly rejected a refund."""

    code = "refund_failed"


class PersistenceFailure(LifecycleError):
    """Raised when the state change could not be committed."""

    code = "persistence_failure"
