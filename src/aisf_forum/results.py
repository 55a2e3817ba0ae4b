"""Structured results returned by the lifecycle services to the presentation layer."""

from dataclasses import asdict, dataclass

from aisf_forum.exceptions import LifecycleError


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of a mutating lifecycle operation.

    Attributes:
        success: Whether the operation committed.
        error: Human-readable rejection reason when ``success`` is ``False``.
        error_code: Machine-readable rejection kind (see :mod:`aisf_forum.exceptions`).
        refund_id: Gateway refund identifier when a refund was executed.
        refund_unsupported: ``True`` when a refund was requested but could not
            be issued automatically; the cancellation itself still went through.
        message: Additional notice for the user, e.g. the manual refund hint.
    """

    success: bool
    error: str | None = None
    error_code: str | None = None
    refund_id: str | None = None
    refund_unsupported: bool = False
    message: str | None = None

    @classmethod
    def failed(cls, exc: LifecycleError) -> "ActionResult":
        """Build a failed result from a lifecycle error."""
        return cls(success=False, error=exc.message, error_code=exc.code)

    def as_dict(self) -> dict[str, object]:
        """Return the result as a JSON-serialisable dict."""
        return asdict(self)


@dataclass(frozen=True, slots=True)
class CancellationInfo:
    """Read-only cancellation capabilities for an order or a single ticket."""

    can_cancel: bool
    can_refund: bool
    refund_message: str | None = None
    amount: int = 0
    payment_method: str = "unknown"

    def as_dict(self) -> dict[str, object]:
        """Return the info as a JSON-serialisable dict."""
        return asdict(self)
