"""View mixins shared by the forum apps."""

from typing import TYPE_CHECKING

from django.contrib.auth.mixins import LoginRequiredMixin

if TYPE_CHECKING:
    from django.http import HttpRequest


class RequesterMixin(LoginRequiredMixin):
    """Require a signed-in user and expose their email as ``requester_email``.

    Lifecycle services take the caller's identity explicitly, so views pass
    ``self.requester_email`` instead of the request object.
    """

    request: "HttpRequest"

    @property
    def requester_email(self) -> str:
        """Email of the signed-in user, or ``""`` when the account has none."""
        return str(getattr(self.request.user, "email", "") or "")
