"""Views for cancelling orders and tickets from the attendee dashboard.

The dashboard pages themselves are rendered by the host site; these views
accept the cancel form posts, delegate to
:class:`~aisf_forum.registration.services.cancellation.CancellationService`,
flash the outcome with ``django.contrib.messages``, and redirect back to the
configured dashboard.  Two JSON endpoints report which cancellation actions
the dashboard should offer.
"""

import logging
from typing import TYPE_CHECKING

from django.contrib import messages
from django.http import Http404, JsonResponse
from django.shortcuts import redirect
from django.views import View

from aisf_forum.accounts.mixins import RequesterMixin
from aisf_forum.accounts.ownership import ORDER_OWNER_FIELDS, REGISTRATION_OWNER_FIELDS, is_owner
from aisf_forum.registration.models import Order, Registration
from aisf_forum.registration.services.cancellation import CancellationService
from aisf_forum.settings import get_config

if TYPE_CHECKING:
    from django.http import HttpRequest, HttpResponse

    from aisf_forum.results import ActionResult

logger = logging.getLogger(__name__)


def _wants_refund(request: "HttpRequest") -> bool:
    return request.POST.get("issue_refund", "").lower() in {"1", "true", "on", "yes"}


def _flash_result(request: "HttpRequest", result: "ActionResult", success_message: str) -> None:
    """Report a cancellation outcome to the user."""
    if not result.success:
        messages.error(request, result.error or "Something went wrong. Please try again.")
        return
    if result.refund_id:
        messages.success(request, f"{success_message} A refund has been issued to your card.")
    else:
        messages.success(request, success_message)
    if result.refund_unsupported and result.message:
        messages.info(request, result.message)


class OrderCancelView(RequesterMixin, View):
    """Cancel a whole order, with an optional full refund."""

    http_method_names = ["post"]

    def post(self, request: "HttpRequest", pk: int) -> "HttpResponse":
        """Handle the cancel-order form.

        Args:
            request: The incoming request; ``issue_refund`` in the POST data
                asks for a refund.
            pk: The order's primary key.

        Returns:
            A redirect to the ticket dashboard.
        """
        result = CancellationService.cancel_order(pk, self.requester_email, issue_refund=_wants_refund(request))
        _flash_result(request, result, "Your order has been cancelled.")
        return redirect(get_config().dashboard_url)


class RegistrationCancelView(RequesterMixin, View):
    """Cancel a single ticket, with an optional partial refund."""

    http_method_names = ["post"]

    def post(self, request: "HttpRequest", pk: int) -> "HttpResponse":
        """Handle the cancel-ticket form and redirect to the ticket dashboard."""
        result = CancellationService.cancel_registration(
            pk,
            self.requester_email,
            issue_refund=_wants_refund(request),
        )
        _flash_result(request, result, "Your ticket has been cancelled.")
        return redirect(get_config().dashboard_url)


class OrderCancellationInfoView(RequesterMixin, View):
    """JSON: which cancellation actions are available for one of the user's orders."""

    http_method_names = ["get"]

    def get(self, request: "HttpRequest", pk: int) -> JsonResponse:  # noqa: ARG002
        order = Order.objects.filter(pk=pk).first()
        if order is None or not is_owner(order, self.requester_email, ORDER_OWNER_FIELDS):
            raise Http404
        return JsonResponse(CancellationService.get_order_cancellation_info(pk).as_dict())


class RegistrationCancellationInfoView(RequesterMixin, View):
    """JSON: which cancellation actions are available for one of the user's tickets."""

    http_method_names = ["get"]

    def get(self, request: "HttpRequest", pk: int) -> JsonResponse:  # noqa: ARG002
        registration = Registration.objects.select_related("order", "profile").filter(pk=pk).first()
        if registration is None or not is_owner(registration, self.requester_email, REGISTRATION_OWNER_FIELDS):
            raise Http404
        return JsonResponse(CancellationService.get_registration_cancellation_info(pk).as_dict())
