"""Views for editing and deleting applications from the applicant dashboard.

Each view accepts a form post, delegates to
:class:`~aisf_forum.applications.services.ApplicationService`, flashes the
outcome, and redirects to the configured applications dashboard.
"""

from typing import TYPE_CHECKING

from django.contrib import messages
from django.shortcuts import redirect
from django.views import View

from aisf_forum.accounts.mixins import RequesterMixin
from aisf_forum.applications.services import ApplicationService
from aisf_forum.settings import get_config

if TYPE_CHECKING:
    from django.http import HttpRequest, HttpResponse

    from aisf_forum.results import ActionResult


def _finish(request: "HttpRequest", result: "ActionResult", success_message: str) -> "HttpResponse":
    if result.success:
        messages.success(request, success_message)
    else:
        messages.error(request, result.error or "Something went wrong. Please try again.")
    return redirect(get_config().applications_url)


class ProposalUpdateView(RequesterMixin, View):
    """POST-only view to save edits to a pending speaker proposal."""

    http_method_names = ["post"]

    def post(self, request: "HttpRequest", pk: int) -> "HttpResponse":
        fields = {key: request.POST.get(key, "") for key in ("format", "abstract", "travel_support", "anything_else")}
        result = ApplicationService.update_proposal(pk, self.requester_email, fields)
        return _finish(request, result, "Your proposal has been updated.")


class ScholarshipUpdateView(RequesterMixin, View):
    """POST-only view to save edits to a pending scholarship application."""

    http_method_names = ["post"]

    def post(self, request: "HttpRequest", pk: int) -> "HttpResponse":
        fields: dict[str, object] = {
            key: request.POST.get(key, "") for key in ("why_attend", "travel_support", "amount")
        }
        fields["background_info"] = request.POST.getlist("background_info")
        result = ApplicationService.update_scholarship(pk, self.requester_email, fields)
        return _finish(request, result, "Your application has been updated.")


class ApplicationDeleteView(RequesterMixin, View):
    """POST-only view to delete a pending proposal or scholarship application."""

    http_method_names = ["post"]

    def post(self, request: "HttpRequest", kind: str, pk: int) -> "HttpResponse":
        result = ApplicationService.delete_application(pk, kind, self.requester_email)
        return _finish(request, result, "Your application has been deleted.")
