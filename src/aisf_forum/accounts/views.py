"""Self-service profile editing from the dashboard."""

from typing import TYPE_CHECKING

from django.contrib import messages
from django.shortcuts import redirect
from django.views import View

from aisf_forum.accounts.forms import ProfileForm
from aisf_forum.accounts.mixins import RequesterMixin
from aisf_forum.accounts.services import update_profile
from aisf_forum.settings import get_config

if TYPE_CHECKING:
    from django.http import HttpRequest, HttpResponse


class ProfileUpdateView(RequesterMixin, View):
    """POST-only view to save the signed-in person's profile details."""

    http_method_names = ["post"]

    def post(self, request: "HttpRequest") -> "HttpResponse":
        fields = {key: request.POST.get(key, "") for key in ProfileForm.Meta.fields}
        result = update_profile(self.requester_email, fields)
        if result.success:
            messages.success(request, "Your profile has been updated.")
        else:
            messages.error(request, result.error or "Failed to update profile. Please try again.")
        return redirect(get_config().profile_url)
