"""Django admin configuration for the applications app."""

from typing import TYPE_CHECKING

from django.contrib import admin, messages

from aisf_forum.applications.models import FundingApplication, SpeakerProposal

if TYPE_CHECKING:
    from django.db.models import QuerySet
    from django.http import HttpRequest


def _review(modeladmin: admin.ModelAdmin, request: "HttpRequest", queryset: "QuerySet", status: str) -> None:
    """Move the pending applications in *queryset* to *status*.

    Already reviewed applications are skipped; review decisions are final.
    """
    updated = queryset.filter(status="pending").update(status=status)
    skipped = queryset.count() - updated
    modeladmin.message_user(request, f"Marked {updated} application(s) as {status}.", messages.SUCCESS)
    if skipped:
        modeladmin.message_user(request, f"Skipped {skipped} already reviewed application(s).", messages.WARNING)


@admin.register(SpeakerProposal)
class SpeakerProposalAdmin(admin.ModelAdmin):
    """Admin interface for reviewing speaker proposals."""

    list_display = ("name", "email", "format", "status", "created_at")
    list_filter = ("status", "format")
    search_fields = ("name", "email", "organisation", "abstract")
    raw_id_fields = ("profile",)
    readonly_fields = ("created_at", "updated_at")
    actions = ("accept", "reject")

    @admin.action(description="Accept selected proposals")
    def accept(self, request: "HttpRequest", queryset: "QuerySet[SpeakerProposal]") -> None:
        _review(self, request, queryset, SpeakerProposal.Status.ACCEPTED)

    @admin.action(description="Reject selected proposals")
    def reject(self, request: "HttpRequest", queryset: "QuerySet[SpeakerProposal]") -> None:
        _review(self, request, queryset, SpeakerProposal.Status.REJECTED)


@admin.register(FundingApplication)
class FundingApplicationAdmin(admin.ModelAdmin):
    """Admin interface for reviewing scholarship applications."""

    list_display = ("name", "email", "location", "amount", "day1", "day2", "status", "created_at")
    list_filter = ("status", "day1", "day2")
    search_fields = ("name", "email", "organisation", "location")
    raw_id_fields = ("profile",)
    readonly_fields = ("created_at", "updated_at")
    actions = ("approve", "reject")

    @admin.action(description="Approve selected applications")
    def approve(self, request: "HttpRequest", queryset: "QuerySet[FundingApplication]") -> None:
        _review(self, request, queryset, FundingApplication.Status.APPROVED)

    @admin.action(description="Reject selected applications")
    def reject(self, request: "HttpRequest", queryset: "QuerySet[FundingApplication]") -> None:
        _review(self, request, queryset, FundingApplication.Status.REJECTED)
