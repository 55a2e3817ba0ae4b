"""Django admin configuration for the accounts app."""

from django.contrib import admin

from aisf_forum.accounts.models import Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """Admin interface for attendee and applicant profiles."""

    list_display = ("email", "name", "organisation", "auth_user_id", "created_at")
    search_fields = ("email", "name", "organisation")
    readonly_fields = ("created_at", "updated_at")
