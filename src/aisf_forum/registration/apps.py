"""Django app configuration for the registration app."""

from django.apps import AppConfig


class ForumRegistrationConfig(AppConfig):
    """Configuration for the registration app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "aisf_forum.registration"
    label = "forum_registration"
    verbose_name = "Registration"
