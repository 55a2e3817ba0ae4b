"""Django app configuration for the applications app."""

from django.apps import AppConfig


class ForumApplicationsConfig(AppConfig):
    """Configuration for the speaker proposal and scholarship applications app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "aisf_forum.applications"
    label = "forum_applications"
    verbose_name = "Applications"
