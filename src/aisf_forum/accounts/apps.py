"""Django app configuration for the accounts app."""

from django.apps import AppConfig


class ForumAccountsConfig(AppConfig):
    """Configuration for the accounts app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "aisf_forum.accounts"
    label = "forum_accounts"
    verbose_name = "Accounts"
