"""Attendee and applicant identity models for aisf-forum."""

from django.db import models


def normalize_email(email: str | None) -> str:
    """Return *email* stripped and lower-cased (``""`` for ``None``)."""
    return (email or "").strip().lower()


class Profile(models.Model):
    """A person's durable identity, keyed by lower-cased email.

    Profiles are created on first contact (ticket purchase, proposal or
    scholarship submission) and linked to the external auth provider's user
    id once that person signs in.  Registrations, speaker proposals, and
    funding applications point back here via ``profile``.
    """

    email = models.EmailField(unique=True)
    auth_user_id = models.CharField(
        max_length=200,
        unique=True,
        null=True,
        blank=True,
        help_text="User id issued by the external auth provider.",
    )
    name = models.CharField(max_length=200, blank=True, default="")
    title = models.CharField(max_length=200, blank=True, default="")
    organisation = models.CharField(max_length=200, blank=True, default="")
    bio = models.TextField(blank=True, default="")
    linkedin = models.CharField(max_length=300, blank=True, default="")
    twitter = models.CharField(max_length=300, blank=True, default="")
    bluesky = models.CharField(max_length=300, blank=True, default="")
    website = models.CharField(max_length=300, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["email"]

    def __str__(self) -> str:
        return str(self.email)

    def save(self, *args: object, **kwargs: object) -> None:
        """Normalise the email before persisting."""
        self.email = normalize_email(self.email)
        super().save(*args, **kwargs)
