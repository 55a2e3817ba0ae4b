"""Speaker proposal and scholarship (funding) application models for aisf-forum."""

from django.db import models


class Application(models.Model):
    """Fields shared by every kind of application.

    Applications are created by the applicant and stay ``pending`` until
    staff review them.  Only pending applications may be edited or deleted by
    their applicant; once reviewed they are immutable from the applicant's
    side.
    """

    PENDING = "pending"

    email = models.EmailField(help_text="Applicant email, stored lower-cased.")
    name = models.CharField(max_length=200)
    organisation = models.CharField(max_length=200, blank=True, default="")
    accepted_terms = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    @property
    def is_pending(self) -> bool:
        """Whether the applicant may still edit or delete this application."""
        return self.status == self.PENDING


class SpeakerProposal(Application):
    """A talk or session proposal submitted through the call for speakers."""

    class Status(models.TextChoices):
        """Review states for a speaker proposal."""

        PENDING = "pending", "Pending"
        ACCEPTED = "accepted", "Accepted"
        REJECTED = "rejected", "Rejected"

    profile = models.ForeignKey(
        "forum_accounts.Profile",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="speaker_proposals",
    )
    title = models.CharField(max_length=200, help_text="Speaker's job title or role.")
    bio = models.TextField()
    linkedin = models.CharField(max_length=300, blank=True, default="")
    twitter = models.CharField(max_length=300, blank=True, default="")
    bluesky = models.CharField(max_length=300, blank=True, default="")
    website = models.CharField(max_length=300, blank=True, default="")

    # Editable while pending
    format = models.CharField(max_length=100, help_text="Preferred session format, e.g. talk or panel.")
    abstract = models.TextField()
    travel_support = models.TextField(blank=True, default="")
    anything_else = models.TextField(blank=True, default="")

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    class Meta(Application.Meta):
        pass

    def __str__(self) -> str:
        return f"{self.name} - {self.format} ({self.status})"


class FundingApplication(Application):
    """A scholarship application for travel and attendance funding."""

    class Status(models.TextChoices):
        """Review states for a funding application."""

        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    profile = models.ForeignKey(
        "forum_accounts.Profile",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="funding_applications",
    )
    location = models.CharField(max_length=200, help_text="Where the applicant is travelling from.")
    role = models.CharField(max_length=200)
    day1 = models.BooleanField(default=False, verbose_name="Attending day 1")
    day2 = models.BooleanField(default=False, verbose_name="Attending day 2")

    # Editable while pending
    why_attend = models.TextField()
    travel_support = models.TextField(blank=True, default="")
    amount = models.CharField(max_length=100, blank=True, default="", help_text="Requested amount as entered.")
    background_info = models.JSONField(
        default=list,
        blank=True,
        help_text="Background categories the applicant selected.",
    )

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    class Meta(Application.Meta):
        pass

    def __str__(self) -> str:
        return f"{self.name} - {self.location} ({self.status})"
