"""Forms for the applications app.

The submission forms collect a complete application; the update forms are
restricted to the content an applicant may still change while the
application is pending.
"""

from django import forms

from aisf_forum.applications.models import FundingApplication, SpeakerProposal


class TermsAcceptanceMixin:
    """Require the ``accepted_terms`` checkbox to be ticked."""

    def clean_accepted_terms(self) -> bool:
        """Reject submissions that did not accept the terms."""
        accepted = self.cleaned_data.get("accepted_terms")
        if not accepted:
            raise forms.ValidationError("You must accept the terms to submit.")
        return True


class BackgroundInfoField(forms.JSONField):
    """A list of background category labels.

    Accepts a list directly (as built from ``QueryDict.getlist``) or its
    JSON encoding, and always cleans to a list of non-empty strings.
    """

    def clean(self, value: object) -> list[str]:
        value = super().clean(value)
        if value in (None, ""):
            return []
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise forms.ValidationError("Background information must be a list of options.")
        return [item.strip() for item in value if item.strip()]


class SpeakerProposalForm(TermsAcceptanceMixin, forms.ModelForm):
    """Public call-for-speakers submission form."""

    class Meta:
        model = SpeakerProposal
        fields = [
            "email",
            "name",
            "organisation",
            "title",
            "bio",
            "linkedin",
            "twitter",
            "bluesky",
            "website",
            "format",
            "abstract",
            "travel_support",
            "anything_else",
            "accepted_terms",
        ]
        widgets = {
            "bio": forms.Textarea(attrs={"rows": 4}),
            "abstract": forms.Textarea(attrs={"rows": 6}),
            "travel_support": forms.Textarea(attrs={"rows": 2}),
            "anything_else": forms.Textarea(attrs={"rows": 3}),
        }


class SpeakerProposalUpdateForm(forms.ModelForm):
    """Applicant-side edit form for a pending speaker proposal."""

    class Meta:
        model = SpeakerProposal
        fields = ["format", "abstract", "travel_support", "anything_else"]
        widgets = {
            "abstract": forms.Textarea(attrs={"rows": 6}),
            "travel_support": forms.Textarea(attrs={"rows": 2}),
            "anything_else": forms.Textarea(attrs={"rows": 3}),
        }


class FundingApplicationForm(TermsAcceptanceMixin, forms.ModelForm):
    """Public scholarship application form."""

    background_info = BackgroundInfoField(required=False)

    class Meta:
        model = FundingApplication
        fields = [
            "email",
            "name",
            "location",
            "organisation",
            "role",
            "why_attend",
            "travel_support",
            "amount",
            "background_info",
            "day1",
            "day2",
            "accepted_terms",
        ]
        widgets = {
            "why_attend": forms.Textarea(attrs={"rows": 5}),
            "travel_support": forms.Textarea(attrs={"rows": 2}),
        }


class FundingApplicationUpdateForm(forms.ModelForm):
    """Applicant-side edit form for a pending scholarship application."""

    background_info = BackgroundInfoField(required=False)

    class Meta:
        model = FundingApplication
        fields = ["why_attend", "travel_support", "amount", "background_info"]
        widgets = {
            "why_attend": forms.Textarea(attrs={"rows": 5}),
            "travel_support": forms.Textarea(attrs={"rows": 2}),
        }
