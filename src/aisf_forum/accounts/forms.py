"""Forms for the accounts app."""

from django import forms

from aisf_forum.accounts.models import Profile


class ProfileForm(forms.ModelForm):
    """The details a person may edit on their own profile.

    Every field is optional; a blank value clears the stored one.
    """

    class Meta:
        model = Profile
        fields = [
            "name",
            "title",
            "organisation",
            "bio",
            "linkedin",
            "twitter",
            "bluesky",
            "website",
        ]
