"""Tests for ApplicationService in aisf_forum.applications.services."""

from unittest.mock import MagicMock, patch

import pytest
from django.db import DatabaseError

from aisf_forum.accounts.models import Profile
from aisf_forum.applications.models import FundingApplication, SpeakerProposal
from aisf_forum.applications.services import ApplicationService
from aisf_forum.applications.signals import application_deleted, application_submitted, application_updated
from aisf_forum.exceptions import InvalidInput

OWNER = "a@x.com"

PROPOSAL_EDIT = {
    "format": "Panel",
    "abstract": "An updated abstract.",
    "travel_support": "None needed",
    "anything_else": "",
}

SCHOLARSHIP_EDIT = {
    "why_attend": "To meet the community.",
    "travel_support": "Flights from Perth",
    "amount": "1200",
    "background_info": ["Student", "Early career"],
}


# -- Fixtures -----------------------------------------------------------------


@pytest.fixture
def proposal(db):
    return SpeakerProposal.objects.create(
        email=OWNER,
        name="Ada",
        title="Researcher",
        bio="Bio",
        format="Talk",
        abstract="Original abstract.",
        accepted_terms=True,
    )


@pytest.fixture
def scholarship(db):
    return FundingApplication.objects.create(
        email=OWNER,
        name="Ada",
        location="Perth",
        role="Student",
        why_attend="Original reason.",
        accepted_terms=True,
    )


@pytest.fixture
def signal_handler():
    handler = MagicMock()
    application_updated.connect(handler)
    application_deleted.connect(handler)
    application_submitted.connect(handler)
    yield handler
    application_updated.disconnect(handler)
    application_deleted.disconnect(handler)
    application_submitted.disconnect(handler)


# =============================================================================
# update_proposal
# =============================================================================


@pytest.mark.django_db
class TestUpdateProposal:
    def test_ownership_and_pending_scenario(self, proposal):
        rejected = ApplicationService.update_proposal(proposal.pk, "b@x.com", PROPOSAL_EDIT)
        assert rejected.success is False
        assert rejected.error == "Not authorized to edit this proposal"

        accepted = ApplicationService.update_proposal(proposal.pk, OWNER, PROPOSAL_EDIT)
        assert accepted.success is True

        proposal.refresh_from_db()
        assert proposal.abstract == "An updated abstract."
        assert proposal.format == "Panel"
        assert proposal.status == SpeakerProposal.Status.PENDING

        proposal.status = SpeakerProposal.Status.ACCEPTED
        proposal.save()
        locked = ApplicationService.update_proposal(proposal.pk, OWNER, PROPOSAL_EDIT)
        assert locked.success is False
        assert locked.error == "Only pending proposals can be edited"
        assert locked.error_code == "invalid_state"

    def test_profile_owner_may_edit(self, proposal):
        proposal.profile = Profile.objects.create(email="profile@x.com")
        proposal.save()

        result = ApplicationService.update_proposal(proposal.pk, "PROFILE@x.com", PROPOSAL_EDIT)

        assert result.success is True

    def test_not_authenticated(self, proposal):
        assert ApplicationService.update_proposal(proposal.pk, "", PROPOSAL_EDIT).error == "Not authenticated"

    def test_not_found(self, db):
        assert ApplicationService.update_proposal(9999, OWNER, PROPOSAL_EDIT).error == "Proposal not found"

    def test_invalid_content_is_rejected(self, proposal):
        result = ApplicationService.update_proposal(proposal.pk, OWNER, {**PROPOSAL_EDIT, "abstract": ""})

        assert result.success is False
        assert result.error_code == "invalid_input"
        assert "abstract" in result.error
        proposal.refresh_from_db()
        assert proposal.abstract == "Original abstract."

    def test_non_editable_fields_are_ignored(self, proposal):
        ApplicationService.update_proposal(proposal.pk, OWNER, {**PROPOSAL_EDIT, "status": "accepted", "email": "z@x"})

        proposal.refresh_from_db()
        assert proposal.status == SpeakerProposal.Status.PENDING
        assert proposal.email == OWNER

    def test_sends_signal(self, proposal, signal_handler):
        ApplicationService.update_proposal(proposal.pk, OWNER, PROPOSAL_EDIT)

        signal_handler.assert_called_once()
        assert signal_handler.call_args.kwargs["kind"] == "speaker"

    def test_persistence_failure(self, proposal):
        with patch.object(SpeakerProposal, "save", side_effect=DatabaseError("boom")):
            result = ApplicationService.update_proposal(proposal.pk, OWNER, PROPOSAL_EDIT)

        assert result.success is False
        assert result.error == "Failed to update proposal. Please try again."


# =============================================================================
# update_scholarship
# =============================================================================


@pytest.mark.django_db
class TestUpdateScholarship:
    def test_owner_updates_pending_application(self, scholarship):
        result = ApplicationService.update_scholarship(scholarship.pk, OWNER, SCHOLARSHIP_EDIT)

        assert result.success is True
        scholarship.refresh_from_db()
        assert scholarship.amount == "1200"
        assert scholarship.background_info == ["Student", "Early career"]

    def test_messages(self, scholarship):
        assert ApplicationService.update_scholarship(9999, OWNER, SCHOLARSHIP_EDIT).error == "Application not found"
        assert (
            ApplicationService.update_scholarship(scholarship.pk, "b@x.com", SCHOLARSHIP_EDIT).error
            == "Not authorized to edit this application"
        )

        scholarship.status = FundingApplication.Status.APPROVED
        scholarship.save()
        assert (
            ApplicationService.update_scholarship(scholarship.pk, OWNER, SCHOLARSHIP_EDIT).error
            == "Only pending applications can be edited"
        )

    def test_background_info_must_be_a_list_of_strings(self, scholarship):
        result = ApplicationService.update_scholarship(
            scholarship.pk,
            OWNER,
            {**SCHOLARSHIP_EDIT, "background_info": {"not": "a list"}},
        )

        assert result.success is False
        assert "background_info" in result.error


# =============================================================================
# delete_application
# =============================================================================


@pytest.mark.django_db
class TestDeleteApplication:
    def test_owner_deletes_pending_proposal(self, proposal, signal_handler):
        pk = proposal.pk

        result = ApplicationService.delete_application(pk, "speaker", OWNER)

        assert result.success is True
        assert not SpeakerProposal.objects.filter(pk=pk).exists()
        kwargs = signal_handler.call_args.kwargs
        assert kwargs["signal"] is application_deleted
        assert kwargs["pk"] == pk
        assert kwargs["kind"] == "speaker"

    def test_owner_deletes_pending_scholarship(self, scholarship):
        result = ApplicationService.delete_application(scholarship.pk, "scholarship", OWNER)
        assert result.success is True
        assert not FundingApplication.objects.exists()

    def test_stranger_cannot_delete(self, proposal):
        result = ApplicationService.delete_application(proposal.pk, "speaker", "b@x.com")
        assert result.error == "Not authorized to delete this proposal"
        assert SpeakerProposal.objects.filter(pk=proposal.pk).exists()

    def test_reviewed_application_cannot_be_deleted(self, scholarship):
        scholarship.status = FundingApplication.Status.REJECTED
        scholarship.save()

        result = ApplicationService.delete_application(scholarship.pk, "scholarship", OWNER)

        assert result.error == "Only pending applications can be deleted"
        assert FundingApplication.objects.filter(pk=scholarship.pk).exists()

    def test_unknown_kind(self, proposal):
        result = ApplicationService.delete_application(proposal.pk, "sponsor", OWNER)
        assert result.success is False
        assert result.error_code == "invalid_input"

    def test_kind_must_match_entity(self, proposal):
        result = ApplicationService.delete_application(proposal.pk, "scholarship", OWNER)
        assert result.error == "Application not found"


# =============================================================================
# Submission
# =============================================================================


@pytest.mark.django_db
class TestSubmission:
    def test_submit_proposal_links_profile(self, signal_handler):
        proposal = ApplicationService.submit_proposal(
            {
                "email": " Ada@Example.com ",
                "name": "Ada",
                "title": "Researcher",
                "bio": "Bio",
                "format": "Talk",
                "abstract": "Abstract",
                "accepted_terms": True,
            },
        )

        assert proposal.status == SpeakerProposal.Status.PENDING
        assert proposal.email == "ada@example.com"
        assert proposal.profile.email == "ada@example.com"
        assert proposal.profile.title == "Researcher"
        signal_handler.assert_called_once()

    def test_submit_requires_terms(self):
        with pytest.raises(InvalidInput) as exc_info:
            ApplicationService.submit_proposal(
                {"email": "ada@example.com", "name": "Ada", "title": "R", "bio": "B", "format": "Talk", "abstract": "A"},
            )

        assert "accepted_terms" in exc_info.value.errors
        assert not SpeakerProposal.objects.exists()

    def test_submit_funding_application_uses_role_as_title(self):
        Profile.objects.create(email="ada@example.com", name="Ada")

        application = ApplicationService.submit_funding_application(
            {
                "email": "ADA@example.com",
                "name": "Ada",
                "location": "Hobart",
                "organisation": "UTAS",
                "role": "PhD student",
                "why_attend": "Learning",
                "amount": "800",
                "background_info": ["Student"],
                "day1": True,
                "accepted_terms": True,
            },
        )

        assert application.profile.title == "PhD student"
        assert application.profile.organisation == "UTAS"
        assert application.background_info == ["Student"]
        assert application.day1 is True
        assert application.day2 is False
        assert Profile.objects.count() == 1
