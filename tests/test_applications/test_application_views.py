"""Tests for the applicant dashboard views in aisf_forum.applications.views."""

import pytest
from django.contrib.admin.sites import AdminSite
from django.contrib.auth import get_user_model
from django.contrib.messages import get_messages
from django.contrib.messages.storage.fallback import FallbackStorage
from django.test import Client, RequestFactory
from django.urls import reverse

from aisf_forum.applications.admin import FundingApplicationAdmin, SpeakerProposalAdmin
from aisf_forum.applications.models import FundingApplication, SpeakerProposal

User = get_user_model()


# -- Fixtures -----------------------------------------------------------------


@pytest.fixture
def applicant(db):
    return User.objects.create_user(username="ada", email="ada@example.com", password="testpass123")


@pytest.fixture
def client(applicant):
    client = Client()
    client.force_login(applicant)
    return client


@pytest.fixture
def proposal(db):
    return SpeakerProposal.objects.create(
        email="ada@example.com",
        name="Ada",
        title="Researcher",
        bio="Bio",
        format="Talk",
        abstract="Original",
    )


@pytest.fixture
def scholarship(db):
    return FundingApplication.objects.create(
        email="ada@example.com",
        name="Ada",
        location="Perth",
        role="Student",
        why_attend="Original",
    )


def _messages(response):
    return [str(m) for m in get_messages(response.wsgi_request)]


# =============================================================================
# Views
# =============================================================================


@pytest.mark.django_db
class TestApplicationViews:
    def test_update_proposal(self, client, proposal):
        response = client.post(
            reverse("applications:proposal-update", args=[proposal.pk]),
            {"format": "Workshop", "abstract": "Updated", "travel_support": "", "anything_else": ""},
        )

        assert response.status_code == 302
        assert response.url == "/dashboard/applications/"
        assert _messages(response) == ["Your proposal has been updated."]
        proposal.refresh_from_db()
        assert proposal.format == "Workshop"

    def test_update_scholarship_collects_checkboxes(self, client, scholarship):
        response = client.post(
            reverse("applications:scholarship-update", args=[scholarship.pk]),
            {
                "why_attend": "Updated",
                "travel_support": "",
                "amount": "500",
                "background_info": ["Student", "Industry"],
            },
        )

        assert response.status_code == 302
        scholarship.refresh_from_db()
        assert scholarship.background_info == ["Student", "Industry"]

    def test_update_by_other_user_is_refused(self, proposal):
        other = User.objects.create_user(username="bob", email="bob@example.com", password="testpass123")
        client = Client()
        client.force_login(other)

        response = client.post(
            reverse("applications:proposal-update", args=[proposal.pk]),
            {"format": "Workshop", "abstract": "Hijack"},
        )

        assert _messages(response) == ["Not authorized to edit this proposal"]
        proposal.refresh_from_db()
        assert proposal.abstract == "Original"

    def test_delete(self, client, scholarship):
        response = client.post(reverse("applications:application-delete", args=["scholarship", scholarship.pk]))

        assert _messages(response) == ["Your application has been deleted."]
        assert not FundingApplication.objects.exists()

    def test_requires_login(self, proposal):
        response = Client().post(reverse("applications:application-delete", args=["speaker", proposal.pk]))

        assert response.status_code == 302
        assert SpeakerProposal.objects.filter(pk=proposal.pk).exists()


# =============================================================================
# Admin review actions
# =============================================================================


@pytest.mark.django_db
class TestReviewActions:
    @pytest.fixture
    def admin_request(self):
        request = RequestFactory().post("/admin/")
        request.user = User.objects.create_superuser(username="admin", email="admin@example.com", password="pw")
        request.session = {}
        request._messages = FallbackStorage(request)
        return request

    def test_accept_only_touches_pending(self, admin_request, proposal):
        decided = SpeakerProposal.objects.create(
            email="b@example.com",
            name="B",
            title="T",
            bio="B",
            format="Talk",
            abstract="A",
            status=SpeakerProposal.Status.REJECTED,
        )

        SpeakerProposalAdmin(SpeakerProposal, AdminSite()).accept(admin_request, SpeakerProposal.objects.all())

        proposal.refresh_from_db()
        decided.refresh_from_db()
        assert proposal.status == SpeakerProposal.Status.ACCEPTED
        assert decided.status == SpeakerProposal.Status.REJECTED
        assert "Skipped 1 already reviewed application(s)." in [str(m) for m in admin_request._messages]

    def test_approve_scholarship(self, admin_request, scholarship):
        FundingApplicationAdmin(FundingApplication, AdminSite()).approve(
            admin_request,
            FundingApplication.objects.all(),
        )

        scholarship.refresh_from_db()
        assert scholarship.status == FundingApplication.Status.APPROVED
