"""Application lifecycle service.

Lets applicants submit speaker proposals and scholarship applications, and
edit or delete their own applications while they are still pending.  The
edit and delete operations take the requester's email explicitly and return
an :class:`~aisf_forum.results.ActionResult`; each rejection carries its own
message so the dashboard can say exactly why an action was refused.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.db import DatabaseError, transaction

from aisf_forum.accounts.models import normalize_email
from aisf_forum.accounts.ownership import APPLICATION_OWNER_FIELDS, is_owner
from aisf_forum.accounts.services import get_or_create_profile
from aisf_forum.applications.forms import (
    FundingApplicationForm,
    FundingApplicationUpdateForm,
    SpeakerProposalForm,
    SpeakerProposalUpdateForm,
)
from aisf_forum.applications.models import FundingApplication, SpeakerProposal
from aisf_forum.applications.signals import application_deleted, application_submitted, application_updated
from aisf_forum.exceptions import (
    InvalidInput,
    InvalidState,
    LifecycleError,
    NotAuthenticated,
    NotAuthorized,
    NotFound,
    PersistenceFailure,
)
from aisf_forum.results import ActionResult

if TYPE_CHECKING:
    from collections.abc import Mapping

    from django import forms

    from aisf_forum.applications.models import Application

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApplicationKind:
    """How one kind of application is stored, edited, and described to users."""

    key: str
    model: type["Application"]
    update_form: type["forms.ModelForm"]
    noun: str


SPEAKER = ApplicationKind("speaker", SpeakerProposal, SpeakerProposalUpdateForm, "proposal")
SCHOLARSHIP = ApplicationKind("scholarship", FundingApplication, FundingApplicationUpdateForm, "application")

APPLICATION_KINDS: dict[str, ApplicationKind] = {kind.key: kind for kind in (SPEAKER, SCHOLARSHIP)}


def _lock_for_applicant(kind: ApplicationKind, pk: object, requester_email: str | None, verb: str) -> "Application":
    """Fetch and lock a pending application the requester owns.

    Must be called inside ``transaction.atomic()``.

    Raises:
        NotAuthenticated: No requester email was given.
        NotFound: No application of this kind has *pk*.
        NotAuthorized: The requester does not own the application.
        InvalidState: The application has already been reviewed.
    """
    if not requester_email or not requester_email.strip():
        raise NotAuthenticated

    try:
        instance = kind.model.objects.select_for_update().filter(pk=pk).first()
    except (ValueError, TypeError):
        instance = None
    if instance is None:
        raise NotFound(f"{kind.noun.capitalize()} not found")

    if not is_owner(instance, requester_email, APPLICATION_OWNER_FIELDS):
        raise NotAuthorized(f"Not authorized to {verb} this {kind.noun}")
    if not instance.is_pending:
        raise InvalidState(f"Only pending {kind.noun}s can be {'edited' if verb == 'edit' else 'deleted'}")
    return instance


class ApplicationService:
    """Stateless service for the speaker proposal and scholarship lifecycles."""

    @staticmethod
    def update_proposal(pk: object, requester_email: str | None, fields: "Mapping[str, object]") -> ActionResult:
        """Overwrite the editable content of a pending speaker proposal.

        Args:
            pk: Primary key of the proposal.
            requester_email: Email of the authenticated caller.
            fields: New values for ``format``, ``abstract``,
                ``travel_support`` and ``anything_else``.

        Returns:
            An :class:`ActionResult`.
        """
        return ApplicationService._update(SPEAKER, pk, requester_email, fields)

    @staticmethod
    def update_scholarship(pk: object, requester_email: str | None, fields: "Mapping[str, object]") -> ActionResult:
        """Overwrite the editable content of a pending scholarship application.

        Args:
            pk: Primary key of the funding application.
            requester_email: Email of the authenticated caller.
            fields: New values for ``why_attend``, ``travel_support``,
                ``amount`` and ``background_info`` (a list of strings).

        Returns:
            An :class:`ActionResult`.
        """
        return ApplicationService._update(SCHOLARSHIP, pk, requester_email, fields)

    @staticmethod
    def _update(
        kind: ApplicationKind,
        pk: object,
        requester_email: str | None,
        fields: "Mapping[str, object]",
    ) -> ActionResult:
        try:
            with transaction.atomic():
                instance = _lock_for_applicant(kind, pk, requester_email, "edit")
                form = kind.update_form(data=dict(fields), instance=instance)
                if not form.is_valid():
                    raise InvalidInput.from_form(form)
                instance = form.save()
        except DatabaseError:
            logger.exception("Failed to update %s %s", kind.key, pk)
            return ActionResult.failed(PersistenceFailure(f"Failed to update {kind.noun}. Please try again."))
        except LifecycleError as exc:
            logger.info("%s %s not updated: %s", kind.key, pk, exc.message)
            return ActionResult.failed(exc)

        logger.info("%s %s updated by applicant", kind.key, instance.pk)
        application_updated.send(sender=kind.model, application=instance, kind=kind.key)
        return ActionResult(success=True)

    @staticmethod
    def delete_application(pk: object, kind: str, requester_email: str | None) -> ActionResult:
        """Permanently delete a pending application owned by the requester.

        Args:
            pk: Primary key of the application.
            kind: ``"speaker"`` or ``"scholarship"``.
            requester_email: Email of the authenticated caller.

        Returns:
            An :class:`ActionResult`.
        """
        application_kind = APPLICATION_KINDS.get(kind)
        if application_kind is None:
            return ActionResult.failed(InvalidInput(f"Unknown application type: {kind}"))

        try:
            with transaction.atomic():
                instance = _lock_for_applicant(application_kind, pk, requester_email, "delete")
                deleted_pk = instance.pk
                instance.delete()
        except DatabaseError:
            logger.exception("Failed to delete %s %s", kind, pk)
            return ActionResult.failed(
                PersistenceFailure(f"Failed to delete {application_kind.noun}. Please try again."),
            )
        except LifecycleError as exc:
            logger.info("%s %s not deleted: %s", kind, pk, exc.message)
            return ActionResult.failed(exc)

        logger.info("%s %s deleted by applicant", kind, deleted_pk)
        application_deleted.send(sender=application_kind.model, pk=deleted_pk, kind=kind)
        return ActionResult(success=True)

    @staticmethod
    def submit_proposal(data: "Mapping[str, object]") -> SpeakerProposal:
        """Create a pending speaker proposal and link it to the speaker's profile.

        Args:
            data: Submission fields as accepted by
                :class:`~aisf_forum.applications.forms.SpeakerProposalForm`.

        Returns:
            The new proposal.

        Raises:
            InvalidInput: If the submission does not validate.
        """
        form = SpeakerProposalForm(data=dict(data))
        if not form.is_valid():
            raise InvalidInput.from_form(form)

        with transaction.atomic():
            proposal = form.save(commit=False)
            proposal.email = normalize_email(proposal.email)
            proposal.profile = get_or_create_profile(
                proposal.email,
                name=proposal.name,
                title=proposal.title,
                organisation=proposal.organisation,
            )
            proposal.save()

        logger.info("Speaker proposal %s submitted", proposal.pk)
        application_submitted.send(sender=SpeakerProposal, application=proposal, kind=SPEAKER.key)
        return proposal

    @staticmethod
    def submit_funding_application(data: "Mapping[str, object]") -> FundingApplication:
        """Create a pending scholarship application and link it to the applicant's profile.

        The applicant's role is stored on the profile as their title.

        Args:
            data: Submission fields as accepted by
                :class:`~aisf_forum.applications.forms.FundingApplicationForm`.

        Returns:
            The new funding application.

        Raises:
            InvalidInput: If the submission does not validate.
        """
        form = FundingApplicationForm(data=dict(data))
        if not form.is_valid():
            raise InvalidInput.from_form(form)

        with transaction.atomic():
            application = form.save(commit=False)
            application.email = normalize_email(application.email)
            application.profile = get_or_create_profile(
                application.email,
                name=application.name,
                title=application.role,
                organisation=application.organisation,
            )
            application.save()

        logger.info("Funding application %s submitted", application.pk)
        application_submitted.send(sender=FundingApplication, application=application, kind=SCHOLARSHIP.key)
        return application
