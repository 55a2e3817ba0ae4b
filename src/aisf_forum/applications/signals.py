"""Custom signals for the applications app.

Sent by :class:`~aisf_forum.applications.services.ApplicationService` after
the change has committed.

Signals:
    application_submitted: Sent when a new proposal or scholarship application is created.
        Kwargs:
            application: The new ``SpeakerProposal`` or ``FundingApplication``.
            kind: ``"speaker"`` or ``"scholarship"``.
    application_updated: Sent when an applicant edits a pending application.
        Kwargs:
            application: The updated instance.
            kind: ``"speaker"`` or ``"scholarship"``.
    application_deleted: Sent when an applicant deletes a pending application.
        Kwargs:
            pk: Primary key the application had.
            kind: ``"speaker"`` or ``"scholarship"``.
"""

from django.dispatch import Signal

application_submitted = Signal()
application_updated = Signal()
application_deleted = Signal()
