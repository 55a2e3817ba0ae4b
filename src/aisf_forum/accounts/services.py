"""Profile lookup and self-service editing."""

import logging
from typing import TYPE_CHECKING

from django.db import DatabaseError, IntegrityError, transaction

from aisf_forum.accounts.forms import ProfileForm
from aisf_forum.accounts.models import Profile, normalize_email
from aisf_forum.exceptions import InvalidInput, LifecycleError, NotAuthenticated, PersistenceFailure
from aisf_forum.results import ActionResult

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

_PROFILE_DETAIL_FIELDS = ("name", "title", "organisation")


def get_or_create_profile(
    email: str,
    *,
    name: str = "",
    title: str = "",
    organisation: str = "",
) -> Profile:
    """Return the profile for *email*, creating it when missing.

    Existing profiles are updated with any non-empty detail that differs
    from the stored value, so later submissions refresh stale names and
    organisations without blanking them.

    Args:
        email: The person's email in any case.
        name: Optional display name.
        title: Optional job title or role.
        organisation: Optional organisation name.

    Returns:
        The existing or newly created :class:`Profile`.
    """
    normalized = normalize_email(email)
    details = {"name": name, "title": title, "organisation": organisation}

    profile = Profile.objects.filter(email=normalized).first()
    if profile is None:
        try:
            with transaction.atomic():
                profile = Profile.objects.create(email=normalized, **details)
        except IntegrityError:
            profile = Profile.objects.get(email=normalized)
        else:
            logger.info("Created profile %s", profile.pk)
            return profile

    updates = [key for key in _PROFILE_DETAIL_FIELDS if details[key] and details[key] != getattr(profile, key)]
    if updates:
        for key in updates:
            setattr(profile, key, details[key])
        profile.save(update_fields=[*updates, "updated_at"])
    return profile


def find_profile(email: str | None) -> Profile | None:
    """Return the profile matching *email*, or ``None``."""
    normalized = normalize_email(email)
    if not normalized:
        return None
    return Profile.objects.filter(email=normalized).first()


def update_profile(email: str | None, fields: "Mapping[str, object]") -> ActionResult:
    """Save the editable details of the profile for *email*, creating it if needed.

    The submitted values replace the stored ones, so leaving a field blank
    clears it.  The email itself is never changed.

    Args:
        email: The signed-in person's email.
        fields: Raw values for the :class:`~aisf_forum.accounts.forms.ProfileForm` fields.

    Returns:
        An :class:`ActionResult`.
    """
    try:
        profile = _save_profile(email, fields)
    except LifecycleError as exc:
        logger.info("Profile for %s not updated: %s", normalize_email(email) or "<anonymous>", exc.message)
        return ActionResult.failed(exc)

    logger.info("Profile %s updated", profile.pk)
    return ActionResult(success=True)


def _save_profile(email: str | None, fields: "Mapping[str, object]") -> Profile:
    normalized = normalize_email(email)
    if not normalized:
        raise NotAuthenticated

    profile = find_profile(normalized) or Profile(email=normalized)
    form = ProfileForm(data=dict(fields), instance=profile)
    if not form.is_valid():
        raise InvalidInput.from_form(form)

    try:
        with transaction.atomic():
            return form.save()
    except DatabaseError as exc:
        logger.exception("Failed to save profile for %s", normalized)
        raise PersistenceFailure("Failed to update profile. Please try again.") from exc
