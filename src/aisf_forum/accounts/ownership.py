"""Ownership checks shared by orders, tickets, and applications.

Every entity in the forum is owned by one or more email-bearing fields
(the purchaser, the attendee, the linked profile).  :func:`is_owner` walks
dotted field paths on the entity and compares each resolved email against
the requester case-insensitively.
"""

from aisf_forum.accounts.models import normalize_email

ORDER_OWNER_FIELDS = ("purchaser_email",)
REGISTRATION_OWNER_FIELDS = ("order.purchaser_email", "email", "profile.email")
APPLICATION_OWNER_FIELDS = ("email", "profile.email")


def _resolve(entity: object, path: str) -> object | None:
    """Follow a dotted attribute *path* on *entity*, returning ``None`` on any gap."""
    value: object | None = entity
    for part in path.split("."):
        if value is None:
            return None
        value = getattr(value, part, None)
    return value


def is_owner(entity: object, requester_email: str | None, fields: tuple[str, ...]) -> bool:
    """Return whether *requester_email* owns *entity* through any of *fields*.

    Args:
        entity: The model instance to check (order, registration, proposal...).
        requester_email: The authenticated caller's email.
        fields: Dotted attribute paths whose values count as owner emails,
            e.g. ``("email", "profile.email")``.

    Returns:
        ``True`` when any resolved email matches, ignoring case and
        surrounding whitespace.  Blank emails never match.
    """
    requester = normalize_email(requester_email)
    if not requester:
        return False
    for path in fields:
        value = _resolve(entity, path)
        if isinstance(value, str) and normalize_email(value) == requester:
            return True
    return False
