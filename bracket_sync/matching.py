"""Resolve tournament participants to server members."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .models import MemberSnapshot, Participant

log = logging.getLogger(__name__)


def _same_name(left: str, right: str) -> bool:
    return left.lower() == right.lower()


def find_by_tag(
    members: Sequence[MemberSnapshot], tag: str
) -> MemberSnapshot | None:
    for member in members:
        if member.tag == tag:
            return member
    return None


def find_by_name(
    members: Sequence[MemberSnapshot], handle: str, full_handle: str
) -> MemberSnapshot | None:
    """Return the first member whose username or display name equals either handle.

    Comparison is case-insensitive. Ties go to roster order.
    """
    for member in members:
        if (
            _same_name(member.username, handle)
            or _same_name(member.username, full_handle)
            or _same_name(member.display_name, handle)
            or _same_name(member.display_name, full_handle)
        ):
            return member
    return None


def match_member(
    members: Sequence[MemberSnapshot], participant: Participant
) -> MemberSnapshot | None:
    """Return the roster member for a participant, or None.

    A linked Discord account recorded on the bracket is authoritative: when
    present, name matching is never attempted.
    """
    if participant.linked_account_tag:
        log.debug("Looking for %s", participant.linked_account_tag)
        member = find_by_tag(members, participant.linked_account_tag)
    else:
        log.debug("Looking for %s", participant.full_handle)
        member = find_by_name(members, participant.handle, participant.full_handle)

    if member is None:
        log.info("Member not found for %s", participant.full_handle)
    else:
        log.debug("Found: %s", member.tag)
    return member
