from __future__ import annotations

from collections.abc import Iterable

import pytest

from bracket_sync.errors import TournamentNotFound
from bracket_sync.models import Event, MemberSnapshot, Participant, RoleSnapshot


def make_member(
    member_id: int,
    username: str,
    *,
    display_name: str | None = None,
    roles: Iterable[int] = (),
    discriminator: str = "0",
) -> MemberSnapshot:
    return MemberSnapshot(
        id=member_id,
        username=username,
        display_name=display_name if display_name is not None else username,
        role_ids=frozenset(roles),
        discriminator=discriminator,
    )


class FakeDirectory:
    """In-memory tournament directory keyed by slug and event id."""

    def __init__(
        self,
        slug: str,
        events: list[Event],
        participants: dict[object, list[Participant]],
    ) -> None:
        self.slug = slug
        self.events = events
        self.participants = participants
        self.participant_requests: list[object] = []

    async def list_events(self, slug: str) -> list[Event]:
        if slug != self.slug:
            raise TournamentNotFound(slug)
        return list(self.events)

    async def list_participants(self, event_id) -> list[Participant]:
        self.participant_requests.append(event_id)
        return list(self.participants.get(event_id, []))


class FakeRoster:
    """In-memory roster that applies mutations and records every call."""

    def __init__(
        self, members: list[MemberSnapshot], roles: list[RoleSnapshot]
    ) -> None:
        self.roles = roles
        self._members = {member.id: member for member in members}
        self._order = [member.id for member in members]
        self.calls: list[tuple] = []

    def member(self, member_id: int) -> MemberSnapshot:
        return self._members[member_id]

    async def get_managed_roles(self, role_ids) -> list[RoleSnapshot]:
        wanted = set(role_ids)
        return [role for role in self.roles if role.id in wanted]

    async def list_members(self) -> list[MemberSnapshot]:
        return [self._members[member_id] for member_id in self._order]

    def _replace(self, member_id: int, **changes) -> None:
        current = self._members[member_id]
        self._members[member_id] = MemberSnapshot(
            id=current.id,
            username=changes.get("username", current.username),
            display_name=changes.get("display_name", current.display_name),
            role_ids=changes.get("role_ids", current.role_ids),
            discriminator=current.discriminator,
        )

    async def add_roles(self, member_id: int, role_ids, *, reason=None) -> None:
        role_ids = frozenset(role_ids)
        self.calls.append(("add", member_id, role_ids))
        self._replace(
            member_id, role_ids=self._members[member_id].role_ids | role_ids
        )

    async def remove_roles(self, member_id: int, role_ids, *, reason=None) -> None:
        role_ids = frozenset(role_ids)
        self.calls.append(("remove", member_id, role_ids))
        self._replace(
            member_id, role_ids=self._members[member_id].role_ids - role_ids
        )

    async def set_nickname(self, member_id: int, nickname: str, *, reason=None) -> None:
        self.calls.append(("nick", member_id, nickname, reason))
        self._replace(member_id, display_name=nickname)


@pytest.fixture
def member_factory():
    return make_member
