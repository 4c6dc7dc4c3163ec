"""Run one reconciliation pass between a bracket and a server roster."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Protocol

from .config import SyncConfig
from .errors import RolesNotFound
from .matching import match_member
from .models import (
    Event,
    MemberSnapshot,
    Participant,
    Player,
    RoleDiff,
    RoleSnapshot,
    SyncSummary,
)
from .nicknames import NICKNAME_MAX_LENGTH, RENAME_REASON, decide_nickname
from .roles import add_participation, diff_roles, roles_for_game, strip_targets

log = logging.getLogger(__name__)


class TournamentDirectory(Protocol):
    async def list_events(self, slug: str) -> list[Event]: ...

    async def list_participants(self, event_id: int | str) -> list[Participant]: ...


class RosterStore(Protocol):
    async def get_managed_roles(
        self, role_ids: Iterable[int]
    ) -> list[RoleSnapshot]: ...

    async def list_members(self) -> list[MemberSnapshot]: ...

    async def add_roles(
        self, member_id: int, role_ids: Iterable[int], *, reason: str | None = None
    ) -> None: ...

    async def remove_roles(
        self, member_id: int, role_ids: Iterable[int], *, reason: str | None = None
    ) -> None: ...

    async def set_nickname(
        self, member_id: int, nickname: str, *, reason: str | None = None
    ) -> None: ...


def _role_names(role_ids: Iterable[int], roles: Mapping[int, RoleSnapshot]) -> str:
    return ", ".join(
        roles[role_id].name if role_id in roles else str(role_id)
        for role_id in sorted(role_ids)
    )


async def collect_players(
    directory: TournamentDirectory,
    slug: str,
    members: Sequence[MemberSnapshot],
    mapping: Mapping[int, int | str],
) -> list[Player]:
    """Match every event's participants and union their roles per member."""
    players: dict[int, Player] = {}
    for event in await directory.list_events(slug):
        role_ids = roles_for_game(event.videogame, mapping)
        if not role_ids:
            log.info(
                "No corresponding role found for %s (ID: %s)",
                event.videogame.name,
                event.videogame.id,
            )
            continue

        participants = await directory.list_participants(event.id)
        log.info(
            "Event %s (%s): %d participant(s)",
            event.id,
            event.videogame.name,
            len(participants),
        )
        for participant in participants:
            member = match_member(members, participant)
            if member is None:
                continue
            add_participation(
                players,
                member,
                role_ids,
                handle=participant.handle,
                prefix=participant.prefix,
            )
    return list(players.values())


async def strip_former_participants(
    roster: RosterStore,
    members: Sequence[MemberSnapshot],
    players: Sequence[Player],
    temporary_roles: Mapping[int, RoleSnapshot],
    *,
    reason: str | None = None,
) -> int:
    targets = strip_targets(members, players, temporary_roles.keys())
    if not targets:
        return 0

    role_ids = sorted(temporary_roles)
    names = _role_names(role_ids, temporary_roles)
    log.info("Removing roles [%s] from %d member(s)", names, len(targets))

    async def strip(member: MemberSnapshot) -> None:
        log.info("Removing role(s) %s from %s", names, member.display_name)
        await roster.remove_roles(member.id, role_ids, reason=reason)

    await asyncio.gather(*(strip(member) for member in targets))
    return len(targets)


async def apply_player_roles(
    roster: RosterStore,
    player: Player,
    managed_roles: Mapping[int, RoleSnapshot],
    *,
    reason: str | None = None,
) -> RoleDiff:
    diff = diff_roles(player, managed_roles.keys())
    if diff.is_empty:
        return diff
    name = player.member.display_name
    if diff.to_add:
        log.info(
            "Adding role(s) %s to %s", _role_names(diff.to_add, managed_roles), name
        )
        await roster.add_roles(player.member.id, diff.to_add, reason=reason)
    if diff.to_remove:
        log.info(
            "Removing role(s) %s from %s",
            _role_names(diff.to_remove, managed_roles),
            name,
        )
        await roster.remove_roles(player.member.id, diff.to_remove, reason=reason)
    return diff


async def apply_nickname(roster: RosterStore, player: Player) -> str | None:
    nickname = decide_nickname(player)
    if nickname is None:
        return None
    if len(nickname) > NICKNAME_MAX_LENGTH:
        log.warning(
            "Cannot rename %s to %s: nicknames are limited to %d characters",
            player.member.display_name,
            nickname,
            NICKNAME_MAX_LENGTH,
        )
        return None
    log.info("Renaming %s to %s", player.member.display_name, nickname)
    await roster.set_nickname(player.member.id, nickname, reason=RENAME_REASON)
    return nickname


async def run_sync(
    directory: TournamentDirectory,
    roster: RosterStore,
    config: SyncConfig,
    slug: str,
) -> SyncSummary:
    """Bring the roster's managed roles and nicknames in line with a tournament."""
    managed_ids = config.managed_role_ids
    roles = {role.id: role for role in await roster.get_managed_roles(managed_ids)}
    if not roles:
        raise RolesNotFound(managed_ids)
    missing = managed_ids - roles.keys()
    if missing:
        log.warning(
            "Configured role(s) not found on server and ignored: %s",
            ", ".join(str(role_id) for role_id in sorted(missing)),
        )

    mapping = {
        role_id: game
        for role_id, game in config.role_mapping.items()
        if role_id in roles
    }
    temporary_roles = {
        role_id: role
        for role_id, role in roles.items()
        if role_id in config.temporary_role_ids
    }

    members = await roster.list_members()
    players = await collect_players(directory, slug, members, mapping)
    reason = f"Bracket sync for {slug}"

    summary = SyncSummary(players=len(players))
    summary.stripped_members = await strip_former_participants(
        roster, members, players, temporary_roles, reason=reason
    )

    diffs = await asyncio.gather(
        *(
            apply_player_roles(roster, player, roles, reason=reason)
            for player in players
        )
    )
    summary.roles_added = sum(len(diff.to_add) for diff in diffs)
    summary.roles_removed = sum(len(diff.to_remove) for diff in diffs)

    renames = await asyncio.gather(
        *(apply_nickname(roster, player) for player in players)
    )
    summary.renamed = sum(1 for nickname in renames if nickname is not None)
    return summary
