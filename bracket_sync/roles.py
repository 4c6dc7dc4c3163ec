"""Role resolution and reconciliation over plain role-id sets."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from .models import MemberSnapshot, Player, RoleDiff, Videogame

GameKey = int | str


def _loosely_equal(configured: GameKey, value: object) -> bool:
    if value is None:
        return False
    return str(configured) == str(value)


def roles_for_game(videogame: Videogame, mapping: Mapping[int, GameKey]) -> set[int]:
    """Return the role ids mapped to a game by id or by (case-sensitive) name."""
    return {
        role_id
        for role_id, game in mapping.items()
        if _loosely_equal(game, videogame.id) or _loosely_equal(game, videogame.name)
    }


def add_participation(
    players: dict[int, Player],
    member: MemberSnapshot,
    role_ids: Iterable[int],
    *,
    handle: str,
    prefix: str | None,
) -> Player:
    """Fold one matched registration into the per-member player table."""
    player = players.get(member.id)
    if player is None:
        player = Player(member=member, handle=handle, prefix=prefix)
        players[member.id] = player
    player.role_ids.update(role_ids)
    return player


def strip_targets(
    members: Sequence[MemberSnapshot],
    players: Iterable[Player],
    temporary_role_ids: Iterable[int],
) -> list[MemberSnapshot]:
    """Return non-participants who still hold a temporary role."""
    temporary = frozenset(temporary_role_ids)
    if not temporary:
        return []
    participant_ids = {player.member.id for player in players}
    return [
        member
        for member in members
        if member.id not in participant_ids and member.holds_any(temporary)
    ]


def diff_roles(player: Player, managed_role_ids: Iterable[int]) -> RoleDiff:
    current = player.member.role_ids
    managed = frozenset(managed_role_ids)
    wanted = frozenset(player.role_ids)
    return RoleDiff(
        to_add=wanted - current,
        to_remove=(managed & current) - wanted,
    )
