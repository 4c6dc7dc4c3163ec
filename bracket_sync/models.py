from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

FULL_HANDLE_SEPARATOR = " | "


def full_handle(handle: str, prefix: str | None) -> str:
    """Return ``"prefix | handle"`` or the bare handle when there is no prefix."""
    if prefix:
        return f"{prefix}{FULL_HANDLE_SEPARATOR}{handle}"
    return handle


@dataclass(slots=True, frozen=True)
class Videogame:
    id: int | str
    name: str


@dataclass(slots=True, frozen=True)
class Event:
    id: int | str
    videogame: Videogame

    @classmethod
    def from_node(cls, node: dict[str, object]) -> Event:
        game = node.get("videogame") or {}
        return cls(
            id=node["id"],
            videogame=Videogame(id=game.get("id"), name=str(game.get("name") or "")),
        )


@dataclass(slots=True, frozen=True)
class Participant:
    handle: str
    prefix: str | None = None
    linked_account_tag: str | None = None

    @property
    def full_handle(self) -> str:
        return full_handle(self.handle, self.prefix)

    @classmethod
    def from_node(cls, node: dict[str, object]) -> Participant:
        linked_tag = None
        user = node.get("user") or {}
        authorizations = user.get("authorizations") or []
        if authorizations:
            linked_tag = authorizations[0].get("externalUsername") or None
        return cls(
            handle=str(node.get("gamerTag") or ""),
            prefix=node.get("prefix") or None,
            linked_account_tag=linked_tag,
        )


@dataclass(slots=True, frozen=True)
class RoleSnapshot:
    id: int
    name: str


@dataclass(slots=True, frozen=True)
class MemberSnapshot:
    id: int
    username: str
    display_name: str
    role_ids: frozenset[int] = frozenset()
    discriminator: str = "0"

    @property
    def tag(self) -> str:
        # Accounts migrated to unique usernames report discriminator "0".
        if self.discriminator and self.discriminator != "0":
            return f"{self.username}#{self.discriminator}"
        return self.username

    def holds_any(self, role_ids: Iterable[int]) -> bool:
        return not self.role_ids.isdisjoint(role_ids)


@dataclass(slots=True)
class Player:
    member: MemberSnapshot
    handle: str
    prefix: str | None = None
    role_ids: set[int] = field(default_factory=set)

    @property
    def full_handle(self) -> str:
        return full_handle(self.handle, self.prefix)


@dataclass(slots=True, frozen=True)
class RoleDiff:
    to_add: frozenset[int] = frozenset()
    to_remove: frozenset[int] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


@dataclass(slots=True)
class SyncSummary:
    players: int = 0
    stripped_members: int = 0
    roles_added: int = 0
    roles_removed: int = 0
    renamed: int = 0

    def lines(self) -> list[str]:
        return [
            f"Matched players: {self.players}",
            f"Former participants stripped: {self.stripped_members}",
            f"Role additions: {self.roles_added}",
            f"Role removals: {self.roles_removed}",
            f"Nicknames updated: {self.renamed}",
        ]
