"""Discord guild wrapper acting as the roster store."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import discord

from .config import ShadowConfig
from .errors import GuildNotFound
from .models import MemberSnapshot, RoleSnapshot
from .shadow import ShadowReporter

log = logging.getLogger(__name__)


def snapshot_member(member: discord.Member) -> MemberSnapshot:
    return MemberSnapshot(
        id=member.id,
        username=member.name,
        discriminator=str(member.discriminator),
        display_name=member.display_name,
        role_ids=frozenset(role.id for role in member.roles),
    )


class DiscordRoster:
    """Reads and mutates a single guild over the REST API.

    Members are fetched once per run; mutations address them by id.
    """

    def __init__(
        self,
        client: discord.Client,
        guild_id: int,
        *,
        shadow: ShadowReporter | None = None,
    ) -> None:
        self._client = client
        self._guild_id = guild_id
        self._guild: discord.Guild | None = None
        self._members: dict[int, discord.Member] = {}
        self._shadow = shadow or ShadowReporter(ShadowConfig(enabled=False))

    @property
    def guild(self) -> discord.Guild:
        if self._guild is None:
            raise RuntimeError("Guild has not been resolved yet")
        return self._guild

    async def resolve_guild(self) -> discord.Guild:
        guild = self._client.get_guild(self._guild_id)
        if guild is None:
            try:
                guild = await self._client.fetch_guild(self._guild_id)
            except (discord.NotFound, discord.Forbidden) as exc:
                log.debug("Guild fetch for %s failed: %s", self._guild_id, exc)
                raise GuildNotFound(self._guild_id) from exc
        log.info("Server: %s", guild.id)
        self._guild = guild
        return guild

    async def get_managed_roles(self, role_ids: Iterable[int]) -> list[RoleSnapshot]:
        wanted = set(role_ids)
        roles = await self.guild.fetch_roles()
        return [
            RoleSnapshot(id=role.id, name=role.name)
            for role in roles
            if role.id in wanted
        ]

    async def list_members(self) -> list[MemberSnapshot]:
        self._members = {}
        async for member in self.guild.fetch_members(limit=None):
            self._members[member.id] = member
        log.info(
            "Fetched %d member(s) from server %s", len(self._members), self.guild.id
        )
        return [snapshot_member(member) for member in self._members.values()]

    def _member(self, member_id: int) -> discord.Member:
        try:
            return self._members[member_id]
        except KeyError:
            raise KeyError(
                f"Member {member_id} was not part of the fetched roster"
            ) from None

    async def add_roles(
        self, member_id: int, role_ids: Iterable[int], *, reason: str | None = None
    ) -> None:
        member = self._member(member_id)
        roles = [discord.Object(id=role_id) for role_id in sorted(role_ids)]
        await self._shadow.noop_or_run(
            f"add roles {[role.id for role in roles]} to {member}",
            member.add_roles(*roles, reason=reason),
        )

    async def remove_roles(
        self, member_id: int, role_ids: Iterable[int], *, reason: str | None = None
    ) -> None:
        member = self._member(member_id)
        roles = [discord.Object(id=role_id) for role_id in sorted(role_ids)]
        await self._shadow.noop_or_run(
            f"remove roles {[role.id for role in roles]} from {member}",
            member.remove_roles(*roles, reason=reason),
        )

    async def set_nickname(
        self, member_id: int, nickname: str, *, reason: str | None = None
    ) -> None:
        member = self._member(member_id)
        await self._shadow.noop_or_run(
            f"rename {member} to {nickname}",
            member.edit(nick=nickname, reason=reason),
        )
