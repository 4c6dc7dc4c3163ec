from __future__ import annotations


class SyncError(RuntimeError):
    """Base exception for conditions that abort a sync run."""


class GuildNotFound(SyncError):
    def __init__(self, guild_id: int) -> None:
        super().__init__(f"Unable to find server: {guild_id}")
        self.guild_id = guild_id


class RolesNotFound(SyncError):
    def __init__(self, role_ids) -> None:
        ids = ", ".join(str(role_id) for role_id in sorted(role_ids))
        super().__init__(f"None of the given roles found on server: {ids}")
        self.role_ids = frozenset(role_ids)


class TournamentNotFound(SyncError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"Unable to find tournament: {slug}")
        self.slug = slug


class DirectoryError(SyncError):
    """Raised when the tournament directory returns an unusable response."""


class InvalidConfigError(ValueError):
    """Raised when the role mapping file is malformed."""
