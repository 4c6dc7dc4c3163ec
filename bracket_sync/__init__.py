"""Sync Discord roles and nicknames with start.gg tournament registrations."""

from .config import ShadowConfig, SyncConfig
from .errors import (
    DirectoryError,
    GuildNotFound,
    InvalidConfigError,
    RolesNotFound,
    SyncError,
    TournamentNotFound,
)
from .matching import match_member
from .models import (
    Event,
    MemberSnapshot,
    Participant,
    Player,
    RoleDiff,
    RoleSnapshot,
    SyncSummary,
    Videogame,
    full_handle,
)
from .nicknames import decide_nickname, similarity
from .roles import diff_roles, roles_for_game, strip_targets
from .sync import run_sync

__all__ = [
    "ShadowConfig",
    "SyncConfig",
    "DirectoryError",
    "GuildNotFound",
    "InvalidConfigError",
    "RolesNotFound",
    "SyncError",
    "TournamentNotFound",
    "match_member",
    "Event",
    "MemberSnapshot",
    "Participant",
    "Player",
    "RoleDiff",
    "RoleSnapshot",
    "SyncSummary",
    "Videogame",
    "full_handle",
    "decide_nickname",
    "similarity",
    "diff_roles",
    "roles_for_game",
    "strip_targets",
    "run_sync",
]
