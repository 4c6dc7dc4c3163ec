"""Configuration helpers for the sync runtime."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .errors import InvalidConfigError

DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_CREDENTIALS_PATH = "credentials.json"
DEFAULT_STARTGG_ENDPOINT = "https://api.start.gg/gql/alpha"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def env_bool(name: str, *, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


@dataclass(frozen=True)
class ShadowConfig:
    enabled: bool


def read_shadow_config(*, default_enabled: bool = False) -> ShadowConfig:
    return ShadowConfig(enabled=env_bool("SHADOW_MODE", default=default_enabled))


def _read_json(path: str | os.PathLike[str]) -> dict[str, object]:
    with open(path, encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise InvalidConfigError(f"{path} must contain a JSON object")
    return data


def _parse_role_mapping(raw: object, key: str) -> dict[int, int | str]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise InvalidConfigError(f"'{key}' must map role ids to games")
    mapping: dict[int, int | str] = {}
    for role_id, game in raw.items():
        try:
            parsed_id = int(role_id)
        except (TypeError, ValueError) as exc:
            raise InvalidConfigError(
                f"Role id in '{key}' must be numeric: {role_id}"
            ) from exc
        if not isinstance(game, (int, str)) or isinstance(game, bool):
            raise InvalidConfigError(
                f"Role {role_id} in '{key}' must map to a game id or name"
            )
        mapping[parsed_id] = game
    return mapping


@dataclass(frozen=True)
class SyncConfig:
    server_id: int
    temporary_roles: dict[int, int | str] = field(default_factory=dict)
    permanent_roles: dict[int, int | str] = field(default_factory=dict)

    @property
    def role_mapping(self) -> dict[int, int | str]:
        return {**self.permanent_roles, **self.temporary_roles}

    @property
    def temporary_role_ids(self) -> frozenset[int]:
        return frozenset(self.temporary_roles)

    @property
    def managed_role_ids(self) -> frozenset[int]:
        return frozenset(self.temporary_roles) | frozenset(self.permanent_roles)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> SyncConfig:
        try:
            server_id = int(data["server"])
        except KeyError as exc:
            raise InvalidConfigError("Config is missing 'server'") from exc
        except (TypeError, ValueError) as exc:
            raise InvalidConfigError(
                f"Server id must be numeric: {data['server']}"
            ) from exc

        temporary = _parse_role_mapping(data.get("temporaryRoles"), "temporaryRoles")
        permanent = _parse_role_mapping(data.get("permanentRoles"), "permanentRoles")
        if "temporaryRoles" not in data and "permanentRoles" not in data:
            # Legacy single mapping behaves like temporary roles.
            temporary = _parse_role_mapping(data.get("roles"), "roles")

        overlap = set(temporary) & set(permanent)
        if overlap:
            ids = ", ".join(str(role_id) for role_id in sorted(overlap))
            raise InvalidConfigError(
                f"Roles cannot be both temporary and permanent: {ids}"
            )
        if not temporary and not permanent:
            raise InvalidConfigError("No roles configured")

        return cls(
            server_id=server_id,
            temporary_roles=temporary,
            permanent_roles=permanent,
        )

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> SyncConfig:
        path = path or os.getenv("SYNC_CONFIG_PATH") or DEFAULT_CONFIG_PATH
        return cls.from_dict(_read_json(path))


@dataclass(slots=True)
class EnvironmentConfig:
    discord_token: str
    startgg_token: str
    startgg_endpoint: str = DEFAULT_STARTGG_ENDPOINT

    @classmethod
    def load(cls) -> EnvironmentConfig:
        """Read credentials from the environment, then from the credentials file."""
        discord_token = os.getenv("DISCORD_TOKEN") or ""
        startgg_token = os.getenv("STARTGG_TOKEN") or ""

        if not discord_token or not startgg_token:
            path = Path(os.getenv("CREDENTIALS_PATH") or DEFAULT_CREDENTIALS_PATH)
            if path.is_file():
                stored = _read_json(path)
                discord_token = discord_token or str(stored.get("discord") or "")
                startgg_token = startgg_token or str(stored.get("smashgg") or "")

        missing: list[str] = []
        if not discord_token:
            missing.append("DISCORD_TOKEN")
        if not startgg_token:
            missing.append("STARTGG_TOKEN")
        if missing:
            raise RuntimeError("Missing credentials: " + ", ".join(missing))

        return cls(
            discord_token=discord_token,
            startgg_token=startgg_token,
            startgg_endpoint=os.getenv("STARTGG_ENDPOINT") or DEFAULT_STARTGG_ENDPOINT,
        )
