"""Command line entry point: sync a server's roles with one tournament."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

import discord

from .config import EnvironmentConfig, ShadowConfig, SyncConfig, read_shadow_config
from .errors import SyncError
from .models import SyncSummary
from .roster import DiscordRoster
from .shadow import ShadowReporter
from .startgg import StartGGDirectory
from .sync import run_sync

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

log = logging.getLogger("bracket-sync")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bracket-sync",
        description="Assign game roles and nicknames from start.gg registrations.",
    )
    parser.add_argument("tournament", help="start.gg tournament slug")
    parser.add_argument(
        "--config",
        help="Role mapping file (defaults to $SYNC_CONFIG_PATH or config.json)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report role and nickname changes without applying them",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


class SyncRuntime:
    """Owns the credentials, config and live sessions for a single run."""

    def __init__(
        self,
        env: EnvironmentConfig,
        config: SyncConfig,
        *,
        shadow_config: ShadowConfig | None = None,
    ) -> None:
        intents = discord.Intents.default()
        intents.guilds = True
        intents.members = True

        self.env = env
        self.config = config
        self.shadow_reporter = ShadowReporter(shadow_config or read_shadow_config())
        self.client = discord.Client(intents=intents)
        self.directory = StartGGDirectory(
            env.startgg_token, endpoint=env.startgg_endpoint
        )

    async def run(self, slug: str) -> SyncSummary:
        if self.shadow_reporter.enabled:
            log.info("Running in SHADOW mode, no changes will be applied")
        try:
            async with self.client:
                await self.client.login(self.env.discord_token)
                log.info("Logged in as %s!", self.client.user)
                roster = DiscordRoster(
                    self.client, self.config.server_id, shadow=self.shadow_reporter
                )
                await roster.resolve_guild()
                return await run_sync(self.directory, roster, self.config, slug)
        finally:
            self.directory.close()


async def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    try:
        env = EnvironmentConfig.load()
        config = SyncConfig.load(args.config)
    except (OSError, ValueError, RuntimeError) as exc:
        log.error("Configuration error: %s", exc)
        return 1

    shadow_config = read_shadow_config()
    if args.dry_run:
        shadow_config = ShadowConfig(enabled=True)

    runtime = SyncRuntime(env, config, shadow_config=shadow_config)
    try:
        summary = await runtime.run(args.tournament)
    except discord.LoginFailure as exc:
        log.error("Discord login failed: %s", exc)
        return 1
    except SyncError as exc:
        log.error("%s", exc)
        return 1

    for line in summary.lines():
        log.info("%s", line)
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))
