"""Utilities for shadow-mode (dry-run) reporting."""

from __future__ import annotations

import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

from .config import ShadowConfig

log = logging.getLogger(__name__)

T = TypeVar("T")


class ShadowReporter:
    def __init__(self, config: ShadowConfig) -> None:
        self._config = config
        self.reports: list[str] = []

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def report(self, message: str) -> None:
        if not self.enabled:
            return
        self.reports.append(message)
        log.info("[SHADOW] %s", message)

    async def noop_or_run(
        self, description: str, coro: Coroutine[Any, Any, T]
    ) -> T | None:
        if self.enabled:
            coro.close()
            self.report(f"[noop] {description}")
            return None
        return await coro
