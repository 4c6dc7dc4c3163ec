"""start.gg GraphQL client acting as the tournament directory."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Final

import requests

from .config import DEFAULT_STARTGG_ENDPOINT
from .errors import DirectoryError, TournamentNotFound
from .models import Event, Participant

log: Final = logging.getLogger(__name__)

PAGE_SIZE: Final[int] = 128
REQUEST_TIMEOUT_SECONDS: Final[int] = 30

EVENTS_QUERY: Final[str] = """
query EventsQuery($slug: String) {
  tournament(slug: $slug) {
    events {
      id
      videogame {
        id
        name
      }
    }
  }
}
"""

ENTRANTS_QUERY: Final[str] = """
query EntrantsQuery($eventId: ID, $page: Int, $perPage: Int) {
  event(id: $eventId) {
    entrants(query: { perPage: $perPage, page: $page }) {
      nodes {
        participants {
          gamerTag
          prefix
          user {
            authorizations(types: [DISCORD]) {
              externalUsername
            }
          }
        }
      }
      pageInfo {
        totalPages
      }
    }
  }
}
"""


class StartGGDirectory:
    def __init__(
        self,
        token: str,
        *,
        endpoint: str = DEFAULT_STARTGG_ENDPOINT,
        session: requests.Session | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            }
        )

    def close(self) -> None:
        self._session.close()

    def _post(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        resp = self._session.post(
            self._endpoint,
            json={"query": query, "variables": variables},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        if resp.status_code != 200:
            raise DirectoryError(
                f"start.gg returned HTTP {resp.status_code}: {resp.text[:200]}"
            )
        payload = resp.json()
        errors = payload.get("errors")
        if errors:
            messages = "; ".join(str(err.get("message", err)) for err in errors)
            raise DirectoryError(f"start.gg query failed: {messages}")
        return payload.get("data") or {}

    async def request(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        return await asyncio.to_thread(self._post, query, variables)

    async def list_events(self, slug: str) -> list[Event]:
        data = await self.request(EVENTS_QUERY, {"slug": slug})
        tournament = data.get("tournament")
        if not tournament:
            raise TournamentNotFound(slug)
        events = [Event.from_node(node) for node in tournament.get("events") or []]
        log.info("Tournament %s has %d event(s)", slug, len(events))
        return events

    async def list_participants(self, event_id: int | str) -> list[Participant]:
        """Return every participant of an event, walking pages in order."""
        participants: list[Participant] = []
        page = 1
        total_pages = 1
        while page <= total_pages:
            data = await self.request(
                ENTRANTS_QUERY,
                {"eventId": event_id, "page": page, "perPage": PAGE_SIZE},
            )
            event = data.get("event")
            if not event:
                raise DirectoryError(f"Event {event_id} not found")
            entrants = event.get("entrants") or {}
            total_pages = (entrants.get("pageInfo") or {}).get("totalPages") or 0
            for node in entrants.get("nodes") or []:
                participants.extend(
                    Participant.from_node(participant)
                    for participant in node.get("participants") or []
                )
            page += 1
        log.debug(
            "Fetched %d participant(s) for event %s", len(participants), event_id
        )
        return participants
