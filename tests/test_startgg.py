"""Tests for the start.gg tournament directory client."""

from unittest.mock import MagicMock

import pytest

from bracket_sync.errors import DirectoryError, TournamentNotFound
from bracket_sync.models import Participant
from bracket_sync.startgg import (
    ENTRANTS_QUERY,
    EVENTS_QUERY,
    PAGE_SIZE,
    StartGGDirectory,
)


def make_response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = str(payload)
    return response


def make_session(*payloads):
    session = MagicMock()
    session.headers = {}
    session.post.side_effect = [
        payload if isinstance(payload, MagicMock) else make_response(payload)
        for payload in payloads
    ]
    return session


def entrants_page(total_pages, *participants):
    return {
        "data": {
            "event": {
                "entrants": {
                    "nodes": [{"participants": list(participants)}],
                    "pageInfo": {"totalPages": total_pages},
                }
            }
        }
    }


class TestStartGGDirectory:
    def test_sets_auth_header(self):
        session = make_session()
        StartGGDirectory("secret", session=session)
        assert session.headers["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_list_events(self):
        session = make_session(
            {
                "data": {
                    "tournament": {
                        "events": [
                            {"id": 11, "videogame": {"id": 1, "name": "Melee"}},
                            {"id": 12, "videogame": {"id": 1386, "name": "Ultimate"}},
                        ]
                    }
                }
            }
        )
        directory = StartGGDirectory("token", session=session)

        events = await directory.list_events("tournament/genesis")

        assert [(e.id, e.videogame.id, e.videogame.name) for e in events] == [
            (11, 1, "Melee"),
            (12, 1386, "Ultimate"),
        ]
        _, kwargs = session.post.call_args
        assert kwargs["json"] == {
            "query": EVENTS_QUERY,
            "variables": {"slug": "tournament/genesis"},
        }

    @pytest.mark.asyncio
    async def test_unknown_tournament(self):
        session = make_session({"data": {"tournament": None}})
        directory = StartGGDirectory("token", session=session)

        with pytest.raises(TournamentNotFound):
            await directory.list_events("tournament/missing")

    @pytest.mark.asyncio
    async def test_participants_are_fetched_page_by_page(self):
        linked = {
            "gamerTag": "Foo",
            "prefix": "Team",
            "user": {"authorizations": [{"externalUsername": "foo#1234"}]},
        }
        unlinked = {"gamerTag": "Bar", "prefix": None, "user": None}
        no_auth = {"gamerTag": "Baz", "prefix": "", "user": {"authorizations": None}}
        session = make_session(
            entrants_page(2, linked, unlinked),
            entrants_page(2, no_auth),
        )
        directory = StartGGDirectory("token", session=session)

        participants = await directory.list_participants(42)

        assert participants == [
            Participant(handle="Foo", prefix="Team", linked_account_tag="foo#1234"),
            Participant(handle="Bar"),
            Participant(handle="Baz"),
        ]
        pages = [
            call.kwargs["json"]["variables"] for call in session.post.call_args_list
        ]
        assert pages == [
            {"eventId": 42, "page": 1, "perPage": PAGE_SIZE},
            {"eventId": 42, "page": 2, "perPage": PAGE_SIZE},
        ]
        assert session.post.call_args.kwargs["json"]["query"] == ENTRANTS_QUERY

    @pytest.mark.asyncio
    async def test_empty_event(self):
        session = make_session(
            {
                "data": {
                    "event": {
                        "entrants": {"nodes": [], "pageInfo": {"totalPages": 0}}
                    }
                }
            }
        )
        directory = StartGGDirectory("token", session=session)

        assert await directory.list_participants(1) == []
        assert session.post.call_count == 1

    @pytest.mark.asyncio
    async def test_http_error(self):
        session = make_session(make_response({}, status_code=500))
        directory = StartGGDirectory("token", session=session)

        with pytest.raises(DirectoryError, match="HTTP 500"):
            await directory.list_events("tournament/x")

    @pytest.mark.asyncio
    async def test_graphql_error(self):
        session = make_session({"errors": [{"message": "Invalid token"}]})
        directory = StartGGDirectory("token", session=session)

        with pytest.raises(DirectoryError, match="Invalid token"):
            await directory.list_participants(1)

    def test_close_closes_session(self):
        session = make_session()
        StartGGDirectory("token", session=session).close()
        session.close.assert_called_once()
