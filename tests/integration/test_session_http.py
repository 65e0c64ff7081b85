"""MessagingSession driving the real API app through httpx.ASGITransport."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from market_chat.api.deps import get_uow
from market_chat.app import create_app
from market_chat.client.session import MessagingSession
from market_chat.client.state import Confirmed
from market_chat.domain.entities.account import Account
from market_chat.infrastructure.http.messages_gateway import HttpMessagesGateway
from tests.conftest import FakeUoW, make_message

LONG_AGO = datetime(2020, 1, 1, tzinfo=timezone.utc)


def _gateway_for(uow: FakeUoW) -> HttpMessagesGateway:
    app = create_app()

    async def _override():
        yield uow

    app.dependency_overrides[get_uow] = _override
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://chat.test")
    return HttpMessagesGateway(client)


@pytest.mark.asyncio
async def test_mount_send_and_refresh_round_trip():
    uow = FakeUoW()
    uow.accounts._accounts = {"u1": Account(id="u1", name="Alice", image=None)}
    uow.messages._messages.extend([
        make_message(message_id="a1", sender_id="u1", receiver_id="me", content="Hi", created_at=LONG_AGO),
    ])
    gateway = _gateway_for(uow)

    async with MessagingSession(gateway, "me", send_timeout=5.0) as session:
        view = session.view
        assert view.selected_id == "u1"
        assert view.entry("u1").unread_count == 0
        assert [m.id for m in view.displayed] == ["a1"]

        result = await session.send("Is the chair still available?")
        assert isinstance(result, Confirmed)
        assert [m.content for m in view.displayed] == ["Hi", "Is the chair still available?"]

        await session.refresh()
        assert view.conversations[0].last_message == "Is the chair still available?"

        # The server echoes clientMsgId, so a refetch does not duplicate the sent message.
        await session.select("u1")
        assert len(view.displayed) == 2

    await gateway.aclose()
    assert len(uow.messages._messages) == 2


@pytest.mark.asyncio
async def test_server_validation_surfaces_as_rejection():
    uow = FakeUoW()
    gateway = _gateway_for(uow)
    session = MessagingSession(gateway, "me", send_timeout=5.0)
    session.start_conversation("me", "Myself")

    result = await session.send("talking to myself")

    assert result is not None
    assert result.status == "rejected"
    assert session.view.notices[-1].text == "Cannot send a message to yourself"
    assert session.view.displayed == ()
    await gateway.aclose()


@pytest.mark.asyncio
async def test_opened_conversation_stays_read_after_refresh():
    uow = FakeUoW()
    uow.accounts._accounts = {
        "u1": Account(id="u1", name="Alice", image=None),
        "u2": Account(id="u2", name="Bob", image=None),
    }
    uow.messages._messages.extend([
        make_message(message_id="a1", sender_id="u1", receiver_id="me", content="Hi",
                     created_at=LONG_AGO + timedelta(days=1)),
        make_message(message_id="b1", sender_id="u2", receiver_id="me", content="Hello",
                     created_at=LONG_AGO),
    ])
    gateway = _gateway_for(uow)

    async with MessagingSession(gateway, "me", send_timeout=5.0) as session:
        view = session.view
        assert view.selected_id == "u1"
        assert view.entry("u1").unread_count == 0

        assert await session.refresh() is True
        assert view.entry("u1").unread_count == 0
        assert view.entry("u2").unread_count == 1

    # A fresh session sees the same counts because the server recorded the read.
    async with MessagingSession(gateway, "me", send_timeout=5.0) as again:
        assert again.view.entry("u1").unread_count == 0
        assert again.view.entry("u2").unread_count == 1

    await gateway.aclose()
