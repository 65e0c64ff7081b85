from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from market_chat.application.exceptions import ServerRejection, TransportFailure
from market_chat.client.send_pipeline import SEND_FAILED
from market_chat.client.session import MessagingSession
from market_chat.client.state import Confirmed, Rejected
from market_chat.domain.entities.attachment import Attachment
from tests.conftest import BASE_TIME, FixedClock


def _session(gateway, **kwargs) -> MessagingSession:
    kwargs.setdefault("clock", FixedClock(BASE_TIME + timedelta(hours=2)))
    kwargs.setdefault("send_timeout", 5.0)
    return MessagingSession(gateway, "me", **kwargs)


async def _start_send(session: MessagingSession, content: str) -> asyncio.Task:
    task = asyncio.create_task(session.send(content))
    # One loop turn runs the synchronous Pending render.
    await asyncio.sleep(0)
    return task


@pytest.mark.asyncio
async def test_pending_is_rendered_before_server_replies(gateway):
    gateway.release = asyncio.Event()
    session = _session(gateway)
    await session.mount()

    task = await _start_send(session, "Is it still available?")

    last = session.view.displayed[-1]
    assert last.is_pending
    assert last.id.startswith("temp-")
    assert last.content == "Is it still available?"
    assert not session.view.can_compose()
    assert session.view.composer.draft == ""

    gateway.release.set()
    assert isinstance(await task, Confirmed)
    assert session.view.can_compose()


@pytest.mark.asyncio
async def test_confirmation_replaces_pending_in_place(gateway):
    gateway.release = asyncio.Event()
    gateway.server_ids = ["m99"]
    session = _session(gateway)
    await session.mount("u1")
    before = session.view.displayed

    task = await _start_send(session, "Can you ship tomorrow?")
    temp_id = session.view.displayed[-1].id
    assert [m.id for m in session.view.displayed] == ["a1", "a2", temp_id]

    gateway.release.set()
    result = await task

    assert result == Confirmed("m99")
    assert [m.id for m in session.view.displayed] == ["a1", "a2", "m99"]
    assert session.view.displayed[:2] == before
    assert gateway.sent[0].client_msg_id == temp_id


@pytest.mark.asyncio
async def test_sequential_sends_keep_submission_order(gateway):
    session = _session(gateway)
    await session.mount("u1")

    for text in ("one", "two", "three"):
        assert isinstance(await session.send(text), Confirmed)

    assert [m.content for m in session.view.displayed][-3:] == ["one", "two", "three"]
    assert not any(m.is_pending for m in session.view.displayed)


@pytest.mark.parametrize(
    ("error", "notice"),
    [
        (TransportFailure("connection refused"), SEND_FAILED),
        (ServerRejection("Receiver not found"), "Receiver not found"),
    ],
)
@pytest.mark.asyncio
async def test_failed_send_rolls_back(gateway, error, notice):
    gateway.send_error = error
    session = _session(gateway)
    await session.mount("u1")
    before = session.view.displayed

    result = await session.send("Hello?")

    assert isinstance(result, Rejected)
    assert session.view.displayed == before
    assert session.view.notices[-1].text == notice
    assert session.view.notices[-1].conversation_id == "u1"
    assert session.view.composer.draft == "Hello?"
    assert session.view.can_compose()


@pytest.mark.asyncio
async def test_timeout_is_treated_as_failure(gateway):
    gateway.release = asyncio.Event()
    session = _session(gateway, send_timeout=0.01)
    await session.mount("u1")
    before = session.view.displayed

    result = await session.send("Anyone?")

    assert isinstance(result, Rejected)
    assert result.reason == SEND_FAILED
    assert session.view.displayed == before


@pytest.mark.asyncio
async def test_notice_can_be_dismissed(gateway):
    gateway.send_error = TransportFailure("offline")
    session = _session(gateway)
    await session.mount("u1")
    await session.send("x")

    session.dismiss_notice(session.view.notices[0].id)

    assert session.view.notices == []


@pytest.mark.parametrize("content", ["", "   ", "\n\t"])
@pytest.mark.asyncio
async def test_blank_content_is_silent_noop(gateway, content):
    session = _session(gateway)
    await session.mount("u1")
    before = session.view.displayed

    assert await session.send(content) is None

    assert session.view.displayed == before
    assert session.view.notices == []
    assert gateway.sent == []


@pytest.mark.asyncio
async def test_no_selection_or_identity_is_silent_noop(gateway):
    session = _session(gateway)
    assert await session.send("hello") is None

    anonymous = MessagingSession(gateway, None)
    await anonymous.mount()
    assert await anonymous.send("hello") is None
    assert gateway.sent == []


@pytest.mark.asyncio
async def test_second_send_while_in_flight_is_ignored(gateway):
    gateway.release = asyncio.Event()
    session = _session(gateway)
    await session.mount("u1")

    first = await _start_send(session, "first")
    assert session.submit("second") is None
    assert len([m for m in session.view.displayed if m.is_pending]) == 1

    gateway.release.set()
    await first
    assert len(gateway.sent) == 1


@pytest.mark.asyncio
async def test_switching_conversation_mid_send(gateway):
    gateway.release = asyncio.Event()
    gateway.server_ids = ["m7"]
    session = _session(gateway)
    await session.mount("u1")

    task = await _start_send(session, "for u1")
    await session.select("u2")
    u2_thread = session.view.displayed

    gateway.release.set()
    await task

    assert session.view.selected_id == "u2"
    assert session.view.displayed == u2_thread
    assert session.view.thread("u1")[-1].id == "m7"
    assert session.view.conversations[0].id == "u1"
    assert session.view.conversations[0].last_message == "for u1"


@pytest.mark.asyncio
async def test_failure_after_switch_does_not_restore_draft_elsewhere(gateway):
    gateway.release = asyncio.Event()
    gateway.send_error = TransportFailure("offline")
    session = _session(gateway)
    await session.mount("u1")

    task = await _start_send(session, "for u1")
    await session.select("u2")
    gateway.release.set()
    await task

    assert session.view.composer.draft == ""
    assert [m.id for m in session.view.thread("u1")] == ["a1", "a2"]
    assert session.view.notices[-1].conversation_id == "u1"


@pytest.mark.asyncio
async def test_attachment_only_send(gateway):
    session = _session(gateway)
    await session.mount("u1")
    attachment = Attachment(url="https://cdn.test/a.pdf", name="a.pdf", type="application/pdf", size=3)
    session.view.composer.attachment = attachment

    result = await session.send("")

    assert isinstance(result, Confirmed)
    assert gateway.sent[0].attachment == attachment
    assert session.view.composer.attachment is None
    assert session.view.conversations[0].last_message == "Sent an attachment"


@pytest.mark.asyncio
async def test_send_carries_conversation_order(gateway):
    session = _session(gateway)
    await session.mount("u1")

    await session.send("About the order")

    assert gateway.sent[0].order_id == "o1"
    assert gateway.sent[0].channel == "product"


@pytest.mark.asyncio
async def test_unmount_cancels_outstanding_send(gateway):
    gateway.release = asyncio.Event()
    session = _session(gateway)
    await session.mount("u1")

    pending = session.submit("bye")
    assert pending is not None
    await asyncio.sleep(0)

    await session.unmount()

    assert pending.id not in {m.id for m in session.view.thread("u1")}
    assert session.view.notices == []
    assert session.view.in_flight == set()
    assert session.view.mounted is False


@pytest.mark.asyncio
async def test_start_conversation_with_new_counterparty(gateway):
    session = _session(gateway)
    await session.mount()

    session.start_conversation("u9", "New seller", subject="Desk lamp", order_id="o9")
    result = await session.send("Hi, is the lamp available?")

    assert isinstance(result, Confirmed)
    assert session.view.placeholder is None
    assert session.view.conversations[0].id == "u9"
    assert session.view.conversations[0].subject == "Desk lamp"
    assert gateway.sent[0].receiver_id == "u9"
    assert gateway.sent[0].order_id == "o9"


@pytest.mark.asyncio
async def test_selecting_unknown_counterparty_allows_sending(gateway):
    session = _session(gateway)
    await session.mount()

    assert await session.select("u9", "New seller") is True
    assert session.view.selected.counterparty_name == "New seller"

    result = await session.send("Hello there")

    assert isinstance(result, Confirmed)
    assert gateway.sent[0].receiver_id == "u9"
    assert session.view.conversations[0].id == "u9"
