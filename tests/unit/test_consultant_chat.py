"""
Unit tests for the consultant chat transcript.
"""

import asyncio
from itertools import count
from unittest.mock import AsyncMock, MagicMock

import pytest

from careerpath.consultant_chat import (
    CONNECTION_TROUBLE_MESSAGE,
    GREETING_ID,
    ConsultantChat,
)
from careerpath.errors import ChatTransportError


@pytest.fixture
def session():
    session = MagicMock()
    session.send = AsyncMock(return_value="Great question!")
    return session


@pytest.fixture
def session_factory(session):
    return MagicMock(return_value=session)


@pytest.fixture
def clock():
    ticks = count(1_700_000_000_000, 1000)
    return lambda: next(ticks)


@pytest.fixture
def chat(jane_profile, session_factory, clock):
    return ConsultantChat(jane_profile, session_factory, clock=clock, correlation_id="test")


class TestGreeting:
    """Test cases for the initial transcript."""

    def test_starts_with_greeting(self, chat):
        messages = chat.messages

        assert len(messages) == 1
        assert messages[0].id == GREETING_ID
        assert messages[0].role == "model"
        assert messages[0].text == (
            "Hi Jane! I've analyzed your profile. I'm ready to help you navigate "
            "from Senior Dev to Lead Dev. What's on your mind?"
        )

    def test_no_session_until_first_send(self, chat, session_factory):
        assert chat.has_session is False
        session_factory.assert_not_called()


class TestSend:
    """Test cases for sending user turns."""

    @pytest.mark.asyncio
    async def test_appends_user_and_model_messages(self, chat, session):
        # Act
        reply = await chat.send("How do I get promoted?")

        # Assert
        messages = chat.messages
        assert [m.role for m in messages] == ["model", "user", "model"]
        assert messages[1].text == "How do I get promoted?"
        assert reply is messages[2]
        assert reply.text == "Great question!"
        assert chat.is_typing is False
        session.send.assert_awaited_once_with("How do I get promoted?")

    @pytest.mark.asyncio
    async def test_session_reused_across_turns(self, chat, session_factory):
        await chat.send("one")
        await chat.send("two")

        session_factory.assert_called_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_input_ignored(self, chat, session, text):
        assert await chat.send(text) is None
        assert len(chat.messages) == 1
        session.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_appends_apology(self, chat, session):
        # Arrange
        session.send.side_effect = ChatTransportError("Chat turn failed: 503")

        # Act
        reply = await chat.send("hello")

        # Assert
        assert reply.role == "model"
        assert reply.text == CONNECTION_TROUBLE_MESSAGE
        assert chat.messages[-1] == reply
        assert chat.is_typing is False

    @pytest.mark.asyncio
    async def test_session_creation_failure_appends_apology(self, chat, session_factory):
        session_factory.side_effect = RuntimeError("bad key")

        reply = await chat.send("hello")

        assert reply.text == CONNECTION_TROUBLE_MESSAGE
        assert chat.is_typing is False

    @pytest.mark.asyncio
    async def test_ids_unique_and_timestamps_non_decreasing(self, jane_profile, session_factory):
        chat = ConsultantChat(jane_profile, session_factory, clock=lambda: 1000)

        await chat.send("one")
        await chat.send("two")

        messages = chat.messages
        ids = [m.id for m in messages]
        assert len(ids) == len(set(ids))
        timestamps = [m.timestamp for m in messages]
        assert timestamps == sorted(timestamps)

    @pytest.mark.asyncio
    async def test_timestamps_survive_clock_going_backwards(self, jane_profile, session_factory):
        ticks = iter([5000, 4000, 3000, 2000])
        chat = ConsultantChat(jane_profile, session_factory, clock=lambda: next(ticks))

        await chat.send("hi")

        assert [m.timestamp for m in chat.messages] == [5000, 5000, 5000]

    @pytest.mark.asyncio
    async def test_concurrent_sends_dispatch_once(self, chat, session):
        """Test that a second send while a reply is pending is ignored."""
        # Arrange
        release = asyncio.Event()

        async def slow_reply(turn):
            await release.wait()
            return "Done"

        session.send.side_effect = slow_reply

        # Act
        first = asyncio.create_task(chat.send("first"))
        await asyncio.sleep(0)
        second = await chat.send("second")
        release.set()
        reply = await first

        # Assert
        assert second is None
        assert reply.text == "Done"
        assert session.send.await_count == 1
        assert [m.text for m in chat.messages][1:] == ["first", "Done"]

    @pytest.mark.asyncio
    async def test_gathered_sends_dispatch_once(self, chat, session):
        async def yielding_reply(turn):
            await asyncio.sleep(0)
            return "Done"

        session.send.side_effect = yielding_reply

        results = await asyncio.gather(chat.send("a"), chat.send("b"))

        assert session.send.await_count == 1
        assert sum(r is not None for r in results) == 1


class TestReset:
    """Test cases for resetting the conversation."""

    @pytest.mark.asyncio
    async def test_reset_keeps_only_greeting(self, chat):
        await chat.send("one")
        await chat.send("two")

        chat.reset()

        assert len(chat.messages) == 1
        assert chat.messages[0].id == GREETING_ID
        assert chat.has_session is False

    @pytest.mark.asyncio
    async def test_reset_starts_new_session(self, chat, session_factory):
        await chat.send("one")
        chat.reset()
        await chat.send("two")

        assert session_factory.call_count == 2

    @pytest.mark.asyncio
    async def test_reply_pending_during_reset_is_dropped(self, chat, session):
        # Arrange
        release = asyncio.Event()

        async def slow_reply(turn):
            await release.wait()
            return "stale"

        session.send.side_effect = slow_reply
        task = asyncio.create_task(chat.send("before reset"))
        await asyncio.sleep(0)

        # Act
        chat.reset()
        release.set()
        result = await task

        # Assert
        assert result is None
        assert len(chat.messages) == 1
        assert chat.is_typing is False

    def test_messages_returns_copy(self, chat):
        chat.messages.clear()

        assert len(chat.messages) == 1
