"""
Turn runner tests.

Runs call_agent through the real ADK Runner and in-memory session service,
using a scripted agent in place of Gemini.
"""

from __future__ import annotations

import asyncio

import pytest
from google.adk.sessions import InMemorySessionService

from conftest import ScriptedAgent
from search_agent import turn
from search_agent.errors import (
    ConfigurationError,
    RunnerConstructionError,
    SessionCreationError,
)
from search_agent.turn import build_user_message, call_agent


class FailingSessionService(InMemorySessionService):
    async def create_session(self, **kwargs):
        raise ConnectionError("session store unavailable")


class TestCallAgent:

    def test_streams_scripted_reply(self, console_buffer):
        console, buf = console_buffer
        agent = ScriptedAgent(name="scripted_agent", fragments=["Here", " are"])

        result = asyncio.run(call_agent(agent, "what's the latest ai news?", console=console))

        assert buf.getvalue() == "Here are"
        assert result.text == "Here are"
        assert result.errors == []
        assert result.cancelled is False

    def test_session_is_created_in_given_store(self, console_buffer):
        console, _ = console_buffer
        service = InMemorySessionService()
        agent = ScriptedAgent(name="scripted_agent", fragments=["ok"])

        async def scenario():
            await call_agent(
                agent,
                "hello",
                console=console,
                app_name="test_app",
                user_id="u1",
                session_service=service,
            )
            return await service.list_sessions(app_name="test_app", user_id="u1")

        listed = asyncio.run(scenario())
        assert len(listed.sessions) == 1

    def test_session_failure_is_fatal(self, console_buffer):
        console, buf = console_buffer
        agent = ScriptedAgent(name="scripted_agent", fragments=["never"])

        with pytest.raises(SessionCreationError, match="session store unavailable"):
            asyncio.run(
                call_agent(agent, "hi", console=console, session_service=FailingSessionService())
            )
        assert buf.getvalue() == ""

    def test_runner_failure_is_fatal(self, console_buffer, monkeypatch):
        console, _ = console_buffer

        def broken_runner(**kwargs):
            raise TypeError("bad runner config")

        monkeypatch.setattr(turn, "Runner", broken_runner)
        agent = ScriptedAgent(name="scripted_agent")

        with pytest.raises(RunnerConstructionError, match="bad runner config"):
            asyncio.run(call_agent(agent, "hi", console=console))

    def test_empty_prompt_rejected_before_session(self, console_buffer):
        console, _ = console_buffer
        agent = ScriptedAgent(name="scripted_agent")

        with pytest.raises(ConfigurationError):
            asyncio.run(
                call_agent(agent, "   ", console=console, session_service=FailingSessionService())
            )

    def test_cancel_token_set_before_run(self, console_buffer):
        console, buf = console_buffer
        agent = ScriptedAgent(name="scripted_agent", fragments=["Here", " are"])

        async def scenario():
            cancel = asyncio.Event()
            cancel.set()
            return await call_agent(agent, "hi", console=console, cancel=cancel)

        result = asyncio.run(scenario())
        assert buf.getvalue() == ""
        assert result.cancelled is True


class TestUserMessage:

    def test_single_user_text_part(self):
        message = build_user_message("what's the latest ai news?")
        assert message.role == "user"
        assert len(message.parts) == 1
        assert message.parts[0].text == "what's the latest ai news?"
