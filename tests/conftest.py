"""Shared fixtures: offline events, a scripted agent, and a clean environment."""

from __future__ import annotations

import io
from typing import AsyncIterator, List, Optional

import pytest
from google.adk.agents import BaseAgent
from google.adk.events import Event
from google.genai import types
from pydantic import Field
from rich.console import Console

from search_agent import config

ENV_VARS = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GOOGLE_GENAI_USE_VERTEXAI",
    "GOOGLE_CLOUD_PROJECT",
    "GOOGLE_CLOUD_LOCATION",
    "SEARCH_AGENT_MODEL",
    "SEARCH_AGENT_APP_NAME",
    "SEARCH_AGENT_USER_ID",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start each test without credentials and with the env file unloaded."""
    for name in ENV_VARS:
        # setenv first so teardown also removes values written by load_dotenv
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    config.reset_environment_state()
    yield
    config.reset_environment_state()


@pytest.fixture
def console_buffer():
    buf = io.StringIO()
    console = Console(file=buf, force_terminal=False, color_system=None, width=200)
    return console, buf


# ============================================================================
# EVENT BUILDERS
# ============================================================================

def partial(text: str, author: str = "basic_search_agent") -> Event:
    return Event(
        author=author,
        partial=True,
        content=types.Content(role="model", parts=[types.Part(text=text)]),
    )


def final(text: str = "", author: str = "basic_search_agent") -> Event:
    return Event(
        author=author,
        partial=False,
        content=types.Content(role="model", parts=[types.Part(text=text)]),
    )


def error_event(code: str, message: str, author: str = "basic_search_agent") -> Event:
    return Event(author=author, error_code=code, error_message=message)


async def event_source(*events: Event, fail_with: Optional[Exception] = None) -> AsyncIterator[Event]:
    for event in events:
        yield event
    if fail_with is not None:
        raise fail_with


# ============================================================================
# SCRIPTED AGENT
# Replays fixed fragments through the real ADK runner without a model.
# ============================================================================

class ScriptedAgent(BaseAgent):
    fragments: List[str] = Field(default_factory=list)

    async def _run_async_impl(self, ctx):
        for text in self.fragments:
            yield Event(
                author=self.name,
                invocation_id=ctx.invocation_id,
                partial=True,
                content=types.Content(role="model", parts=[types.Part(text=text)]),
            )
        yield Event(
            author=self.name,
            invocation_id=ctx.invocation_id,
            content=types.Content(role="model", parts=[types.Part(text="".join(self.fragments))]),
        )
