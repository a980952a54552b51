"""
Turn runner: create a session, send one message, stream the reply.

Output goes to a rich Console as it arrives. Partial events are printed
immediately; the final (non-partial) event of a response repeats text that
was already streamed, so it is not printed again. Per-event errors are
printed inline and do not stop the turn.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from google.adk.agents import BaseAgent, RunConfig
from google.adk.agents.run_config import StreamingMode
from google.adk.events import Event
from google.adk.runners import Runner
from google.adk.sessions import BaseSessionService, InMemorySessionService
from google.genai import types
from rich.console import Console

from search_agent.config import DEFAULT_APP_NAME, DEFAULT_USER_ID
from search_agent.errors import (
    ConfigurationError,
    RunnerConstructionError,
    SessionCreationError,
)
from search_agent.stream import EventStream

logger = logging.getLogger(__name__)

ERROR_PREFIX = "AGENT_ERROR"


@dataclass
class TurnResult:
    """What one turn put on the console."""

    fragments: List[str] = field(default_factory=list)
    errors: List[BaseException] = field(default_factory=list)
    events: int = 0
    cancelled: bool = False

    @property
    def text(self) -> str:
        return "".join(self.fragments)


# =============================================================================
# CONSOLE OUTPUT
# =============================================================================

def write_fragment(console: Console, text: str) -> None:
    """Append text to the console exactly as given."""
    console.print(
        text,
        end="",
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
    )


def write_error(console: Console, error: BaseException) -> None:
    console.print(
        f"\n{ERROR_PREFIX}: {error}",
        end="",
        style="red",
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
    )


def _event_texts(event: Event) -> List[str]:
    if not event.content or not event.content.parts:
        return []
    return [part.text for part in event.content.parts if part.text]


# =============================================================================
# EVENT CONSUMPTION
# =============================================================================

async def consume_stream(stream: EventStream, console: Console) -> TurnResult:
    """
    Print a turn's events in order until the stream ends.

    Args:
        stream: Event stream for the turn; consumed exactly once
        console: Output sink

    Returns:
        TurnResult with the printed fragments and the errors seen
    """
    result = TurnResult()

    async for item in stream:
        if item.is_error:
            result.errors.append(item.error)
            write_error(console, item.error)
            continue

        event = item.event
        result.events += 1
        texts = _event_texts(event)

        if not event.partial:
            # Final events repeat the streamed text; output only comes from partials.
            logger.debug(
                "Final event from %s not re-emitted (%d chars)",
                event.author,
                sum(len(t) for t in texts),
            )
            continue

        for text in texts:
            write_fragment(console, text)
            result.fragments.append(text)

    result.cancelled = stream.cancelled
    logger.debug(
        "Turn finished: events=%d fragments=%d errors=%d cancelled=%s",
        result.events,
        len(result.fragments),
        len(result.errors),
        result.cancelled,
    )
    return result


# =============================================================================
# TURN SETUP
# =============================================================================

def build_user_message(prompt: str) -> types.Content:
    return types.Content(role="user", parts=[types.Part(text=prompt)])


async def call_agent(
    agent: BaseAgent,
    prompt: str,
    *,
    console: Console,
    app_name: str = DEFAULT_APP_NAME,
    user_id: str = DEFAULT_USER_ID,
    session_service: Optional[BaseSessionService] = None,
    cancel: Optional[asyncio.Event] = None,
) -> TurnResult:
    """
    Run one conversational turn and stream it to the console.

    Args:
        agent: Agent to run
        prompt: User message text
        console: Output sink
        app_name: Session scope application name
        user_id: Session scope user
        session_service: Session store; a fresh in-memory store by default
        cancel: Optional token; setting it stops output at the next event

    Returns:
        TurnResult for the turn

    Raises:
        ConfigurationError: If the prompt is empty
        SessionCreationError: If the session cannot be created
        RunnerConstructionError: If the runner cannot be built
    """
    if not prompt or not prompt.strip():
        raise ConfigurationError("prompt must not be empty")

    if session_service is None:
        session_service = InMemorySessionService()

    try:
        session = await session_service.create_session(app_name=app_name, user_id=user_id)
    except Exception as e:
        raise SessionCreationError(f"failed to create the session: {e}") from e
    logger.info("Session created: %s (app=%s user=%s)", session.id, app_name, user_id)

    try:
        runner = Runner(app_name=app_name, agent=agent, session_service=session_service)
    except Exception as e:
        raise RunnerConstructionError(f"failed to create the runner: {e}") from e

    events = runner.run_async(
        user_id=user_id,
        session_id=session.id,
        new_message=build_user_message(prompt),
        run_config=RunConfig(streaming_mode=StreamingMode.SSE),
    )
    return await consume_stream(EventStream(events, cancel=cancel), console)


__all__ = [
    "ERROR_PREFIX",
    "TurnResult",
    "build_user_message",
    "call_agent",
    "consume_stream",
    "write_error",
    "write_fragment",
]
