"""
EventStream - ordered, cancellable view over an agent's event generator.

The runner yields ADK events from an async generator. EventStream wraps it
so the console loop sees one StreamItem per event, each either a response
fragment or an error, and can be stopped from outside.

Suspension point: the ``await`` on the source's next event. Cancellation is
checked before waiting and again after an event arrives, so an event that
lands after the cancel token is set is dropped without side effects. While
the wait is pending, a watcher cancels the consumer's own task as soon as
the token is set; the source is never resumed from another task.

Only one consumer may iterate a stream instance.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from google.adk.events import Event

from search_agent.errors import AgentStreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreamItem:
    """One element of the stream: a response event or an error, never both."""

    event: Optional[Event] = None
    error: Optional[BaseException] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


def event_error(event: Event) -> Optional[AgentStreamError]:
    """Return the error carried by an event, if any."""
    if event.error_code or event.error_message:
        return AgentStreamError(
            event.error_message or "agent reported an error",
            code=str(event.error_code) if event.error_code else None,
        )
    return None


class EventStream:
    """Async iterator of StreamItem over a source of ADK events."""

    def __init__(
        self,
        source: AsyncIterator[Event],
        cancel: Optional[asyncio.Event] = None,
    ):
        self._source = source
        self._cancel = cancel
        self._consuming = False
        self._closed = False
        self.cancelled = False
        self._interrupted = False

    def __aiter__(self) -> "EventStream":
        if self._consuming:
            raise RuntimeError("EventStream already has a consumer")
        self._consuming = True
        return self

    def _cancel_requested(self) -> bool:
        return self._cancel is not None and self._cancel.is_set()

    async def __anext__(self) -> StreamItem:
        if self._closed:
            raise StopAsyncIteration
        if self._cancel_requested():
            await self._stop_cancelled()

        task = asyncio.current_task()
        watcher = None
        if self._cancel is not None and task is not None:
            watcher = asyncio.ensure_future(self._interrupt_on_cancel(task))

        try:
            event = await self._source.__anext__()
        except StopAsyncIteration:
            self._closed = True
            raise
        except asyncio.CancelledError:
            if not self._interrupted:
                self._closed = True
                raise
            # Our own interrupt: the token was set while the source was blocked.
            if hasattr(task, "uncancel"):
                task.uncancel()
            logger.debug("Cancel token interrupted a pending event wait")
            await self._stop_cancelled()
        except Exception as e:
            # A generator that raised cannot be resumed; report and finish.
            self._closed = True
            logger.warning("Event source failed: %s", e)
            return StreamItem(error=e)
        finally:
            if watcher is not None:
                watcher.cancel()

        if self._cancel_requested():
            logger.debug("Dropping event %s received after cancellation", event.id)
            await self._stop_cancelled()

        error = event_error(event)
        if error is not None:
            logger.warning("Agent event error: %s", error)
            return StreamItem(error=error)
        return StreamItem(event=event)

    async def _interrupt_on_cancel(self, task: asyncio.Task) -> None:
        """Cancel the consumer's pending wait once the token is set."""
        await self._cancel.wait()
        self._interrupted = True
        task.cancel()

    async def _stop_cancelled(self) -> None:
        self.cancelled = True
        await self.aclose()
        raise StopAsyncIteration

    async def aclose(self) -> None:
        """Close the underlying source. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        aclose = getattr(self._source, "aclose", None)
        if aclose is not None:
            await aclose()


__all__ = ["EventStream", "StreamItem", "event_error"]
