"""
Search Agent - Gemini agent with Google Search, one streamed turn.

Modules:
- config: Environment loading and settings
- tools: Tool registry
- agent: Model and agent factory
- stream: Cancellable event stream over the runner's events
- turn: Session setup and console streaming for one turn
- cli: Command-line entry point
"""

from search_agent.agent import create_search_agent
from search_agent.config import Settings, load_environment
from search_agent.stream import EventStream, StreamItem
from search_agent.turn import TurnResult, call_agent, consume_stream

__all__ = [
    "Settings",
    "load_environment",
    "create_search_agent",
    "EventStream",
    "StreamItem",
    "TurnResult",
    "call_agent",
    "consume_stream",
]
