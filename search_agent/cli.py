"""
Search Agent CLI.

Builds a Gemini agent with Google Search, sends one prompt, and streams the
answer to the terminal.

Usage:
    search-agent
    search-agent --prompt "who won the last f1 race?"
    search-agent --env-file ./prod.env --model gemini-2.5-pro -v

Environment:
    GEMINI_API_KEY: API key for the Gemini API (GOOGLE_API_KEY also accepted)
    SEARCH_AGENT_MODEL: Model name (default: gemini-2.5-flash)
    GOOGLE_GENAI_USE_VERTEXAI / GOOGLE_CLOUD_PROJECT / GOOGLE_CLOUD_LOCATION:
        Use Vertex AI instead of an API key
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional, Tuple

import click
from rich.console import Console

from search_agent.agent import create_search_agent
from search_agent.config import DEFAULT_PROMPT, DEFAULT_TOOLS, Settings, load_environment
from search_agent.errors import SearchAgentError
from search_agent.tools import resolve_tools
from search_agent.turn import call_agent

logger = logging.getLogger("search_agent")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _fatal(message: str, exc: BaseException) -> None:
    """Log a setup failure as a single line and exit."""
    logger.critical("%s: %s", message, exc)
    sys.exit(1)


@click.command()
@click.option("--prompt", "-p", default=DEFAULT_PROMPT, show_default=True, help="Message to send to the agent")
@click.option("--model", default=None, help="Model name (overrides SEARCH_AGENT_MODEL)")
@click.option("--env-file", type=click.Path(dir_okay=False), default=None, help="Env file to load (default: .env if present)")
@click.option("--user-id", default=None, help="Session user id")
@click.option("--app-name", default=None, help="Session app name")
@click.option("--tool", "-t", "tools", multiple=True, default=DEFAULT_TOOLS, show_default=True, help="Tool to give the agent (repeatable)")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def main(
    prompt: str,
    model: Optional[str],
    env_file: Optional[str],
    user_id: Optional[str],
    app_name: Optional[str],
    tools: Tuple[str, ...],
    verbose: bool,
):
    """Ask a web-search enabled Gemini agent one question and stream the answer."""
    _configure_logging(verbose)
    console = Console()

    try:
        load_environment(env_file)
        settings = Settings.from_env(model_name=model, user_id=user_id, app_name=app_name)
    except SearchAgentError as e:
        _fatal("Failed loading environment", e)

    try:
        agent = create_search_agent(settings, resolve_tools(tools))
    except SearchAgentError as e:
        _fatal("Failed to create agent", e)

    console.print(f"Agent created: {agent.name}", markup=False, highlight=False, soft_wrap=True)
    console.print(f"\nPrompt: {prompt}\nResponse: ", end="", markup=False, highlight=False, emoji=False, soft_wrap=True)

    try:
        asyncio.run(
            call_agent(
                agent,
                prompt,
                console=console,
                app_name=settings.app_name,
                user_id=settings.user_id,
            )
        )
    except SearchAgentError as e:
        _fatal("Error calling agent", e)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        sys.exit(130)

    console.print("\n---", markup=False, highlight=False, soft_wrap=True)


if __name__ == "__main__":
    main()
