"""Configuration for the search agent demo."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from search_agent.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Model
DEFAULT_MODEL = "gemini-2.5-flash"

# Session scope
DEFAULT_APP_NAME = "Google Search_agent"
DEFAULT_USER_ID = "user1234"

# Agent identity
AGENT_NAME = "basic_search_agent"
AGENT_DESCRIPTION = "Agent to answer questions using Google Search"
AGENT_INSTRUCTION = "I can answer your question by searching the web. Just ask me anything"

DEFAULT_PROMPT = "what's the latest ai news?"
DEFAULT_TOOLS = ("google_search",)

# Credential lookup order
API_KEY_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

# Vertex AI (optional alternative to an API key)
DEFAULT_LOCATION = "us-central1"

# =============================================================================
# ENVIRONMENT LOADING
# Process-scoped: the env file is read once at startup and never re-read.
# =============================================================================

_environment_loaded = False


def load_environment(env_file: Optional[str] = None) -> bool:
    """
    Load variables from a local env file into the process environment.

    Variables already present in the process environment win over the file.
    Only the first call has any effect; later calls return False.

    Args:
        env_file: Explicit path. When omitted, a ``.env`` is searched for from
            the current directory upwards and its absence is not an error.

    Returns:
        True if a file was loaded by this call.

    Raises:
        ConfigurationError: If ``env_file`` was given but cannot be read.
    """
    global _environment_loaded
    if _environment_loaded:
        return False

    if env_file:
        if not os.path.isfile(env_file):
            raise ConfigurationError(f"env file not found: {env_file}")
        path = env_file
    else:
        path = find_dotenv(usecwd=True)
        if not path:
            logger.debug("No .env file found, using process environment only")
            _environment_loaded = True
            return False

    try:
        loaded = load_dotenv(path, override=False)
    except OSError as e:
        raise ConfigurationError(f"failed loading env file {path}: {e}") from e

    _environment_loaded = True
    logger.info("Loaded environment from %s", path)
    return loaded


def reset_environment_state() -> None:
    """Forget that the environment was loaded. Used by tests."""
    global _environment_loaded
    _environment_loaded = False


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


def _first_env(names) -> Optional[str]:
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return None


@dataclass(frozen=True)
class Settings:
    """Resolved settings for one program run."""

    api_key: Optional[str] = field(default=None, repr=False)
    model_name: str = DEFAULT_MODEL
    app_name: str = DEFAULT_APP_NAME
    user_id: str = DEFAULT_USER_ID
    use_vertexai: bool = False
    project: Optional[str] = None
    location: str = DEFAULT_LOCATION

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """
        Build settings from the process environment.

        Keyword overrides with a value of None are ignored, so CLI options
        that were not given fall through to the environment.
        """
        settings = cls(
            api_key=_first_env(API_KEY_VARS),
            model_name=os.getenv("SEARCH_AGENT_MODEL", DEFAULT_MODEL),
            app_name=os.getenv("SEARCH_AGENT_APP_NAME", DEFAULT_APP_NAME),
            user_id=os.getenv("SEARCH_AGENT_USER_ID", DEFAULT_USER_ID),
            use_vertexai=_env_flag("GOOGLE_GENAI_USE_VERTEXAI"),
            project=os.getenv("GOOGLE_CLOUD_PROJECT") or None,
            location=os.getenv("GOOGLE_CLOUD_LOCATION", DEFAULT_LOCATION),
        )
        changes = {k: v for k, v in overrides.items() if v is not None}
        if changes:
            settings = replace(settings, **changes)
        settings.validate()
        return settings

    def validate(self) -> None:
        if not self.model_name or not self.model_name.strip():
            raise ConfigurationError("model name must not be empty")
        if not self.app_name or not self.user_id:
            raise ConfigurationError("app name and user id must not be empty")

    def has_credentials(self) -> bool:
        """True if either an API key or a Vertex AI project is configured."""
        if self.use_vertexai:
            return bool(self.project)
        return bool(self.api_key)


__all__ = [
    "DEFAULT_APP_NAME",
    "DEFAULT_USER_ID",
    "DEFAULT_MODEL",
    "AGENT_NAME",
    "AGENT_DESCRIPTION",
    "AGENT_INSTRUCTION",
    "DEFAULT_PROMPT",
    "DEFAULT_TOOLS",
    "Settings",
    "load_environment",
    "reset_environment_state",
]
