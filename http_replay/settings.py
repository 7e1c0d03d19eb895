"""Application configuration loading."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from dotenv import load_dotenv

DEFAULT_CACHE_DIR: Final[str] = "cache"
_DEFAULT_TIMEOUT: Final[float] = 30.0
_DEFAULT_USER_AGENT: Final[str] = "http-replay/0.1.0"

_CACHED_SETTINGS: Settings | None = None


@dataclass(frozen=True)
class Settings:
    """Runtime configuration derived from environment variables."""

    cache_dir: Path
    timeout: float
    user_agent: str
    proxy: str | None
    use_proxy: bool


_TRUE_VALUES: Final[set[str]] = {"1", "true", "yes", "on"}
_FALSE_VALUES: Final[set[str]] = {"0", "false", "no", "off"}


def _coerce_bool(value: str | None, *, default: bool) -> bool:
    """Convert common textual boolean representations to bool."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


def get_settings(*, force_reload: bool = False) -> Settings:
    """Load configuration, optionally reloading from the environment."""
    global _CACHED_SETTINGS  # noqa: PLW0603
    if not force_reload and _CACHED_SETTINGS is not None:
        return _CACHED_SETTINGS

    dotenv_override = os.getenv("HTTP_REPLAY_DOTENV_PATH")
    if dotenv_override:
        load_dotenv(dotenv_override, override=True)
    else:
        dotenv_path = Path.cwd() / ".env"
        if dotenv_path.exists():
            load_dotenv(dotenv_path=dotenv_path)

    cache_dir_raw = os.getenv("HTTP_REPLAY_CACHE_DIR") or DEFAULT_CACHE_DIR
    cache_dir = Path(cache_dir_raw).expanduser()

    timeout_raw = os.getenv("HTTP_REPLAY_TIMEOUT")
    try:
        timeout = float(timeout_raw) if timeout_raw else _DEFAULT_TIMEOUT
    except ValueError as exc:
        raise RuntimeError(
            f"HTTP_REPLAY_TIMEOUT must be a number of seconds, got {timeout_raw!r}."
        ) from exc

    user_agent = os.getenv("HTTP_REPLAY_USER_AGENT", _DEFAULT_USER_AGENT)
    proxy = os.getenv("HTTP_REPLAY_PROXY") or None
    use_proxy = _coerce_bool(
        os.getenv("HTTP_REPLAY_USE_PROXY"),
        default=proxy is not None,
    )

    _CACHED_SETTINGS = Settings(
        cache_dir=cache_dir,
        timeout=timeout,
        user_agent=user_agent,
        proxy=proxy,
        use_proxy=use_proxy,
    )
    return _CACHED_SETTINGS
