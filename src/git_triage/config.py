"""Runtime configuration read from GIT_TRIAGE_* environment variables."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from git_triage.exceptions import ConfigError
from git_triage.session import DEFAULT_MAX_WIDTH, MIN_WIDTH
from git_triage.viewport import ScrollMode

ENV_AHEAD_BEHIND = "GIT_TRIAGE_AHEAD_BEHIND"
ENV_SCROLL = "GIT_TRIAGE_SCROLL"
ENV_MAX_WIDTH = "GIT_TRIAGE_MAX_WIDTH"
ENV_SUMMARY = "GIT_TRIAGE_SUMMARY"
ENV_LOG_LEVEL = "GIT_TRIAGE_LOG_LEVEL"
ENV_LOG_FILE = "GIT_TRIAGE_LOG_FILE"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _parse_bool(name: str, value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(
        f"Invalid value for {name}: {value!r}",
        recovery_suggestion=f"Set {name} to 1 or 0",
    )


@dataclass(frozen=True)
class TriageConfig:
    """Settings for one run."""

    ahead_behind: bool = True
    scroll_mode: ScrollMode = ScrollMode.PROPORTIONAL
    max_width: int = DEFAULT_MAX_WIDTH
    print_summary: bool = True
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TriageConfig":
        """Build a config from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Raises:
            ConfigError: when a variable holds an unusable value
        """
        env = os.environ if environ is None else environ

        scroll_value = env.get(ENV_SCROLL, "").strip().lower() or "proportional"
        try:
            scroll_mode = ScrollMode(scroll_value)
        except ValueError:
            raise ConfigError(
                f"Invalid value for {ENV_SCROLL}: {scroll_value!r}",
                recovery_suggestion="Use 'proportional' or 'exact'",
            ) from None

        width_value = env.get(ENV_MAX_WIDTH, "").strip()
        if width_value:
            try:
                max_width = int(width_value)
            except ValueError:
                raise ConfigError(
                    f"Invalid value for {ENV_MAX_WIDTH}: {width_value!r}",
                    recovery_suggestion="Use a whole number of columns",
                ) from None
            if max_width < MIN_WIDTH:
                raise ConfigError(
                    f"{ENV_MAX_WIDTH} must be at least {MIN_WIDTH}, got {max_width}"
                )
        else:
            max_width = DEFAULT_MAX_WIDTH

        log_level = env.get(ENV_LOG_LEVEL, "").strip().upper() or "WARNING"
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(
                f"Invalid value for {ENV_LOG_LEVEL}: {log_level!r}",
                recovery_suggestion="Use DEBUG, INFO, WARNING or ERROR",
            )

        return cls(
            ahead_behind=_parse_bool(
                ENV_AHEAD_BEHIND, env.get(ENV_AHEAD_BEHIND), default=True
            ),
            scroll_mode=scroll_mode,
            max_width=max_width,
            print_summary=_parse_bool(ENV_SUMMARY, env.get(ENV_SUMMARY), default=True),
            log_level=log_level,
            log_file=env.get(ENV_LOG_FILE) or None,
        )


def configure_logging(config: TriageConfig) -> None:
    """Send log records to the configured file, or to stderr."""
    logging.basicConfig(
        level=config.log_level,
        format=LOG_FORMAT,
        filename=config.log_file,
        force=True,
    )
