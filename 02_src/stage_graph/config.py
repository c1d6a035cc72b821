"""Runtime settings loaded from the environment (and an optional .env file)."""

import os
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Tuple

from dotenv import load_dotenv

from .graph_orchestrator import DEFAULT_HORIZONTAL_SPACING, DEFAULT_VERTICAL_SPACING

ENV_PREFIX = "STAGE_GRAPH_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    """Raised when an environment value cannot be interpreted."""


@dataclass(frozen=True)
class Settings:
    suppress_root: bool = False
    horizontal_spacing: int = DEFAULT_HORIZONTAL_SPACING
    vertical_spacing: int = DEFAULT_VERTICAL_SPACING
    reference_marker: str = "*"
    extra_tags: Tuple[str, ...] = field(default_factory=tuple)
    log_level: str = "WARNING"

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Copy with every override that is not None applied."""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    if environ is None:
        load_dotenv()
        environ = os.environ

    def read(name: str) -> Optional[str]:
        return environ.get(f"{ENV_PREFIX}{name}")

    defaults = Settings()
    marker = read("REFERENCE_MARKER")
    return Settings(
        suppress_root=_parse_bool("SUPPRESS_ROOT", read("SUPPRESS_ROOT"), defaults.suppress_root),
        horizontal_spacing=_parse_int(
            "HORIZONTAL_SPACING", read("HORIZONTAL_SPACING"), defaults.horizontal_spacing
        ),
        vertical_spacing=_parse_int("VERTICAL_SPACING", read("VERTICAL_SPACING"), defaults.vertical_spacing),
        reference_marker=defaults.reference_marker if marker is None else marker,
        extra_tags=_parse_tags(read("EXTRA_TAGS")),
        log_level=(read("LOG_LEVEL") or defaults.log_level).upper(),
    )


def _parse_bool(name: str, raw: Optional[str], default: bool) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")


def _parse_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as error:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from error
    if value < 0:
        raise ConfigError(f"{ENV_PREFIX}{name} must not be negative, got {value}")
    return value


def _parse_tags(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    tags = []
    for part in raw.split(","):
        name = part.strip()
        if not name:
            continue
        tags.append(name if name.startswith("!") else f"!{name}")
    return tuple(tags)
