"""Configuration defaults, env vars, and engine limits for taskdeps."""

from __future__ import annotations

import os
from dataclasses import dataclass


VERSION = "1.0.0"

DEFAULT_MAX_NODES = 10_000
DEFAULT_MAX_DEPENDENCIES = 50
DEFAULT_BOTTLENECK_THRESHOLD = 3

MAX_NODES_ENV = "TASKDEPS_MAX_NODES"


@dataclass
class Config:
    """Engine limits and runtime options.

    Every engine entry point accepts an optional ``Config``; ``None`` means
    the defaults below.
    """

    # Limits
    max_nodes: int = 0
    max_dependencies: int = DEFAULT_MAX_DEPENDENCIES

    # Analysis
    bottleneck_threshold: int = DEFAULT_BOTTLENECK_THRESHOLD

    # Misc
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.max_nodes:
            self.max_nodes = _env_int(MAX_NODES_ENV, DEFAULT_MAX_NODES)
        if self.max_nodes < 1:
            raise ValueError(f"max_nodes must be positive, got {self.max_nodes}")
        if self.max_dependencies < 1:
            raise ValueError(
                f"max_dependencies must be positive, got {self.max_dependencies}"
            )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def resolve_config(config: Config | None) -> Config:
    """Return *config* or a fresh default ``Config``."""
    return config if config is not None else Config()
