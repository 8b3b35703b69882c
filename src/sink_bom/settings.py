"""
Engine configuration.

Defaults live in constants.py; deployments override them through environment
variables read by `EngineSettings.from_env`.
"""

import logging
import os
from dataclasses import dataclass

from src.sink_bom import constants as C

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineSettings:
    """
    Tunables for one generator instance.

    Attributes:
        max_depth: Nesting depth past which expansion aborts.
        warn_depth: Nesting depth past which a warning is logged.
        deadline_seconds: Wall-clock budget for one generate call, or None.
        resources_dir: Directory holding the fallback resource JSON files.
        control_box_table: JSON file with control box component lists, or
            None for the built-in table.
    """

    max_depth: int = C.DEFAULT_MAX_DEPTH
    warn_depth: int = C.DEFAULT_WARN_DEPTH
    deadline_seconds: float | None = None
    resources_dir: str = "resources"
    control_box_table: str | None = None

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Builds settings from SINK_BOM_* environment variables."""
        defaults = cls()

        return cls(
            max_depth=_env_int("SINK_BOM_MAX_DEPTH", defaults.max_depth),
            warn_depth=_env_int("SINK_BOM_WARN_DEPTH", defaults.warn_depth),
            deadline_seconds=_env_float("SINK_BOM_DEADLINE_SECONDS"),
            resources_dir=os.environ.get(
                "SINK_BOM_RESOURCES_DIR", defaults.resources_dir
            ),
            control_box_table=os.environ.get("SINK_BOM_CONTROL_BOX_TABLE") or None,
        )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}; using {default}")
        return default


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}")
        return None
