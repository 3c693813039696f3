"""
gitadora.config — YAML Configuration Loader
============================================

Reads ``config.yaml`` for soft settings (site name, default instrument,
default game version, API port).  Secrets such as ``DATABASE_URL`` and
``JWT_SECRET`` come from the environment (``.env``), never from this file.

Usage::

    from gitadora.config import load_config

    cfg = load_config()              # reads ./config.yaml by default
    print(cfg.default_instrument)    # InstrumentType.GUITAR
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from gitadora.database.models import InstrumentType


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class TrackerConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    site_name: str

    # Skill lookups
    default_instrument: InstrumentType  # Used when a request omits instrumentType
    default_version: str  # Version name applied to uploads that don't name one

    # API
    api_port: int = 8000


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> TrackerConfig:
    """Read *path* and return a :class:`TrackerConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    ValueError
        If ``default_instrument`` is not a known instrument type.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    instrument = str(raw.get("default_instrument", InstrumentType.GUITAR)).upper()
    try:
        default_instrument = InstrumentType(instrument)
    except ValueError:
        raise ValueError(
            f"Unknown default_instrument {instrument!r}; "
            f"expected one of {', '.join(t.value for t in InstrumentType)}"
        ) from None

    return TrackerConfig(
        site_name=raw["site_name"],
        default_instrument=default_instrument,
        default_version=raw["default_version"],
        api_port=int(raw.get("api_port", 8000)),
    )
