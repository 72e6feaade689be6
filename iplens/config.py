"""
Settings for iplens.

Precedence: explicit constructor arguments, then IPLENS_* environment
variables (via Settings.from_env, which also reads a .env file), then defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from iplens.geo.ipinfo import DEFAULT_BASE_URL
from iplens.history.history import HISTORY_CAPACITY, HISTORY_KEY
from iplens.history.store import DEFAULT_STORE_DIR
from iplens.mapsync.synchronizer import DEFAULT_CIRCLE_RADIUS, DEFAULT_ZOOM


def _as_float(value: str | None, default: float) -> float:
    try:
        return float(value) if value is not None else default
    except ValueError:
        return default


def _as_int(value: str | None, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


@dataclass
class Settings:
    provider_url: str = DEFAULT_BASE_URL
    provider_token: str | None = None
    timeout: float = 10.0
    home: str = DEFAULT_STORE_DIR  # directory holding the history slot
    history_key: str = HISTORY_KEY
    history_capacity: int = HISTORY_CAPACITY
    map_zoom: int = DEFAULT_ZOOM
    circle_radius: float = DEFAULT_CIRCLE_RADIUS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        if environ is None:
            load_dotenv(find_dotenv(usecwd=True))
            environ = os.environ
        env = environ
        defaults = cls()
        return cls(
            provider_url=env.get("IPLENS_PROVIDER_URL", defaults.provider_url),
            provider_token=env.get("IPLENS_PROVIDER_TOKEN") or None,
            timeout=_as_float(env.get("IPLENS_TIMEOUT"), defaults.timeout),
            home=os.path.expanduser(env.get("IPLENS_HOME", defaults.home)),
            history_capacity=_as_int(
                env.get("IPLENS_HISTORY_CAPACITY"), defaults.history_capacity
            ),
            map_zoom=_as_int(env.get("IPLENS_MAP_ZOOM"), defaults.map_zoom),
            circle_radius=_as_float(
                env.get("IPLENS_CIRCLE_RADIUS"), defaults.circle_radius
            ),
        )
