"""Engine configuration loaded from config/config.local.json and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import orjson
import structlog

LOGGER = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("config/config.local.json")
DEFAULT_STORE_PATH = Path("impostor_store.json")
DEFAULT_KEY_PREFIX = "impostor_"

STORE_ENV_VAR = "IMPOSTOR_STORE"
SEED_ENV_VAR = "IMPOSTOR_SEED"


@dataclass(slots=True)
class EngineConfig:
    """Tunable settings for the round engine and its store."""

    store_path: Path = DEFAULT_STORE_PATH
    key_prefix: str = DEFAULT_KEY_PREFIX
    default_players: int = 6
    default_impostors: int = 1
    min_players: int = 3
    max_players: int = 20
    max_impostors: int = 10
    first_player_weight: float = 0.75
    seed: Optional[int] = None


# Smallest accepted value per integer field; rounds need at least three players
_INT_FIELDS = {
    "default_players": 1,
    "default_impostors": 1,
    "min_players": 3,
    "max_players": 3,
    "max_impostors": 1,
}


def load_engine_config(path: Path = DEFAULT_CONFIG_PATH) -> EngineConfig:
    """Load engine configuration from disk, falling back to defaults.

    Keys with the wrong type or below their minimum are skipped rather than
    failing the load. The ``IMPOSTOR_STORE`` and ``IMPOSTOR_SEED`` environment
    variables override whatever the file says.
    """

    config = EngineConfig()
    if path.exists():
        try:
            data = orjson.loads(path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as exc:
            LOGGER.warning("config.unreadable", path=str(path), error=str(exc))
            data = {}
        if isinstance(data, dict):
            config = _apply_overrides(config, data)

    store_override = os.getenv(STORE_ENV_VAR)
    if store_override:
        config = replace(config, store_path=Path(store_override))

    seed_override = os.getenv(SEED_ENV_VAR)
    if seed_override:
        try:
            config = replace(config, seed=int(seed_override))
        except ValueError:
            LOGGER.warning("config.bad_seed", value=seed_override)

    return config


def _apply_overrides(config: EngineConfig, data: Dict[str, Any]) -> EngineConfig:
    updates: Dict[str, Any] = {}

    for key, lowest in _INT_FIELDS.items():
        value = data.get(key)
        if not isinstance(value, int) or isinstance(value, bool):
            continue
        if value < lowest:
            LOGGER.warning("config.out_of_range", key=key, value=value, minimum=lowest)
            continue
        updates[key] = value

    low = updates.get("min_players", config.min_players)
    high = updates.get("max_players", config.max_players)
    if high < low:
        LOGGER.warning("config.player_range_inverted", min_players=low, max_players=high)
        updates.pop("min_players", None)
        updates.pop("max_players", None)

    weight = data.get("first_player_weight")
    if isinstance(weight, (int, float)) and not isinstance(weight, bool):
        if weight >= 0:
            updates["first_player_weight"] = float(weight)
        else:
            LOGGER.warning("config.out_of_range", key="first_player_weight", value=weight, minimum=0)

    store_path = data.get("store_path")
    if isinstance(store_path, str) and store_path:
        updates["store_path"] = Path(store_path)

    prefix = data.get("key_prefix")
    if isinstance(prefix, str):
        updates["key_prefix"] = prefix

    seed = data.get("seed")
    if isinstance(seed, int) and not isinstance(seed, bool):
        updates["seed"] = seed

    return replace(config, **updates)
