"""Agent configuration and the JSON configuration file.

Example file (every key optional):

    {
        "max_time": 120.0,
        "log": true,
        "dynamic_time": true,
        "search": {
            "strategy": "mcts",
            "thread_count": 4,
            "exploration_constant": 1.414,
            "rollout_policy": "heuristic"
        }
    }

The older form {"mcts_config": {"exploration_factor": 1.4}} is still read.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from reversi_agent.config import DEFAULT_MAX_TIME_S
from reversi_agent.engine_search.types import EngineConfig
from reversi_agent.errors import ConfigurationError

logger = logging.getLogger(__name__)

_KNOWN_KEYS = {"max_time", "log", "dynamic_time", "search", "mcts_config"}


@dataclass
class AgentConfig:
    max_time: float = DEFAULT_MAX_TIME_S  # seconds on the game clock
    log: bool = True
    # Derive each turn's budget from the game clock instead of search.time_budget_ms
    dynamic_time: bool = True
    search: EngineConfig = field(default_factory=EngineConfig)

    def validate(self) -> "AgentConfig":
        if isinstance(self.max_time, bool) or not isinstance(self.max_time, (int, float)) \
                or self.max_time <= 0:
            raise ConfigurationError(f"max_time must be a positive number, got {self.max_time!r}")
        if not isinstance(self.log, bool):
            raise ConfigurationError(f"log must be true or false, got {self.log!r}")
        if not isinstance(self.dynamic_time, bool):
            raise ConfigurationError(f"dynamic_time must be true or false, got {self.dynamic_time!r}")
        self.search.validate()
        return self


def agent_config_from_dict(data: dict) -> AgentConfig:
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a JSON object")
    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    search = data.get("search")
    if search is None:
        search = {}
    elif not isinstance(search, dict):
        raise ConfigurationError("search must be an object")
    search = dict(search)
    legacy = data.get("mcts_config")
    if legacy is not None:
        if not isinstance(legacy, dict):
            raise ConfigurationError("mcts_config must be an object")
        if "exploration_factor" in legacy:
            search.setdefault("exploration_constant", legacy["exploration_factor"])

    return AgentConfig(
        max_time=data.get("max_time", DEFAULT_MAX_TIME_S),
        log=data.get("log", True),
        dynamic_time=data.get("dynamic_time", True),
        search=EngineConfig.from_dict(search),
    ).validate()


def load_agent_config(path: str | Path | None) -> AgentConfig:
    """Read an AgentConfig from a JSON file.

    No path or a missing file gives the defaults. An unreadable file,
    invalid JSON or invalid values raise ConfigurationError.
    """
    if path is None:
        return AgentConfig().validate()
    path = Path(path)
    if not path.exists():
        logger.warning("Config file %s not found; using defaults", path)
        return AgentConfig().validate()
    try:
        data = json.loads(path.read_text())
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Config file {path} is not valid JSON: {e}") from e
    return agent_config_from_dict(data)
