# treemate/config.py
from dataclasses import dataclass, field
from typing import Optional
import os
import tomllib  # python >=3.11

from treemate.core.search import DEFAULT_CAPACITY_HINT
from treemate.errors import ConfigurationError


@dataclass
class SearchConfig:
    iterations: int = 20000
    pruning: bool = True
    capacity_hint: int = DEFAULT_CAPACITY_HINT
    seed: Optional[int] = None  # None means non-deterministic playouts


@dataclass
class UIConfig:
    engine_name: str = "TreeMate"
    engine_author: str = "TreeMate developers"
    api_port: int = 8000
    human_first: bool = True  # CLI: human plays X


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "ui"):
            if section not in raw:
                continue
            target = getattr(cfg, section)
            for k, v in raw[section].items():
                if hasattr(target, k):
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"]).upper()
        return cfg


def apply_env_overrides(cfg: Config) -> Config:
    """Apply ENGINE_* environment overrides for quick debugging."""
    override_iterations = os.environ.get("ENGINE_SEARCH_ITERATIONS")
    if override_iterations:
        try:
            cfg.search.iterations = int(override_iterations)
        except ValueError:
            raise ConfigurationError(
                "ENGINE_SEARCH_ITERATIONS must be an integer",
                context={"value": override_iterations},
            )
    override_level = os.environ.get("ENGINE_LOG_LEVEL")
    if override_level:
        cfg.log_level = override_level.upper()
    return cfg


# single globally importable config instance
CONFIG = apply_env_overrides(
    Config.load_from_toml(os.environ.get("ENGINE_CONFIG_TOML", "config.toml"))
)
