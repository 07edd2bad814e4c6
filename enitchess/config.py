# enitchess/config.py
from dataclasses import dataclass, field
from typing import Dict, Optional
import logging
import os
import tomllib

# Defaults (material points)
PIECE_VALUES = {
    "PAWN": 1,
    "KNIGHT": 4,
    "BISHOP": 3,
    "ROOK": 5,
    "QUEEN": 10,
    "KING": 999,
}

@dataclass
class SearchConfig:
    depth: int = 4
    shuffle_root: bool = True
    randomize_ties: float = 0.0  # probability that an equal root move replaces the incumbent
    time_limit_ms: Optional[int] = None  # None means depth-only
    seed: Optional[int] = None

@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())

@dataclass
class AnalyzerConfig:
    # thresholds in centipawns (evaluation change from the mover's point of view)
    TH_BRILLIANT: int = 100
    TH_GREAT: int = 30
    TH_GOOD: int = -10
    TH_INACCURACY: int = -50
    TH_MISTAKE: int = -150
    TH_ENGINE_GREAT: int = 50
    centipawns_per_point: int = 100
    depth: int = 2

@dataclass
class StrongConfig:
    path: str = "stockfish"
    depth: int = 20
    skill_level: int = 20
    move_time_ms: int = 1000
    threads: int = 1
    hash_mb: int = 64
    timeout_s: float = 10.0  # UCI reply timeout on top of the move time

@dataclass
class UIConfig:
    engine_name: str = "EnitChess Engine"
    engine_mode: str = "enit"  # "enit" or "stockfish"
    user_color: str = "w"
    api_port: int = 8000

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    analyzer: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    strong: StrongConfig = field(default_factory=StrongConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "analyzer", "strong", "ui"):
            if section not in raw:
                continue
            target = getattr(cfg, section)
            for k, v in raw[section].items():
                if hasattr(target, k):
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging for the CLI and API entry points."""
    logging.basicConfig(
        level=(level or CONFIG.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("ENIT_CONFIG_TOML", "config.toml"))
# allow env overrides for quick debugging
override_depth = os.environ.get("ENIT_SEARCH_DEPTH")
if override_depth and override_depth.isdigit():
    CONFIG.search.depth = int(override_depth)
if os.environ.get("ENIT_LOG_LEVEL"):
    CONFIG.log_level = os.environ["ENIT_LOG_LEVEL"]
if os.environ.get("STOCKFISH_PATH"):
    CONFIG.strong.path = os.environ["STOCKFISH_PATH"]
