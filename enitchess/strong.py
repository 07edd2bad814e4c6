"""Strong-play mode: an external UCI engine (Stockfish) driven through chess.engine."""

import logging
import shutil
import time
from typing import Optional

import chess
import chess.engine

from enitchess.config import CONFIG
from enitchess.core.search import SearchResult
from enitchess.core.utils import describe_score

logger = logging.getLogger(__name__)


class StrongEngineUnavailable(RuntimeError):
    """The configured UCI engine binary could not be found or started."""


class StrongEnginePlayer:
    """Plays instantly at a fixed depth and movetime. Use as a context manager."""

    def __init__(self, path: Optional[str] = None, depth: Optional[int] = None,
                 move_time_ms: Optional[int] = None, timeout: Optional[float] = None):
        cfg = CONFIG.strong
        self.path = path or cfg.path
        self.depth = depth or cfg.depth
        self.move_time_ms = move_time_ms or cfg.move_time_ms
        self.timeout = timeout or cfg.timeout_s
        self._engine: Optional[chess.engine.SimpleEngine] = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self):
        if self._engine is not None:
            return
        binary = shutil.which(self.path)
        if binary is None:
            raise StrongEngineUnavailable(f"UCI engine not found: {self.path}")
        try:
            self._engine = chess.engine.SimpleEngine.popen_uci(binary, timeout=self.timeout)
        except (OSError, chess.engine.EngineError, TimeoutError) as e:
            raise StrongEngineUnavailable(f"could not start {binary}: {e}") from e
        self._configure()
        logger.info("Strong engine ready: %s", self._engine.id.get("name", binary))

    def _configure(self):
        cfg = CONFIG.strong
        wanted = {
            "Skill Level": cfg.skill_level,
            "Hash": cfg.hash_mb,
            "Threads": cfg.threads,
        }
        options = {k: v for k, v in wanted.items() if k in self._engine.options}
        if options:
            self._engine.configure(options)

    def close(self):
        if self._engine is not None:
            try:
                self._engine.quit()
            except (chess.engine.EngineTerminatedError, TimeoutError):
                logger.debug("Strong engine did not quit cleanly")
                self._engine.close()
            self._engine = None

    def best_move(self, board: chess.Board) -> SearchResult:
        if self._engine is None:
            raise RuntimeError("Engine not started. Use StrongEnginePlayer as a context manager.")

        start = time.perf_counter()
        limit = chess.engine.Limit(depth=self.depth, time=self.move_time_ms / 1000.0)
        result = self._engine.play(board, limit, info=chess.engine.INFO_SCORE)
        elapsed = time.perf_counter() - start

        depth = result.info.get("depth", self.depth)
        pov = result.info.get("score")
        score_cp, mate_in = None, None
        if pov is not None:
            score = pov.pov(board.turn)
            mate_in = score.mate()
            score_cp = score.score(mate_score=100000)

        reasoning = f"Stockfish (Depth {depth}): {describe_score(score_cp, mate_in)}"
        return SearchResult(result.move, score_cp or 0, reasoning, depth, elapsed,
                            result.info.get("nodes", 0))
