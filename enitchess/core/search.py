import chess
import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from enitchess.config import CONFIG
from enitchess.core import rules
from enitchess.core.evaluator import MaterialEvaluator
from enitchess.core.utils import format_reasoning, log_info

logger = logging.getLogger(__name__)

INF = 20000
MATE_SCORE = 10000
# Starting best value at interior nodes; worse than any mate score.
NODE_WORST = 15000

NO_MOVES_REASONING = "No legal moves"


@dataclass
class SearchResult:
    move: Optional[chess.Move]
    score: int
    reasoning: str
    depth: int = 0
    elapsed: float = 0.0
    nodes: int = 0


class SearchEngine:
    """Fixed-depth minimax with alpha-beta pruning over a material evaluator.

    Scores are always taken from the side to move at the root. Max nodes are
    the root side's turns, min nodes the opponent's. Checkmate at a node is
    scored ``MATE_SCORE + remaining depth`` against the mated side, so mates
    found closer to the root carry a larger magnitude.
    """

    def __init__(self, evaluator: Optional[MaterialEvaluator] = None, depth: Optional[int] = None,
                 shuffle_root: Optional[bool] = None, randomize_ties: Optional[float] = None,
                 time_limit_ms: Optional[int] = None, rng: Optional[random.Random] = None,
                 engine_name: Optional[str] = None):
        cfg = CONFIG.search
        self.evaluator = evaluator or MaterialEvaluator()
        self.max_depth = cfg.depth if depth is None else depth
        self.shuffle_root = cfg.shuffle_root if shuffle_root is None else shuffle_root
        self.randomize_ties = cfg.randomize_ties if randomize_ties is None else randomize_ties
        self.time_limit_ms = cfg.time_limit_ms if time_limit_ms is None else time_limit_ms
        self.rng = rng or random.Random(cfg.seed)
        self.engine_name = engine_name or CONFIG.ui.engine_name
        self.nodes = 0

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def find_best_move(self, board: chess.Board, depth: Optional[int] = None) -> SearchResult:
        """Search ``board`` to ``depth`` plies. The board itself is never modified."""
        self._stop_event.clear()
        return self._search(board, self.max_depth if depth is None else depth)

    def start_search(self, board: chess.Board, depth: Optional[int] = None,
                     callback: Optional[Callable[[SearchResult], None]] = None) -> bool:
        """Run one search on a worker thread. Returns False if one is already running."""
        if self._thread and self._thread.is_alive():
            return False
        self._stop_event.clear()
        target_depth = self.max_depth if depth is None else depth
        snapshot = board.copy()

        def worker():
            result = self._search(snapshot, target_depth)
            if callback:
                callback(result)

        self._thread = threading.Thread(target=worker, daemon=True)
        self._thread.start()
        return True

    def stop(self):
        """Stop after the root move currently being scored."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=0.2)

    def wait(self, timeout: Optional[float] = None) -> bool:
        if self._thread:
            self._thread.join(timeout)
            return not self._thread.is_alive()
        return True

    def _search(self, board: chess.Board, depth: int) -> SearchResult:
        search_board = board.copy()
        perspective = rules.side_to_move(search_board)
        self.nodes = 0
        start_time = time.perf_counter()

        moves = list(search_board.legal_moves)
        if not moves:
            score = -MATE_SCORE if search_board.is_check() else 0
            return SearchResult(None, score, NO_MOVES_REASONING)

        if depth <= 0:
            score = self.evaluator.evaluate(search_board, perspective)
            elapsed = time.perf_counter() - start_time
            return SearchResult(None, score, format_reasoning(self.engine_name, 0, score, elapsed),
                                0, elapsed, 0)

        logger.debug("Starting search depth %d for %s", depth,
                     "white" if perspective == chess.WHITE else "black")
        deadline = None
        if self.time_limit_ms is not None:
            deadline = start_time + max(self.time_limit_ms, 1) / 1000.0

        move, score = self._search_root(search_board, moves, depth, perspective, deadline)

        elapsed = time.perf_counter() - start_time
        log_info(depth, score, self.nodes, elapsed, move, MATE_SCORE)
        return SearchResult(move, score, format_reasoning(self.engine_name, depth, score, elapsed),
                            depth, elapsed, self.nodes)

    def _search_root(self, board: chess.Board, moves: List[chess.Move], depth: int,
                     perspective: chess.Color, deadline: Optional[float]):
        if self.shuffle_root:
            self.rng.shuffle(moves)

        best_move = None
        best_score = -INF
        alpha = -INF
        beta = INF
        # Equal root scores must be exact, not bounds, before a tie can be re-rolled.
        margin = 1 if self.randomize_ties > 0 else 0

        for move in moves:
            if best_move is not None and self._should_stop(deadline):
                logger.debug("Root search stopped after %d nodes", self.nodes)
                break

            board.push(move)
            value = self._find_min(board, depth - 1, alpha - margin, beta, perspective)
            board.pop()

            if value > best_score or (value == best_score and self._reroll_tie()):
                best_score = value
                best_move = move
                alpha = max(alpha, value)

        return best_move, best_score

    def _find_max(self, board: chess.Board, depth: int, alpha: int, beta: int,
                  perspective: chess.Color) -> int:
        self.nodes += 1
        moves = list(board.legal_moves)
        if not moves and board.is_check():
            return -MATE_SCORE - depth
        if not moves or rules.is_draw_by_rule(board):
            return 0
        if depth <= 0:
            return self.evaluator.evaluate(board, perspective)

        best_score = -NODE_WORST
        for move in moves:
            board.push(move)
            value = self._find_min(board, depth - 1, alpha, beta, perspective)
            board.pop()

            if value > best_score:
                best_score = value
                alpha = max(alpha, value)
            if beta <= alpha:
                return best_score
        return best_score

    def _find_min(self, board: chess.Board, depth: int, alpha: int, beta: int,
                  perspective: chess.Color) -> int:
        self.nodes += 1
        moves = list(board.legal_moves)
        if not moves and board.is_check():
            return MATE_SCORE + depth
        if not moves or rules.is_draw_by_rule(board):
            return 0
        if depth <= 0:
            return self.evaluator.evaluate(board, perspective)

        best_score = NODE_WORST
        for move in moves:
            board.push(move)
            value = self._find_max(board, depth - 1, alpha, beta, perspective)
            board.pop()

            if value < best_score:
                best_score = value
                beta = min(beta, value)
            if beta <= alpha:
                return best_score
        return best_score

    def _reroll_tie(self) -> bool:
        return self.randomize_ties > 0 and self.rng.random() < self.randomize_ties

    def _should_stop(self, deadline: Optional[float]) -> bool:
        if self._stop_event.is_set():
            return True
        return deadline is not None and time.perf_counter() >= deadline


def find_best_move(board: chess.Board, depth: Optional[int] = None) -> SearchResult:
    """One-shot search with a fresh engine built from CONFIG."""
    return SearchEngine().find_best_move(board, depth)
