import logging
import random
from typing import Optional

import chess
import chess.engine

from enitchess.config import CONFIG
from enitchess.core.board import ChessBoard, parse_color
from enitchess.core.search import SearchEngine, SearchResult
from enitchess.strong import StrongEnginePlayer, StrongEngineUnavailable

logger = logging.getLogger(__name__)

ENGINE_MODES = ("enit", "stockfish")
FALLBACK_REASONING = "Recalculating tactical fallback..."


class Engine:
    """One human-vs-computer game: the board, the user's colour and the computer's engines."""

    def __init__(self, depth: Optional[int] = None, mode: Optional[str] = None,
                 user_color: Optional[str] = None, fen: Optional[str] = None,
                 search: Optional[SearchEngine] = None,
                 strong: Optional[StrongEnginePlayer] = None):
        self.board = ChessBoard(fen)
        self.depth = depth or CONFIG.search.depth
        self.search = search or SearchEngine(depth=self.depth)
        self.strong = strong
        self.mode = mode or CONFIG.ui.engine_mode
        if self.mode not in ENGINE_MODES:
            raise ValueError(f"Unknown engine mode: {self.mode!r}")
        self.user_color = parse_color(user_color or CONFIG.ui.user_color)
        self.last_reasoning: Optional[str] = None
        self._rng = random.Random()

    @property
    def computer_color(self) -> chess.Color:
        return not self.user_color

    def is_computer_turn(self) -> bool:
        return self.board.board.turn == self.computer_color and not self.board.is_game_over()

    def get_best_move(self, depth: Optional[int] = None) -> SearchResult:
        """EnitChess search on the current position without playing it."""
        return self.search.find_best_move(self.board.board, depth or self.depth)

    def _ask_engine(self) -> SearchResult:
        if self.mode == "stockfish":
            try:
                if self.strong is None:
                    self.strong = StrongEnginePlayer()
                self.strong.open()
                return self.strong.best_move(self.board.board)
            except (StrongEngineUnavailable, chess.engine.EngineError,
                    chess.engine.EngineTerminatedError, TimeoutError) as e:
                logger.warning("Strong engine failed (%r); using EnitChess", e)
                # reopened on the next turn
                self.strong.close()
        return self.get_best_move()

    def play_computer_turn(self) -> Optional[SearchResult]:
        """Choose and play the computer's move. Returns None when there is nothing to play."""
        if not self.is_computer_turn():
            return None

        result = self._ask_engine()
        if result.move is not None and result.move in self.board.board.legal_moves:
            self.board.push_move(result.move)
        else:
            legal = list(self.board.board.legal_moves)
            if not legal:
                return None
            logger.warning("Engine move %s failed validation, using fallback", result.move)
            move = self._rng.choice(legal)
            self.board.push_move(move)
            result = SearchResult(move, result.score, FALLBACK_REASONING, result.depth,
                                  result.elapsed, result.nodes)

        self.last_reasoning = result.reasoning
        logger.info("Computer plays %s: %s", result.move.uci(), result.reasoning)
        return result

    def make_move(self, move_str: str) -> bool:
        if self.board.board.turn != self.user_color or self.board.is_game_over():
            return False
        return self.board.make_move(move_str)

    def undo_turn(self) -> bool:
        self.last_reasoning = None
        return self.board.undo_turn()

    def swap_sides(self):
        self.user_color = not self.user_color

    def reset(self):
        self.board.reset()
        self.last_reasoning = None

    def close(self):
        if self.strong is not None:
            self.strong.close()

    def print_board(self):
        self.board.print_board()
