# enitchess/analyzer.py
import enum
import logging
from typing import Any, Dict, List, Optional

import chess

from enitchess.config import CONFIG, AnalyzerConfig
from enitchess.core.search import MATE_SCORE, SearchEngine

logger = logging.getLogger(__name__)


class MoveQuality(str, enum.Enum):
    BRILLIANT = "brilliant"
    GREAT = "great"
    GOOD = "good"
    INACCURACY = "inaccuracy"
    MISTAKE = "mistake"
    BLUNDER = "blunder"


def get_move_rating(eval_before: int, eval_after: int, is_player_move: bool,
                    cfg: Optional[AnalyzerConfig] = None) -> Optional[MoveQuality]:
    """
    Rate a move by how much the evaluation changed in the mover's favour.
    Both evaluations are centipawns from the mover's point of view.
    Computer moves are never given a negative label.
    """
    cfg = cfg or CONFIG.analyzer
    change = eval_after - eval_before

    if not is_player_move:
        if change >= cfg.TH_ENGINE_GREAT:
            return MoveQuality.GREAT
        if change >= 0:
            return MoveQuality.GOOD
        return None

    if change >= cfg.TH_BRILLIANT:
        return MoveQuality.BRILLIANT
    if change >= cfg.TH_GREAT:
        return MoveQuality.GREAT
    if change >= cfg.TH_GOOD:
        return MoveQuality.GOOD
    if change >= cfg.TH_INACCURACY:
        return MoveQuality.INACCURACY
    if change >= cfg.TH_MISTAKE:
        return MoveQuality.MISTAKE
    return MoveQuality.BLUNDER


class Analyzer:
    def __init__(self, search_engine: Optional[SearchEngine] = None, cfg: Optional[AnalyzerConfig] = None):
        self.cfg = cfg or CONFIG.analyzer
        self.search_engine = search_engine or SearchEngine(depth=self.cfg.depth, shuffle_root=False)

    def _evaluate(self, board: chess.Board) -> tuple:
        """Search score in centipawns from the side to move, plus the best move."""
        result = self.search_engine.find_best_move(board, self.cfg.depth)
        # mate scores carry a depth bias; compare all mates as equal
        score = max(-MATE_SCORE, min(MATE_SCORE, result.score))
        return score * self.cfg.centipawns_per_point, result.move

    def classify_move(self, board: chess.Board, move: chess.Move, is_player_move: bool = True) -> Dict[str, Any]:
        """
        Classify a single move.
        - board: current board BEFORE the move (unchanged by this function).
        - move: the move that was played.
        - is_player_move: True for the human's move, False for the computer's.
        """
        if move not in board.legal_moves:
            raise chess.IllegalMoveError(f"illegal move: {move.uci()} in {board.fen()}")

        eval_before, best_move = self._evaluate(board)
        san = board.san(move)

        after = board.copy()
        after.push(move)
        # the opponent moves next, so flip the sign back to the mover
        eval_after = -self._evaluate(after)[0]
        is_checkmate = after.is_checkmate()

        quality = get_move_rating(eval_before, eval_after, is_player_move, self.cfg)
        return {
            "move_uci": move.uci(),
            "move_san": san,
            "eval_before": eval_before,
            "eval_after": eval_after,
            "eval_change": eval_after - eval_before,
            "best_move": best_move.uci() if best_move else None,
            "is_checkmate": is_checkmate,
            "is_player_move": is_player_move,
            "label": quality.value if quality else None,
        }

    def analyze_game(self, moves: List[str], start_fen: Optional[str] = None,
                     user_color: chess.Color = chess.WHITE) -> List[Dict[str, Any]]:
        """
        Annotate a list of moves (UCI strings). An illegal or unparsable move
        produces an error entry and ends the report.
        """
        board = chess.Board(start_fen) if start_fen else chess.Board()
        report = []
        for mv_uci in moves:
            try:
                move = chess.Move.from_uci(mv_uci)
            except ValueError:
                move = None
            if move is None or move not in board.legal_moves:
                logger.warning("Stopping analysis at illegal move %s", mv_uci)
                report.append({"move_uci": mv_uci, "label": "Illegal", "error": True})
                break
            info = self.classify_move(board, move, is_player_move=(board.turn == user_color))
            info["error"] = False
            report.append(info)
            board.push(move)
        return report
