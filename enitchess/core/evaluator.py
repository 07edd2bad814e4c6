"""Material-only static evaluator."""

import chess
from enitchess.config import CONFIG


class MaterialEvaluator:
    def __init__(self, piece_values=None):
        values = piece_values or CONFIG.eval.piece_values
        self.values = {
            pt: int(values.get(chess.piece_name(pt).upper(), 0))
            for pt in chess.PIECE_TYPES
        }

    def evaluate(self, board: chess.Board, perspective: chess.Color) -> int:
        """Material of ``perspective`` minus material of the opponent.

        No positional terms; the score depends only on which pieces are on
        the board, so ``evaluate(b, WHITE) == -evaluate(b, BLACK)``.
        """
        score = 0
        for pt, value in self.values.items():
            own = chess.popcount(board.pieces_mask(pt, perspective))
            other = chess.popcount(board.pieces_mask(pt, not perspective))
            score += value * (own - other)
        return score
