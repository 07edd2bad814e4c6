"""Rules-engine predicates used by the search, built on python-chess.

Apply and undo are ``board.push(move)`` / ``board.pop()``; every push made
during a search must be matched by exactly one pop.
"""

from typing import List, Optional

import chess


def side_to_move(board: chess.Board) -> chess.Color:
    return board.turn


def legal_moves(board: chess.Board, from_square: Optional[chess.Square] = None) -> List[chess.Move]:
    """Legal moves in generator order, optionally restricted to one origin square."""
    if from_square is None:
        return list(board.legal_moves)
    return list(board.generate_legal_moves(from_mask=chess.BB_SQUARES[from_square]))


def is_checkmate(board: chess.Board) -> bool:
    return board.is_checkmate()


def is_stalemate(board: chess.Board) -> bool:
    return board.is_stalemate()


def is_threefold_repetition(board: chess.Board) -> bool:
    return board.is_repetition(3)


def is_draw_by_rule(board: chess.Board) -> bool:
    """Draws that do not depend on move generation: fifty-move rule,
    insufficient material and threefold repetition."""
    return (
        board.halfmove_clock >= 100
        or board.is_insufficient_material()
        or is_threefold_repetition(board)
    )


def is_draw(board: chess.Board) -> bool:
    """Fifty-move rule, stalemate, insufficient material or threefold repetition."""
    return board.is_stalemate() or is_draw_by_rule(board)


def is_game_over(board: chess.Board) -> bool:
    return board.is_game_over() or is_draw(board)
