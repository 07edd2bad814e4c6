"""Board wrapper over python-chess providing move history, captures and game status."""

import enum
import logging
from typing import Dict, List, Optional

import chess

from enitchess.core import rules

logger = logging.getLogger(__name__)


class GameStatus(str, enum.Enum):
    IN_PROGRESS = "IN_PROGRESS"
    CHECKMATE = "CHECKMATE"
    DRAW = "DRAW"
    STALEMATE = "STALEMATE"
    INSUFFICIENT_MATERIAL = "INSUFFICIENT_MATERIAL"


def color_code(color: chess.Color) -> str:
    return "w" if color == chess.WHITE else "b"


def parse_color(code: str) -> chess.Color:
    if code.lower() in ("w", "white"):
        return chess.WHITE
    if code.lower() in ("b", "black"):
        return chess.BLACK
    raise ValueError(f"Unknown color: {code!r}")


class ChessBoard:
    def __init__(self, fen: str = None):
        """Initialize from FEN or the standard starting position."""
        self.board = chess.Board(fen) if fen else chess.Board()
        self.move_history: List[str] = []
        self._captures: List[Optional[str]] = []

    def reset(self):
        """Reset to the initial position."""
        self.board.reset()
        self.move_history.clear()
        self._captures.clear()

    def set_fen(self, fen: str):
        """Set board state from a FEN string. Raises ValueError on bad FEN."""
        self.board.set_fen(fen)
        self.move_history.clear()
        self._captures.clear()

    def get_fen(self) -> str:
        """Return the current FEN."""
        return self.board.fen()

    @property
    def last_move(self) -> Optional[chess.Move]:
        return self.board.peek() if self.board.move_stack else None

    def parse_move(self, text: str) -> Optional[chess.Move]:
        """Resolve a UCI or SAN string to a legal move, or None.

        A pawn move to the last rank without a promotion piece is promoted
        to a queen.
        """
        text = text.strip()
        if not text:
            return None
        try:
            move = chess.Move.from_uci(text)
        except ValueError:
            try:
                return self.board.parse_san(text)
            except ValueError:
                return None
        if move in self.board.legal_moves:
            return move
        if move.promotion is None:
            promo = chess.Move(move.from_square, move.to_square, chess.QUEEN)
            if promo in self.board.legal_moves:
                return promo
        return None

    def make_move(self, move_str: str) -> bool:
        """Push a UCI ('e2e4') or SAN ('e4') move. Returns True if legal."""
        move = self.parse_move(move_str)
        if move is None:
            logger.debug("Rejected move %r in %s", move_str, self.board.fen())
            return False
        self.push_move(move)
        return True

    def push_move(self, move: chess.Move) -> str:
        """Push a move object and return its SAN. Raises chess.IllegalMoveError."""
        if move not in self.board.legal_moves:
            raise chess.IllegalMoveError(f"illegal move: {move.uci()} in {self.board.fen()}")
        captured = self._captured_piece(move)
        san = self.board.san(move)
        self.board.push(move)
        self.move_history.append(san)
        self._captures.append(captured)
        return san

    def undo_move(self, plies: int = 1) -> int:
        """Pop up to ``plies`` moves. Returns how many were undone."""
        undone = 0
        while undone < plies and self.board.move_stack:
            self.board.pop()
            if self.move_history:
                self.move_history.pop()
                self._captures.pop()
            undone += 1
        return undone

    def undo_turn(self) -> bool:
        """Undo the computer's reply and the human's move together."""
        if len(self.move_history) < 2:
            return False
        self.undo_move(2)
        return True

    def _captured_piece(self, move: chess.Move) -> Optional[str]:
        if self.board.is_en_passant(move):
            return "p"
        victim = self.board.piece_at(move.to_square)
        if victim is None or victim.color == self.board.turn:
            return None
        return victim.symbol().lower()

    def captured_pieces(self) -> Dict[str, List[str]]:
        """Piece letters captured by each colour, in the order they were taken."""
        result = {"w": [], "b": []}
        # replay colours from the side that made the first recorded move
        mover = self.board.turn if len(self._captures) % 2 == 0 else not self.board.turn
        for captured in self._captures:
            if captured:
                result[color_code(mover)].append(captured)
            mover = not mover
        return result

    def get_legal_moves(self):
        """Return legal moves as UCI strings."""
        return [m.uci() for m in self.board.legal_moves]

    def legal_moves_from(self, square_name: str) -> List[str]:
        """Legal UCI moves starting on one square, e.g. 'e2'."""
        square = chess.parse_square(square_name)
        return [m.uci() for m in rules.legal_moves(self.board, square)]

    def is_game_over(self):
        """Check if the game has ended."""
        return rules.is_game_over(self.board)

    def status(self) -> GameStatus:
        if rules.is_checkmate(self.board):
            return GameStatus.CHECKMATE
        if rules.is_stalemate(self.board):
            return GameStatus.STALEMATE
        if self.board.is_insufficient_material():
            return GameStatus.INSUFFICIENT_MATERIAL
        if rules.is_draw(self.board):
            return GameStatus.DRAW
        return GameStatus.IN_PROGRESS

    def outcome_message(self, user_color: chess.Color) -> str:
        status = self.status()
        if status == GameStatus.CHECKMATE:
            if self.board.turn == user_color:
                return "EnitChess wins by Checkmate!"
            return "You win by Checkmate!"
        if status == GameStatus.DRAW:
            return "Game drawn."
        if status == GameStatus.STALEMATE:
            return "Game drawn by Stalemate."
        if status == GameStatus.INSUFFICIENT_MATERIAL:
            return "Draw by Insufficient Material."
        return ""

    def print_board(self):
        """Print ASCII representation."""
        print(self.board)
