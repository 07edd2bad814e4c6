"""Core engine components: rules, board wrapper, evaluator and search."""

from .board import ChessBoard, GameStatus
from .evaluator import MaterialEvaluator
from .search import SearchEngine, SearchResult, find_best_move
