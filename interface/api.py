"""FastAPI REST interface for a single local game against EnitChess."""

import logging
import threading

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import List, Optional

from enitchess import __version__
from enitchess.analyzer import Analyzer
from enitchess.config import CONFIG, configure_logging
from enitchess.core.board import color_code
from enitchess.main import Engine

configure_logging()
_log = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.ui.engine_name, version=__version__)

# Shared game; every request runs under the lock so searches never overlap moves.
game = Engine()
analyzer = Analyzer()
_game_lock = threading.Lock()
# the analyzer owns its own search engine; analyses run one at a time
_analysis_lock = threading.Lock()


class FenRequest(BaseModel):
    fen: str


class MoveRequest(BaseModel):
    move: str  # UCI "e2e4" or SAN "e4"


class SearchRequest(BaseModel):
    depth: Optional[int] = None


class AnalyzeRequest(BaseModel):
    moves: List[str]
    fen: Optional[str] = None


def _board_state():
    board = game.board
    return {
        "fen": board.get_fen(),
        "turn": "white" if board.board.turn == chess.WHITE else "black",
        "user_color": color_code(game.user_color),
        "legal_moves": board.get_legal_moves(),
        "history": list(board.move_history),
        "captured": board.captured_pieces(),
        "status": board.status().value,
        "is_game_over": board.is_game_over(),
        "result": board.board.result(claim_draw=True) if board.is_game_over() else None,
        "message": board.outcome_message(game.user_color),
        "reasoning": game.last_reasoning,
    }


def _result_payload(result, board: chess.Board):
    return {
        "best_move": result.move.uci() if result.move else None,
        "san": board.san(result.move) if result.move else None,
        "score": result.score,
        "depth": result.depth,
        "nodes": result.nodes,
        "reasoning": result.reasoning,
    }


@app.get("/board")
def get_board():
    with _game_lock:
        return _board_state()


@app.post("/position")
def set_position(req: FenRequest):
    with _game_lock:
        try:
            game.board.set_fen(req.fen)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid FEN: {e}")
        game.last_reasoning = None
        return {"fen": game.board.get_fen()}


@app.post("/move")
def make_move(req: MoveRequest):
    with _game_lock:
        if game.board.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        if game.board.board.turn != game.user_color:
            raise HTTPException(status_code=400, detail="Not your turn")
        if not game.make_move(req.move):
            raise HTTPException(status_code=400, detail=f"Illegal move: {req.move}")
        return {"fen": game.board.get_fen(), "move": req.move, "san": game.board.move_history[-1]}


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _game_lock:
        if game.board.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        if req.depth is not None and req.depth < 1:
            raise HTTPException(status_code=400, detail="Depth must be >= 1")
        search_board = game.board.board.copy()
        result = game.search.find_best_move(search_board, req.depth or game.depth)
        payload = _result_payload(result, search_board)
        payload["fen"] = search_board.fen()
        return payload


@app.post("/computer")
def computer_move():
    with _game_lock:
        before = game.board.board.copy()
        result = game.play_computer_turn()
        if result is None:
            raise HTTPException(status_code=400, detail="Not the computer's turn or game over")
        payload = _result_payload(result, before)
        payload["fen"] = game.board.get_fen()
        return payload


@app.post("/undo")
def undo():
    with _game_lock:
        if not game.undo_turn():
            raise HTTPException(status_code=400, detail="Nothing to undo")
        return {"fen": game.board.get_fen()}


@app.post("/analyze")
def analyze(req: AnalyzeRequest):
    with _analysis_lock:
        try:
            report = analyzer.analyze_game(req.moves, start_fen=req.fen)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid FEN: {e}")
        return {"report": report}


@app.post("/reset")
def reset_board():
    with _game_lock:
        game.reset()
        return {"fen": game.board.get_fen()}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=CONFIG.ui.api_port)
