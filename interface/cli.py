import argparse
import sys

from enitchess.config import CONFIG, configure_logging
from enitchess.main import Engine, ENGINE_MODES


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play chess against EnitChess in the terminal.")
    parser.add_argument("--depth", type=int, default=CONFIG.search.depth, help="search depth in plies")
    parser.add_argument("--color", choices=["w", "b"], default=CONFIG.ui.user_color, help="your colour")
    parser.add_argument("--mode", choices=ENGINE_MODES, default=CONFIG.ui.engine_mode)
    parser.add_argument("--fen", default=None, help="start from this position")
    return parser.parse_args(argv)


def handle_command(engine: Engine, line: str) -> bool:
    """Apply one line of user input. Returns False when the user wants to quit."""
    line = line.strip()
    if line in ("quit", "exit"):
        return False
    if line == "undo":
        if not engine.undo_turn():
            print("Nothing to undo.")
    elif line == "swap":
        engine.swap_sides()
    elif line.startswith("moves "):
        try:
            print(" ".join(engine.board.legal_moves_from(line.split()[1])) or "No moves.")
        except ValueError:
            print("Unknown square.")
    elif not engine.make_move(line):
        print("Illegal move, try again.")
    return True


def main(argv=None, input_fn=input):
    args = parse_args(argv)
    configure_logging()
    engine = Engine(depth=args.depth, mode=args.mode, user_color=args.color, fen=args.fen)

    try:
        while not engine.board.is_game_over():
            engine.print_board()
            print("----------------------------")

            if engine.is_computer_turn():
                result = engine.play_computer_turn()
                print(f"Engine plays: {engine.board.move_history[-1]} | {result.reasoning}")
                continue

            try:
                line = input_fn("Your move (e2e4 / Nf3, 'undo', 'swap', 'moves e2', 'quit'): ")
            except EOFError:
                break
            if not handle_command(engine, line):
                break
    finally:
        engine.close()

    engine.print_board()
    print("Game Over")
    print(engine.board.outcome_message(engine.user_color) or f"Result: {engine.board.board.result()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
