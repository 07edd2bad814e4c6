import logging

logger = logging.getLogger(__name__)


def format_reasoning(engine_name, depth, score, elapsed):
    return (f"{engine_name} (Depth {depth}): Evaluated position score {score}. "
            f"Calculated in {elapsed:.2f}s.")


def describe_score(score_cp, mate_in=None):
    """Human text for a centipawn score, or a mate distance when one is known."""
    if mate_in is not None:
        return f"Mate in {mate_in}" if mate_in > 0 else f"Getting mated in {-mate_in}"
    if score_cp is None:
        return "Calculating..."
    pawns = f"{score_cp / 100:.2f}"
    if score_cp > 100:
        return f"+{pawns} (Winning)"
    if score_cp < -100:
        return f"{pawns} (Losing)"
    if score_cp > 0:
        return f"+{pawns}"
    if score_cp < 0:
        return pawns
    return "Equal"


def log_info(depth, score, nodes, elapsed, move, mate_score):
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    if abs(score) >= mate_score:
        score_str = f"{'win' if score > 0 else 'loss'} by mate ({score})"
    else:
        score_str = f"points {score}"
    move_str = move.uci() if move else "-"
    logger.info("depth %d score %s nodes %d nps %d time %.2fs move %s",
                depth, score_str, nodes, nps, elapsed, move_str)
