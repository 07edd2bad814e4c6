"""EnitChess: play chess against a material-counting minimax engine."""

__version__ = "1.0.0"
