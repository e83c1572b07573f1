"""chesswatch: live chess position tracking and analysis dispatch."""

__version__ = "0.1.0"
