"""Position tracking: signal fusion, turn and castling inference."""

from chesswatch.tracking.castling import infer_castling_rights, is_king_move, strip_decorations
from chesswatch.tracking.context import TrackerContext, TurnState
from chesswatch.tracking.orientation import is_flipped, orientation_is_black
from chesswatch.tracking.probe import PROBE_MESSAGE_KIND, ProbeIntake, ProbeMessage
from chesswatch.tracking.resolver import PositionResolver
from chesswatch.tracking.turn import TurnTracker

__all__ = [
    "PROBE_MESSAGE_KIND",
    "PositionResolver",
    "ProbeIntake",
    "ProbeMessage",
    "TrackerContext",
    "TurnState",
    "TurnTracker",
    "infer_castling_rights",
    "is_flipped",
    "is_king_move",
    "orientation_is_black",
    "strip_decorations",
]
