"""Backend dispatch: request models, transport and the single-slot controller."""

from chesswatch.dispatch.controller import DispatchController
from chesswatch.dispatch.models import (
    AnalysisRequest,
    BackendReply,
    BestMove,
    DispatchOutcome,
    DispatchState,
    parse_best_move,
)
from chesswatch.dispatch.transport import (
    AnalysisTransport,
    BackendHealthProbe,
    PendingCall,
    QtAnalysisTransport,
)

__all__ = [
    "AnalysisRequest",
    "AnalysisTransport",
    "BackendHealthProbe",
    "BackendReply",
    "BestMove",
    "DispatchController",
    "DispatchOutcome",
    "DispatchState",
    "PendingCall",
    "QtAnalysisTransport",
    "parse_best_move",
]
