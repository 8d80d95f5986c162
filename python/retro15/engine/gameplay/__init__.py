from retro15.engine.gameplay.game import (
    MoveEngine,
    MoveResult,
    Moved,
    Rejected,
    RejectReason,
)

__all__ = ["MoveEngine", "MoveResult", "Moved", "Rejected", "RejectReason"]
