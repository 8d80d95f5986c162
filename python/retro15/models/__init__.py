from retro15.models.board import Board, Direction
from retro15.models.snapshot import SessionSnapshot

__all__ = ["Board", "Direction", "SessionSnapshot"]
