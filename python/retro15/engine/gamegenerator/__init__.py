from retro15.engine.gamegenerator.generator import (
    SolvableShuffler,
    inversion_count,
    is_solvable,
)

__all__ = ["SolvableShuffler", "inversion_count", "is_solvable"]
