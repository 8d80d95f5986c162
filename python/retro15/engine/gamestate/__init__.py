from retro15.engine.gamestate.state import GameState

__all__ = ["GameState"]
