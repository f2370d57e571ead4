"""Game management layer — controller, events and the Qt change-feed bridge.

Quick start::

    from infinichess.game import GameController

    ctrl = GameController()
    ctrl.events.on_game_over.append(print)
    ctrl.new_game(position="K5,1+|R1,1+|k5,8+")
"""

from infinichess.game.controller import GameController, GameEvents
from infinichess.game.interfaces import GamePhase, IGameController

__all__ = [
    # Interfaces
    "GamePhase",
    "IGameController",
    # Concrete
    "GameController",
    "GameEvents",
]
