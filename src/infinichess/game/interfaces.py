"""Abstract interfaces for the game layer.

Renderers, network clients and tests depend on these, not on the concrete
controller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from infinichess.core.move import MoveDraft
    from infinichess.core.move_generator import LegalMoves
    from infinichess.core.rules import GameRules
    from infinichess.core.types import Coords


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states of a game."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    REVIEWING = auto()  # viewing a past position
    GAME_OVER = auto()


# ── Controller contract ──────────────────────────────────────────────────────


class IGameController(ABC):
    """Contract for driving a game from a UI or a network session."""

    @abstractmethod
    def new_game(self, rules: GameRules | None = None, position: str | None = None) -> None: ...

    @abstractmethod
    def legal_moves(self, coords: Coords) -> LegalMoves | None:
        """Legal moves of the piece on *coords* at the front of the game."""

    @abstractmethod
    def submit_move(self, draft: MoveDraft) -> bool:
        """Play a locally entered move. Returns False if it was illegal."""

    @abstractmethod
    def apply_remote_move(
        self, draft: MoveDraft, claimed_conclusion: str | Literal[False] = False
    ) -> Literal[True] | str:
        """Validate and play a move received from the opponent."""

    @abstractmethod
    def undo_move(self) -> bool: ...

    @abstractmethod
    def jump_to(self, index: int) -> None: ...

    @abstractmethod
    def conclude(self, conclusion: str) -> None:
        """End the game for a reason decided outside the board."""
