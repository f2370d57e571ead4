"""GameController — the external facade of one infinite-chess game.

Validates local and remote moves, plays them with game-over checks, drives
history navigation and republishes everything through simple callbacks so
renderers, clocks and tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from infinichess.core.enums import Player
from infinichess.core.game import Game
from infinichess.core.move import BoardChangeEvent, Move, MoveDraft
from infinichess.core.move_generator import (
    LegalMoves,
    MoveGenerator,
    is_opponents_move_legal,
    normalize_draft,
)
from infinichess.core.rules import GameRules
from infinichess.core.types import Coords
from infinichess.game.interfaces import GamePhase, IGameController

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, Game], None]
TurnCallback = Callable[[Player], None]
GameOverCallback = Callable[[str], None]
PhaseCallback = Callable[[GamePhase], None]
BoardChangeCallback = Callable[[BoardChangeEvent], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_turn_flipped: list[TurnCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_board_change: list[BoardChangeCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Owns a :class:`Game` and mediates every change made to it.

    Thread-safety: methods are designed to be called from a single thread
    (the main/UI thread); network messages should be marshalled onto it.
    """

    __slots__ = ("_game", "_phase", "_conclusion", "events")

    def __init__(self) -> None:
        self._game: Game | None = None
        self._phase = GamePhase.NOT_STARTED
        self._conclusion: str | Literal[False] = False
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def game(self) -> Game:
        if self._game is None:
            raise RuntimeError("No game in progress; call new_game() first")
        return self._game

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def conclusion(self) -> str | Literal[False]:
        return self._conclusion

    @property
    def is_game_over(self) -> bool:
        return self._conclusion is not False

    # ── IGameController impl ─────────────────────────────────────────────

    def new_game(self, rules: GameRules | None = None, position: str | None = None) -> None:
        if self._game is not None:
            self._game.remove_change_listener(self._emit_board_change)
        if position is None:
            game = Game.classical(rules)
        else:
            game = Game.from_string(position, rules)
        game.add_change_listener(self._emit_board_change)
        self._game = game
        self._conclusion = False

        self._set_phase(GamePhase.AWAITING_MOVE)
        self._emit_turn(game.whos_turn)

    def legal_moves(self, coords: Coords) -> LegalMoves | None:
        game = self.game
        if not game.is_at_front:
            return None
        return MoveGenerator(game).legal_moves_of(coords)

    def submit_move(self, draft: MoveDraft) -> bool:
        if self._phase != GamePhase.AWAITING_MOVE:
            _LOGGER.warning("Ignoring move %s while %s", draft, self._phase.name)
            return False

        game = self.game
        piece = game.board.piece_at(draft.start_coords)
        if piece is None or piece.player != game.whos_turn:
            return False
        gen = MoveGenerator(game)
        legal = gen.calculate(piece)
        target = gen.check_if_move_legal(
            legal, draft.start_coords, draft.end_coords, piece.player
        )
        if target is None:
            return False

        promotion = draft.promotion
        if target.promote_trigger != (promotion is not None):
            return False
        if promotion is not None:
            allowed = game.rules.promotions_allowed.get(piece.player, ())
            if promotion.player != piece.player or promotion.raw not in allowed:
                return False

        self._play(target.to_draft(draft.start_coords, promotion))
        return True

    def validate_remote_move(
        self, draft: MoveDraft | None, claimed_conclusion: str | Literal[False] = False
    ) -> Literal[True] | str:
        return is_opponents_move_legal(self.game, draft, claimed_conclusion)

    def apply_remote_move(
        self, draft: MoveDraft, claimed_conclusion: str | Literal[False] = False
    ) -> Literal[True] | str:
        if self.is_game_over:
            _LOGGER.warning("Ignoring remote move %s after game over", draft)
            return "Game is already over."
        verdict = self.validate_remote_move(draft, claimed_conclusion)
        if verdict is not True:
            return verdict
        draft = normalize_draft(draft)

        self.forward_to_front()
        game = self.game
        gen = MoveGenerator(game)
        piece = game.board.piece_at(draft.start_coords)
        legal = gen.calculate(piece)
        target = gen.check_if_move_legal(
            legal, draft.start_coords, draft.end_coords, piece.player
        )
        self._play(target.to_draft(draft.start_coords, draft.promotion))
        return True

    def undo_move(self) -> bool:
        game = self.game
        if self.is_game_over or not game.moves:
            return False
        game.forward_to_front()
        game.rewind_move()
        self._set_phase(GamePhase.AWAITING_MOVE)
        self._emit_turn(game.whos_turn)
        return True

    def jump_to(self, index: int) -> None:
        """Show the position after move *index* (-1 = start) without losing later moves."""
        game = self.game
        game.go_to_move(index)
        if self.is_game_over:
            return
        phase = GamePhase.AWAITING_MOVE if game.is_at_front else GamePhase.REVIEWING
        self._set_phase(phase)

    def forward_to_front(self) -> None:
        self.jump_to(len(self.game.moves) - 1)

    def conclude(self, conclusion: str) -> None:
        if self.is_game_over:
            return
        self._finish(conclusion)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _play(self, draft: MoveDraft) -> None:
        game = self.game
        move = game.make_move_from_draft(draft, do_game_over_checks=True)
        self._emit_move(move)
        if game.conclusion:
            self._finish(game.conclusion)
            return
        self._emit_turn(game.whos_turn)

    def _finish(self, conclusion: str) -> None:
        _LOGGER.info("Game over: %s", conclusion)
        self._conclusion = conclusion
        self._set_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(conclusion)

    def _set_phase(self, phase: GamePhase) -> None:
        if phase == self._phase:
            return
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)

    def _emit_move(self, move: Move) -> None:
        for cb in self.events.on_move:
            cb(move, self.game)

    def _emit_turn(self, player: Player) -> None:
        for cb in self.events.on_turn_flipped:
            cb(player)

    def _emit_board_change(self, event: BoardChangeEvent) -> None:
        for cb in self.events.on_board_change:
            cb(event)
