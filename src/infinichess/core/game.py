"""Game — the owned state of one infinite-chess game.

Moves are *generated* into a :class:`~infinichess.core.move.Move` that lists
its board changes and the state deltas needed to rewind it, then *applied*
forward or backward.  Because every application is a pure replay of those
diffs, any index of the move list can be revisited without losing the moves
after it.

Example::

    game = Game.classical()
    move = game.generate_move(MoveDraft((5, 2), (5, 4)))
    game.make_move(move)
    game.rewind_move()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Literal

from infinichess.core import attacks, game_end, specials
from infinichess.core.board import Board
from infinichess.core.enums import (
    BoardChangeKind,
    Player,
    RawType,
    SpecialCategory,
    WinCondition,
)
from infinichess.core.move import (
    AddPiece,
    Attacker,
    AttackersChange,
    BoardChange,
    BoardChangeEvent,
    CapturePiece,
    CheckChange,
    ChecksGivenChange,
    ConclusionChange,
    DeletePiece,
    EnPassant,
    EnPassantChange,
    Move,
    MoveDraft,
    MovePiece,
    MoveRuleChange,
    SpecialRightChange,
    StateChange,
)
from infinichess.core.movesets import (
    Moveset,
    Vicinity,
    colinears_present,
    default_movesets,
    empty_moveset,
    generate_special_vicinity,
    generate_vicinity,
    possible_slides,
)
from infinichess.core.piece import Piece, PieceType
from infinichess.core.rules import GameRules
from infinichess.core.types import Coords, Vec2

_LOGGER = logging.getLogger(__name__)

ChangeListener = Callable[[BoardChangeEvent], None]
Conclusion = str | Literal[False]

_EMPTY_MOVESET = empty_moveset()


@dataclass(frozen=True, slots=True)
class SimulationResult:
    """Outcome of a move that was made and immediately rewound."""

    check: bool
    royals_in_check: tuple[Coords, ...]
    attackers: tuple[Attacker, ...] | None = None
    conclusion: Conclusion = False


class Game:
    """Board, rules and history of one game.

    The game is only ever mutated through :meth:`make_move`,
    :meth:`rewind_move` and the navigation helpers, so the indices of the
    board always describe the position at :attr:`move_index`.
    """

    __slots__ = (
        "rules",
        "movesets",
        "board",
        "vicinity",
        "special_vicinity",
        "colinears_present",
        "special_rights",
        "enpassant",
        "move_rule_state",
        "in_check",
        "attackers",
        "checks_given",
        "conclusion",
        "moves",
        "move_index",
        "whos_turn",
        "_listeners",
        "_silent",
    )

    def __init__(
        self,
        position: Mapping[Coords, PieceType],
        special_rights: Iterable[Coords] = (),
        rules: GameRules | None = None,
        *,
        enpassant: EnPassant | None = None,
        move_rule_state: int = 0,
    ) -> None:
        self.rules = rules.copy() if rules is not None else GameRules()

        present = {piece_type.raw for piece_type in position.values()}
        promotion_types = self._promotion_types()
        present.update(t.raw for t in promotion_types)
        self.movesets: dict[RawType, Moveset] = {
            raw: moveset
            for raw, moveset in default_movesets(self.rules.slide_limit).items()
            if raw in present
        }
        slides: list[Vec2] = possible_slides(self.movesets)
        self.board = Board.from_position(dict(position), slides, promotion_types)
        self.vicinity: Vicinity = generate_vicinity(self.movesets)
        self.special_vicinity: Vicinity = generate_special_vicinity(present)
        self.colinears_present = colinears_present(slides)

        self.special_rights: set[Coords] = set(special_rights)
        self.enpassant = enpassant
        self.move_rule_state = move_rule_state
        self.in_check: tuple[Coords, ...] = ()
        self.attackers: tuple[Attacker, ...] = ()
        self.checks_given: dict[Player, int] = {}
        self.conclusion: Conclusion = False

        self.moves: list[Move] = []
        self.move_index = -1
        self.whos_turn = self.rules.whose_turn_at(-1)

        self._listeners: list[ChangeListener] = []
        self._silent = 0

        if not game_end.is_checkmate_compatible(self):
            _LOGGER.debug(
                "Position is not checkmate compatible, swapping checkmate "
                "for royal capture"
            )
            self.rules.swap_checkmate_for_royal_capture()

        track = self.rules.opponent_uses(self.whos_turn, WinCondition.CHECKMATE)
        result = attacks.detect_check(self, self.whos_turn, track_attackers=track)
        self.in_check = tuple(result.royals_in_check)
        self.attackers = tuple(result.attackers or ())

    @classmethod
    def from_string(cls, text: str, rules: GameRules | None = None) -> Game:
        """Build a game from a short position string such as ``"K5,1+|k5,8+"``."""
        from infinichess.core.variants import position_from_string

        position, special_rights = position_from_string(text)
        return cls(position, special_rights, rules)

    @classmethod
    def classical(cls, rules: GameRules | None = None) -> Game:
        from infinichess.core.variants import classical_position

        position, special_rights = classical_position()
        return cls(position, special_rights, rules)

    def _promotion_types(self) -> list[PieceType]:
        if self.rules.promotion_ranks is None:
            return []
        return [
            PieceType(raw, player)
            for player, raws in self.rules.promotions_allowed.items()
            for raw in raws
        ]

    # ── Queries ──────────────────────────────────────────────────────────

    def moveset_of(self, piece_type: PieceType) -> Moveset:
        return self.movesets.get(piece_type.raw, _EMPTY_MOVESET)

    @property
    def is_at_front(self) -> bool:
        return self.move_index == len(self.moves) - 1

    @property
    def last_move(self) -> Move | None:
        """The move that produced the current position, if any."""
        if self.move_index < 0:
            return None
        return self.moves[self.move_index]

    def is_player_in_check(self, player: Player) -> bool:
        """Whether a royal of *player* is in the recorded check state."""
        royals = self.board.royal_coords(player)
        return any(coords in royals for coords in self.in_check)

    # ── Change feed ──────────────────────────────────────────────────────

    def add_change_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        self._listeners.remove(listener)

    def _publish(self, kind: BoardChangeKind, piece: Piece, previous: Coords | None = None) -> None:
        if self._silent or not self._listeners:
            return
        event = BoardChangeEvent(kind, piece, previous)
        for listener in list(self._listeners):
            listener(event)

    # ── Move generation ──────────────────────────────────────────────────

    def generate_move(self, draft: MoveDraft) -> Move:
        """Turn *draft* into a move holding every diff needed to play or undo it.

        The draft is trusted; use :func:`~infinichess.core.move_generator.
        is_opponents_move_legal` to validate untrusted input first.  Special
        tags missing from the draft are recovered from the piece's special
        moves, so bare start/end drafts replay correctly.
        """
        piece = self.board.piece_at(draft.start_coords)
        if piece is None:
            raise ValueError(f"No piece at start coords {draft.start_coords}")
        category = self.moveset_of(piece.type).special
        if category is not None:
            draft = self._with_special_tags(draft, piece, category)

        move = Move(
            type=piece.type,
            start_coords=draft.start_coords,
            end_coords=draft.end_coords,
            generate_index=self.move_index + 1,
            promotion=draft.promotion,
            castle=draft.castle,
            enpassant=draft.enpassant,
            enpassant_create=draft.enpassant_create,
            path=draft.path,
        )
        move.rewind_info.append(EnPassantChange(self.enpassant, None))
        self.queue_special_right_removal(move, move.start_coords)
        self.queue_special_right_removal(move, move.end_coords)

        if category is None or not specials.execute(self, piece, move, category):
            captured = self.board.piece_at(move.end_coords)
            if captured is not None:
                move.changes.append(CapturePiece(piece, move.end_coords, captured))
            else:
                move.changes.append(MovePiece(piece, move.end_coords))

        if self.rules.move_rule is not None:
            resets = move.is_capture or piece.raw == RawType.PAWN
            future = 0 if resets else self.move_rule_state + 1
            move.rewind_info.append(MoveRuleChange(self.move_rule_state, future))
        return move

    def _with_special_tags(
        self, draft: MoveDraft, piece: Piece, category: SpecialCategory
    ) -> MoveDraft:
        if (
            draft.castle is not None
            or draft.enpassant
            or draft.enpassant_create is not None
            or draft.path is not None
        ):
            return draft
        (x1, y1), (x2, y2) = draft.start_coords, draft.end_coords
        if category == SpecialCategory.CASTLER:
            # A castling royal always travels two squares.
            maybe_special = y1 == y2 and abs(x2 - x1) == 2
        elif category == SpecialCategory.PAWN:
            maybe_special = (x1 == x2 and abs(y2 - y1) == 2) or (
                self.enpassant is not None and draft.end_coords == self.enpassant.square
            )
        else:
            maybe_special = True
        if not maybe_special:
            return draft

        for target in specials.detect(self, draft.start_coords, piece.player, category):
            if target.coords == draft.end_coords:
                return replace(
                    draft,
                    castle=target.castle,
                    enpassant=target.enpassant,
                    enpassant_create=target.enpassant_create,
                    path=target.path,
                )
        return draft

    def queue_special_right_removal(self, move: Move, coords: Coords) -> None:
        if coords in self.special_rights:
            move.rewind_info.append(SpecialRightChange(coords, True, False))

    def queue_enpassant_creation(self, move: Move, enpassant: EnPassant) -> None:
        """Replace the queued en passant deletion with *enpassant*."""
        for i, change in enumerate(move.rewind_info):
            if isinstance(change, EnPassantChange):
                move.rewind_info[i] = EnPassantChange(change.current, enpassant)
                return
        move.rewind_info.append(EnPassantChange(self.enpassant, enpassant))

    # ── Making and rewinding ─────────────────────────────────────────────

    def make_move(
        self,
        move: Move,
        *,
        flip_turn: bool = True,
        record_move: bool = True,
        do_game_over_checks: bool = False,
        simulated: bool = False,
    ) -> None:
        """Apply a freshly generated *move* on top of the current position.

        With ``record_move=False`` the move is applied without joining the
        move list; it must then be undone with ``rewind_move(move)``.
        Simulated moves are silent on the change feed.
        """
        if move.generate_index != self.move_index + 1:
            raise RuntimeError(
                f"Move was generated for index {move.generate_index}, "
                f"current index is {self.move_index}"
            )
        if record_move:
            if not self.is_at_front:
                raise RuntimeError(
                    "Cannot record a move while viewing history; "
                    "call forward_to_front() or truncate_forward_history() first"
                )
            self.moves.append(move)

        if simulated:
            self._silent += 1
        try:
            self._apply(move, forward=True)
            if flip_turn:
                self.whos_turn = self.rules.whose_turn_at(self.move_index)
            self._queue_and_apply(move, self._check_state_changes(move))
            move.check = bool(self.in_check)
            if do_game_over_checks:
                conclusion = game_end.get_game_conclusion(self)
                self._queue_and_apply(
                    move, [ConclusionChange(self.conclusion, conclusion)]
                )
                if conclusion and not conclusion.startswith("draw"):
                    move.mate = True
                if conclusion and not simulated:
                    _LOGGER.info("Game concluded: %s", conclusion)
        finally:
            if simulated:
                self._silent -= 1

    def make_move_from_draft(self, draft: MoveDraft, **options: bool) -> Move:
        move = self.generate_move(draft)
        self.make_move(move, **options)
        return move

    def rewind_move(self, move: Move | None = None, *, simulated: bool = False) -> None:
        """Undo the last recorded move, or the unrecorded *move* just made."""
        if move is None:
            if not self.moves or not self.is_at_front:
                raise RuntimeError("No move to rewind at the front of the game")
            move = self.moves.pop()
        elif move.generate_index != self.move_index:
            raise RuntimeError(
                f"Cannot rewind move {move} from index {self.move_index}"
            )

        if simulated:
            self._silent += 1
        try:
            self._apply(move, forward=False)
        finally:
            if simulated:
                self._silent -= 1
        self.whos_turn = self.rules.whose_turn_at(self.move_index)

    def _check_state_changes(self, move: Move) -> list[StateChange]:
        player = self.whos_turn
        track = self.rules.opponent_uses(player, WinCondition.CHECKMATE)
        result = attacks.detect_check(self, player, track_attackers=track)
        changes: list[StateChange] = [
            CheckChange(self.in_check, tuple(result.royals_in_check)),
            AttackersChange(self.attackers, tuple(result.attackers or ())),
        ]
        mover = self.rules.player_of_move(move.generate_index)
        if result.check and self.rules.has_win_condition(
            mover, WinCondition.THREECHECK
        ):
            current = tuple(sorted(self.checks_given.items()))
            counts = dict(self.checks_given)
            counts[mover] = counts.get(mover, 0) + 1
            changes.append(ChecksGivenChange(current, tuple(sorted(counts.items()))))
        return changes

    def _queue_and_apply(self, move: Move, changes: list[StateChange]) -> None:
        for change in changes:
            move.rewind_info.append(change)
            self._apply_state(change, forward=True)

    def _apply(self, move: Move, *, forward: bool) -> None:
        if forward:
            for change in move.changes:
                self._apply_board_forward(change)
            for delta in move.rewind_info:
                self._apply_state(delta, forward=True)
            self.move_index += 1
        else:
            for change in reversed(move.changes):
                self._apply_board_backward(change)
            for delta in reversed(move.rewind_info):
                self._apply_state(delta, forward=False)
            self.move_index -= 1

    def _apply_board_forward(self, change: BoardChange) -> None:
        board = self.board
        if isinstance(change, AddPiece):
            piece = change.piece
            self._publish(
                BoardChangeKind.ADDED,
                board.organize(piece.type, piece.coords, piece.index),
            )
        elif isinstance(change, DeletePiece):
            self._publish(BoardChangeKind.REMOVED, board.remove(change.piece.coords))
        elif isinstance(change, MovePiece):
            moved = board.relocate(change.piece.coords, change.end_coords)
            self._publish(BoardChangeKind.MOVED, moved, change.piece.coords)
        elif isinstance(change, CapturePiece):
            self._publish(
                BoardChangeKind.REMOVED, board.remove(change.captured.coords)
            )
            moved = board.relocate(change.piece.coords, change.end_coords)
            self._publish(BoardChangeKind.MOVED, moved, change.piece.coords)
        else:
            raise TypeError(f"Unknown board change: {change!r}")

    def _apply_board_backward(self, change: BoardChange) -> None:
        board = self.board
        if isinstance(change, AddPiece):
            self._publish(BoardChangeKind.REMOVED, board.remove(change.piece.coords))
        elif isinstance(change, DeletePiece):
            piece = change.piece
            self._publish(
                BoardChangeKind.ADDED,
                board.organize(piece.type, piece.coords, piece.index),
            )
        elif isinstance(change, MovePiece):
            moved = board.relocate(change.end_coords, change.piece.coords)
            self._publish(BoardChangeKind.MOVED, moved, change.end_coords)
        elif isinstance(change, CapturePiece):
            moved = board.relocate(change.end_coords, change.piece.coords)
            self._publish(BoardChangeKind.MOVED, moved, change.end_coords)
            captured = change.captured
            self._publish(
                BoardChangeKind.ADDED,
                board.organize(captured.type, captured.coords, captured.index),
            )
        else:
            raise TypeError(f"Unknown board change: {change!r}")

    def _apply_state(self, delta: StateChange, *, forward: bool) -> None:
        value = delta.future if forward else delta.current
        if isinstance(delta, EnPassantChange):
            self.enpassant = value
        elif isinstance(delta, SpecialRightChange):
            if value:
                self.special_rights.add(delta.coords)
            else:
                self.special_rights.discard(delta.coords)
        elif isinstance(delta, MoveRuleChange):
            self.move_rule_state = value
        elif isinstance(delta, CheckChange):
            self.in_check = value
        elif isinstance(delta, AttackersChange):
            self.attackers = value
        elif isinstance(delta, ChecksGivenChange):
            self.checks_given = dict(value)
        elif isinstance(delta, ConclusionChange):
            self.conclusion = value
        else:
            raise TypeError(f"Unknown state change: {delta!r}")

    # ── Navigation ───────────────────────────────────────────────────────

    def go_to_move(self, index: int) -> None:
        """Show the position after the move at *index* (-1 = start position).

        Moves after *index* are kept and can be replayed.
        """
        if not -1 <= index < len(self.moves):
            raise RuntimeError(
                f"Move index {index} out of range (-1..{len(self.moves) - 1})"
            )
        if index != self.move_index:
            _LOGGER.debug("Navigating from move %d to %d", self.move_index, index)
        while self.move_index > index:
            self._apply(self.moves[self.move_index], forward=False)
        while self.move_index < index:
            self._apply(self.moves[self.move_index + 1], forward=True)
        self.whos_turn = self.rules.whose_turn_at(self.move_index)

    def rewind_to_index(self, index: int) -> None:
        if index > self.move_index:
            raise RuntimeError(
                f"Cannot rewind forward to {index} from {self.move_index}"
            )
        self.go_to_move(index)

    def forward_to_front(self) -> None:
        self.go_to_move(len(self.moves) - 1)

    def truncate_forward_history(self) -> None:
        """Discard every move after the current index."""
        del self.moves[self.move_index + 1 :]

    # ── Simulation ───────────────────────────────────────────────────────

    def simulate_move(
        self,
        draft: MoveDraft,
        color_to_test: Player,
        *,
        track_attackers: bool = False,
    ) -> SimulationResult:
        """Make *draft*, detect check on *color_to_test*, then rewind."""
        move = self.generate_move(draft)
        self.make_move(move, record_move=False, simulated=True)
        try:
            result = attacks.detect_check(
                self, color_to_test, track_attackers=track_attackers
            )
        finally:
            self.rewind_move(move, simulated=True)
        return SimulationResult(
            check=result.check,
            royals_in_check=tuple(result.royals_in_check),
            attackers=None if result.attackers is None else tuple(result.attackers),
        )

    def simulated_conclusion(self, draft: MoveDraft) -> Conclusion:
        """Conclusion the game would reach if *draft* were played now."""
        if not self.is_at_front:
            raise RuntimeError("Conclusions can only be simulated at the front")
        move = self.generate_move(draft)
        self.make_move(move, do_game_over_checks=True, simulated=True)
        try:
            return self.conclusion
        finally:
            self.rewind_move(simulated=True)

    def __repr__(self) -> str:
        return (
            f"Game(pieces={len(self.board)}, move_index={self.move_index}, "
            f"whos_turn={self.whos_turn})"
        )
