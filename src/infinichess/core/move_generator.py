"""Legal move generation.

Leaps are listed square by square; slides are kept compact as a
``(min_steps, max_steps)`` window per direction, because on an unbounded
board they may reach infinitely many squares.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Literal

from infinichess.core import check_resolver, game_end, specials
from infinichess.core.board import Board
from infinichess.core.enums import BlockResult, Player, RawType
from infinichess.core.move import CastleTag, EnPassant, MoveDraft, Path
from infinichess.core.movesets import (
    BlockingFunction,
    IgnoreFunction,
    SlideLimits,
    default_ignore,
)
from infinichess.core.piece import Piece, PieceType
from infinichess.core.types import Coords, Vec2, add_coords, line_key, slide_axis

if TYPE_CHECKING:
    from infinichess.core.game import Game

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MoveTarget:
    """A square a piece may move to, plus any special-move tags."""

    coords: Coords
    castle: CastleTag | None = None
    enpassant: bool = False
    enpassant_create: EnPassant | None = None
    promote_trigger: bool = False
    path: Path | None = None

    def to_draft(self, start: Coords, promotion: PieceType | None = None) -> MoveDraft:
        return MoveDraft(
            start_coords=start,
            end_coords=self.coords,
            promotion=promotion,
            castle=self.castle,
            enpassant=self.enpassant,
            enpassant_create=self.enpassant_create,
            path=self.path,
        )


@dataclass(slots=True)
class LegalMoves:
    individual: list[MoveTarget] = field(default_factory=list)
    sliding: dict[Vec2, SlideLimits] = field(default_factory=dict)
    ignore: IgnoreFunction = default_ignore
    # Slides must be simulated square by square before being trusted.
    brute: bool = False

    def targets(self) -> list[Coords]:
        return [target.coords for target in self.individual]


# ── Slide geometry ──────────────────────────────────────────────────────────


def slide_legal_limit(
    blocking: BlockingFunction,
    board: Board,
    line: list[Coords],
    direction: Vec2,
    limits: SlideLimits,
    coords: Coords,
    color: Player,
) -> SlideLimits:
    """Shrink *limits* to the blockers on *line* around the piece on *coords*."""
    axis = slide_axis(direction)
    low, high = limits
    for blocker_coords in line:
        blocker = board.piece_at(blocker_coords)
        if blocker is None:
            continue
        result = blocking(color, blocker, coords)
        if result == BlockResult.NONE:
            continue
        steps = (blocker_coords[axis] - coords[axis]) // direction[axis]
        if steps < 0:
            bound = steps + 1 if result == BlockResult.BLOCKS else steps
            if bound > low:
                low = bound
        elif steps > 0:
            bound = steps - 1 if result == BlockResult.BLOCKS else steps
            if bound < high:
                high = bound
    return (low, high)


def slide_contains_square(
    limits: SlideLimits,
    direction: Vec2,
    piece_coords: Coords,
    coords: Coords,
    ignore: IgnoreFunction = default_ignore,
) -> bool:
    """Whether *coords*, already known to be on the line, is inside *limits*."""
    axis = slide_axis(direction)
    low = limits[0] * direction[axis] + piece_coords[axis]
    high = limits[1] * direction[axis] + piece_coords[axis]
    if not low <= coords[axis] <= high:
        return False
    return ignore(piece_coords, coords)


def has_at_least_one_move(
    legal: LegalMoves, game: Game | None = None, piece: Piece | None = None
) -> bool:
    """Whether *legal* offers any move.

    Brute-forced slides of *piece* only count once a square in their window
    survives simulation in *game*.  An unbounded brute window always counts.
    """
    if legal.individual:
        return True
    for direction, limits in legal.sliding.items():
        low, high = limits
        if high - low <= 0:
            continue
        if not legal.brute or game is None or piece is None:
            return True
        if math.isinf(low) or math.isinf(high):
            return True
        if _any_brute_slide_legal(game, legal, piece, direction, limits):
            return True
    return False


def _any_brute_slide_legal(
    game: Game, legal: LegalMoves, piece: Piece, direction: Vec2, limits: SlideLimits
) -> bool:
    start = piece.coords
    for steps in range(int(limits[0]), int(limits[1]) + 1):
        if steps == 0:
            continue
        end = (start[0] + steps * direction[0], start[1] + steps * direction[1])
        if not legal.ignore(start, end):
            continue
        if not game.simulate_move(MoveDraft(start, end), piece.player).check:
            return True
    return False


# ── Generator ───────────────────────────────────────────────────────────────


class MoveGenerator:
    """Calculates legal moves for pieces of a :class:`Game`."""

    __slots__ = ("_game",)

    def __init__(self, game: Game) -> None:
        self._game = game

    def calculate(
        self,
        piece: Piece,
        *,
        only_specials: bool = False,
        ignore_check: bool = False,
    ) -> LegalMoves:
        """Legal moves of *piece*.

        *only_specials* skips leaps and slides (used by attack detection);
        *ignore_check* returns pseudo-legal moves.
        """
        game = self._game
        board = game.board
        color = piece.player
        moveset = game.moveset_of(piece.type)
        legal = LegalMoves(ignore=moveset.ignore)

        if not only_specials:
            for offset in moveset.individual:
                end = add_coords(piece.coords, offset)
                occupant = board.type_at(end)
                if occupant is not None and (
                    occupant.player == color or occupant.raw == RawType.VOID
                ):
                    continue
                legal.individual.append(MoveTarget(end))
            for direction, limits in moveset.sliding.items():
                line = board.line_bucket(direction, piece.coords)
                legal.sliding[direction] = slide_legal_limit(
                    moveset.blocking, board, line, direction, limits, piece.coords, color
                )

        if moveset.special is not None:
            legal.individual.extend(
                specials.detect(game, piece.coords, color, moveset.special)
            )

        if not ignore_check:
            check_resolver.remove_check_invalid_moves(game, legal, piece, color)
        return legal

    def check_if_move_legal(
        self,
        legal: LegalMoves,
        start: Coords,
        end: Coords,
        friendly: Player,
        *,
        ignore_individual: bool = False,
    ) -> MoveTarget | None:
        """Return the target reaching *end*, or ``None`` if *legal* has none.

        The returned target carries any special tags (castle, en passant,
        promotion trigger, path) so they can be copied onto the move.
        """
        if start == end:
            return None
        if not ignore_individual:
            for target in legal.individual:
                if target.coords == end:
                    return target
        for direction, limits in legal.sliding.items():
            if line_key(direction, start) != line_key(direction, end):
                continue
            if not slide_contains_square(limits, direction, start, end, legal.ignore):
                continue
            if legal.brute and self._game.simulate_move(
                MoveDraft(start, end), friendly
            ).check:
                return None
            return MoveTarget(end)
        return None

    def legal_moves_of(self, coords: Coords) -> LegalMoves | None:
        piece = self._game.board.piece_at(coords)
        if piece is None:
            return None
        return self.calculate(piece)


# ── Remote move validation ──────────────────────────────────────────────────


def is_opponents_move_legal(
    game: Game,
    draft: MoveDraft | None,
    claimed_conclusion: str | Literal[False] = False,
) -> Literal[True] | str:
    """Validate a move received from the other side.

    Returns ``True`` or the reason for rejection; never raises for bad
    input.  The game is viewed at its front while validating and returned
    to the index it was on.
    """
    draft = normalize_draft(draft)
    if draft is None:
        reason: str | None = "Move is not defined."
    else:
        original_index = game.move_index
        game.forward_to_front()
        try:
            reason = _rejection_reason(game, draft, claimed_conclusion)
        finally:
            game.go_to_move(original_index)
    if reason is not None:
        _LOGGER.info("Rejected opponent move %s: %s", draft, reason)
        return reason
    return True


def normalize_draft(draft: object) -> MoveDraft | None:
    """*draft* with tuple coordinates, or ``None`` if it is malformed."""
    if not isinstance(draft, MoveDraft):
        return None
    coords = []
    for value in (draft.start_coords, draft.end_coords):
        try:
            x, y = value
        except (TypeError, ValueError):
            return None
        if not all(isinstance(c, int) and not isinstance(c, bool) for c in (x, y)):
            return None
        coords.append((x, y))
    return replace(draft, start_coords=coords[0], end_coords=coords[1])


def _rejection_reason(
    game: Game, draft: MoveDraft, claimed_conclusion: str | Literal[False]
) -> str | None:
    rules = game.rules
    piece = game.board.piece_at(draft.start_coords)
    if piece is None:
        return "No piece exists at start coords."
    if piece.player != game.whos_turn:
        return "Can't move a non-friendly piece."

    if draft.promotion is not None:
        if piece.raw != RawType.PAWN:
            return "Can't promote a non-pawn."
        if draft.promotion.player != game.whos_turn:
            return "Can't promote to opposite color."
        allowed = rules.promotions_allowed.get(game.whos_turn, ())
        if draft.promotion.raw not in allowed or not rules.is_promotion_rank(
            piece.player, draft.end_coords[1]
        ):
            return "Specified promotion is illegal."
    elif piece.raw == RawType.PAWN and rules.is_promotion_rank(
        piece.player, draft.end_coords[1]
    ):
        return "Didn't promote when moved to promotion line."

    generator = MoveGenerator(game)
    legal = generator.calculate(piece)
    target = generator.check_if_move_legal(
        legal, draft.start_coords, draft.end_coords, piece.player
    )
    if target is None:
        return "Destination coordinates are illegal."

    if claimed_conclusion is False or game_end.is_conclusion_decisive(
        claimed_conclusion
    ):
        full_draft = target.to_draft(draft.start_coords, draft.promotion)
        simulated = game.simulated_conclusion(full_draft)
        if simulated != claimed_conclusion:
            return (
                f"Game conclusion isn't correct. Received: {claimed_conclusion}. "
                f"Should be {simulated}."
            )
    return None
