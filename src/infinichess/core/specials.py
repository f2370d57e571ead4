"""Special moves — castling, pawns and the rose.

Each :class:`~infinichess.core.enums.SpecialCategory` maps to a detector,
which lists the extra targets of a piece, and an executor, which queues the
board changes of a move carrying that category's tags.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from infinichess.core import check_resolver, move_generator
from infinichess.core.enums import Player, RawType, SpecialCategory, WinCondition
from infinichess.core.move import (
    AddPiece,
    CapturePiece,
    CastleTag,
    DeletePiece,
    EnPassant,
    Move,
    MovePiece,
)
from infinichess.core.piece import JUMPING_ROYALS, Piece
from infinichess.core.types import Coords, add_coords

if TYPE_CHECKING:
    from infinichess.core.game import Game
    from infinichess.core.move_generator import MoveTarget

Detector = Callable[["Game", Coords, Player], list["MoveTarget"]]
Executor = Callable[["Game", Piece, Move], bool]

# Castling needs at least this many squares between the royal and its partner.
_MIN_CASTLE_DISTANCE = 3

# Counter-clockwise knight steps the rose turns through.
_ROSE_STEPS: tuple[Coords, ...] = (
    (-2, -1), (-1, -2), (1, -2), (2, -1),
    (2, 1), (1, 2), (-1, 2), (-2, 1),
)
_ROSE_SPIRAL_LENGTH = 7


def detect(
    game: Game, coords: Coords, color: Player, category: SpecialCategory
) -> list[MoveTarget]:
    """Extra targets of the piece on *coords* granted by *category*."""
    detector, _ = _HANDLERS[category]
    return detector(game, coords, color)


def execute(game: Game, piece: Piece, move: Move, category: SpecialCategory) -> bool:
    """Queue the board changes of *move* if it is special.

    Returns False when the move is an ordinary move or capture that the
    caller should queue itself.
    """
    _, executor = _HANDLERS[category]
    return executor(game, piece, move)


# ── Castling ────────────────────────────────────────────────────────────────


def _castling_moves(game: Game, coords: Coords, color: Player) -> list[MoveTarget]:
    if coords not in game.special_rights:
        return []
    board = game.board
    x, y = coords

    left: int | None = None
    right: int | None = None
    for other_x, _ in board.line_bucket((1, 0), coords):
        if other_x < x and (left is None or other_x > left):
            left = other_x
        elif other_x > x and (right is None or other_x < right):
            right = other_x

    candidates: list[tuple[int, Coords]] = []
    if left is not None and x - left >= _MIN_CASTLE_DISTANCE:
        candidates.append((-1, (left, y)))
    if right is not None and right - x >= _MIN_CASTLE_DISTANCE:
        candidates.append((1, (right, y)))
    candidates = [
        (direction, partner)
        for direction, partner in candidates
        if _is_castle_partner(game, partner, color)
    ]
    if not candidates:
        return []

    if game.rules.opponent_uses(color, WinCondition.CHECKMATE):
        # Castling out of or through check is illegal.
        if game.is_player_in_check(color):
            return []
        royal = board.piece_at(coords)
        candidates = [
            (direction, partner)
            for direction, partner in candidates
            if not check_resolver.is_move_check_invalid(
                game, royal, move_generator.MoveTarget((x + direction, y)), color
            )
        ]

    return [
        move_generator.MoveTarget(
            (x + 2 * direction, y), castle=CastleTag(direction, partner)
        )
        for direction, partner in candidates
    ]


def _is_castle_partner(game: Game, coords: Coords, color: Player) -> bool:
    if coords not in game.special_rights:
        return False
    piece_type = game.board.type_at(coords)
    if piece_type is None or piece_type.player != color:
        return False
    return piece_type.raw != RawType.PAWN and piece_type.raw not in JUMPING_ROYALS


def _execute_castle(game: Game, piece: Piece, move: Move) -> bool:
    if move.castle is None:
        return False
    partner = game.board.piece_at(move.castle.partner)
    if partner is None:
        raise ValueError(f"No castling partner on {move.castle.partner}")
    move.changes.append(MovePiece(piece, move.end_coords))
    landing = (move.end_coords[0] - move.castle.direction, move.end_coords[1])
    move.changes.append(MovePiece(partner, landing))
    game.queue_special_right_removal(move, partner.coords)
    return True


# ── Pawns ───────────────────────────────────────────────────────────────────


def _pawn_direction(color: Player) -> int:
    return 1 if color == Player.WHITE else -1


def _pawn_target(
    game: Game, coords: Coords, color: Player, **tags: object
) -> MoveTarget:
    promote = game.rules.is_promotion_rank(color, coords[1])
    return move_generator.MoveTarget(coords, promote_trigger=promote, **tags)


def _pawn_moves(game: Game, coords: Coords, color: Player) -> list[MoveTarget]:
    board = game.board
    forward = _pawn_direction(color)
    x, y = coords
    targets: list[MoveTarget] = []

    single = (x, y + forward)
    if board.type_at(single) is None:
        targets.append(_pawn_target(game, single, color))
        double = (x, y + 2 * forward)
        if board.type_at(double) is None and coords in game.special_rights:
            targets.append(
                _pawn_target(
                    game,
                    double,
                    color,
                    enpassant_create=EnPassant(square=single, pawn=double),
                )
            )

    for dx in (-1, 1):
        capture = (x + dx, y + forward)
        occupant = board.type_at(capture)
        if occupant is None or occupant.player == color or occupant.raw == RawType.VOID:
            continue
        targets.append(_pawn_target(game, capture, color))

    enpassant = game.enpassant
    if enpassant is not None and color == game.whos_turn:
        victim = board.type_at(enpassant.pawn)
        if (
            victim is not None
            and victim.player != color
            and abs(enpassant.square[0] - x) == 1
            and enpassant.square[1] == y + forward
        ):
            targets.append(_pawn_target(game, enpassant.square, color, enpassant=True))
    return targets


def _execute_pawn(game: Game, piece: Piece, move: Move) -> bool:
    if move.enpassant_create is not None:
        game.queue_enpassant_creation(move, move.enpassant_create)
    if not move.enpassant and move.promotion is None:
        return False

    if move.enpassant:
        if game.enpassant is None:
            raise ValueError(f"En passant move {move} without en passant state")
        capture_coords = game.enpassant.pawn
    else:
        capture_coords = move.end_coords
    captured = game.board.piece_at(capture_coords)
    if captured is not None:
        move.changes.append(CapturePiece(piece, move.end_coords, captured))
    else:
        move.changes.append(MovePiece(piece, move.end_coords))

    if move.promotion is not None:
        move.changes.append(DeletePiece(Piece(piece.type, move.end_coords, piece.index)))
        arena = game.board.ensure_arena(move.promotion)
        move.changes.append(
            AddPiece(Piece(move.promotion, move.end_coords, arena.peek_free()))
        )
    return True


# ── Rose ────────────────────────────────────────────────────────────────────


def _rose_moves(game: Game, coords: Coords, color: Player) -> list[MoveTarget]:
    """Spiral along up to seven knight steps, turning one step each time.

    Squares reached by several spirals keep the shortest path; ties keep
    the first path found.
    """
    board = game.board
    found: dict[Coords, MoveTarget] = {}

    def add(square: Coords, path: list[Coords]) -> None:
        existing = found.get(square)
        if existing is None or len(existing.path) > len(path):
            found[square] = move_generator.MoveTarget(square, path=tuple(path))

    for start in range(len(_ROSE_STEPS)):
        for turn in (1, -1):
            current = coords
            step = start
            path = [coords]
            for _ in range(_ROSE_SPIRAL_LENGTH):
                current = add_coords(current, _ROSE_STEPS[step % len(_ROSE_STEPS)])
                path.append(current)
                occupant = board.type_at(current)
                if occupant is not None:
                    if occupant.player != color and occupant.raw != RawType.VOID:
                        add(current, path)
                    break
                add(current, path)
                step += turn
    return list(found.values())


def _execute_rose(game: Game, piece: Piece, move: Move) -> bool:
    captured = game.board.piece_at(move.end_coords)
    if captured is not None:
        move.changes.append(
            CapturePiece(piece, move.end_coords, captured, path=move.path)
        )
    else:
        move.changes.append(MovePiece(piece, move.end_coords, path=move.path))
    return True


_HANDLERS: dict[SpecialCategory, tuple[Detector, Executor]] = {
    SpecialCategory.CASTLER: (_castling_moves, _execute_castle),
    SpecialCategory.PAWN: (_pawn_moves, _execute_pawn),
    SpecialCategory.ROSE: (_rose_moves, _execute_rose),
}
