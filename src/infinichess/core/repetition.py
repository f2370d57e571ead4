"""Threefold repetition.

Walking back from the last move, every moved piece leaves a *surplus* on
its start square and a *deficit* on its end square; the two cancel when a
later move undoes an earlier one. When both sets are empty on a move made
by the same side, the position repeats. Captures, pawn moves and lost
special rights cannot be undone, so the walk stops there.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING, Literal

from infinichess.core.enums import RawType
from infinichess.core.move import (
    AddPiece,
    CapturePiece,
    DeletePiece,
    EnPassantChange,
    Move,
    MovePiece,
    SpecialRightChange,
)

if TYPE_CHECKING:
    from infinichess.core.game import Game

REPETITIONS_FOR_DRAW = 3


def _flux(add_to: set[Hashable], cancel_from: set[Hashable], key: Hashable) -> None:
    if key in cancel_from:
        cancel_from.discard(key)
    else:
        add_to.add(key)


def _is_one_way(move: Move) -> bool:
    if move.type.raw == RawType.PAWN:
        return True
    if any(isinstance(c, (CapturePiece, DeletePiece)) for c in move.changes):
        return True
    return any(
        isinstance(c, SpecialRightChange) and c.current and not c.future
        for c in move.rewind_info
    )


def detect_repetition_draw(game: Game) -> str | Literal[False]:
    moves = game.moves
    turn_count = len(game.rules.turn_order)
    surplus: set[Hashable] = set()
    deficit: set[Hashable] = set()

    equal_positions = 0
    last_equal = len(moves)
    for index in range(len(moves) - 1, -1, -1):
        move = moves[index]
        if _is_one_way(move):
            break
        for change in move.changes:
            if isinstance(change, MovePiece):
                _flux(deficit, surplus, (change.end_coords, change.piece.type))
                _flux(surplus, deficit, (change.piece.coords, change.piece.type))
            elif isinstance(change, AddPiece):
                _flux(deficit, surplus, (change.piece.coords, change.piece.type))
        for delta in move.rewind_info:
            if isinstance(delta, EnPassantChange):
                if delta.future is not None:
                    _flux(deficit, surplus, delta.future)
                if delta.current is not None:
                    _flux(surplus, deficit, delta.current)

        if last_equal - index < turn_count:
            continue
        if surplus or deficit:
            continue
        if index % turn_count != len(moves) % turn_count:
            continue
        equal_positions += 1
        last_equal = index
        if equal_positions == REPETITIONS_FOR_DRAW - 1:
            return "draw repetition"
    return False
