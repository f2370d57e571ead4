"""Insufficient material — material combinations that cannot force checkmate.

A position is summarized as a *scenario*: piece counts per type, except
bishops, which are counted per square colour as a ``(more, fewer)`` pair.
A scenario is drawn when some table entry contains every one of its types
with at least as many pieces.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Literal

from infinichess.core.enums import Player, RawType, WinCondition
from infinichess.core.piece import PieceType

if TYPE_CHECKING:
    from infinichess.core.game import Game

Count = int | float | tuple[float, float]
Scenario = dict[PieceType, Count]

# Positions with this many pieces or more are never checked.
MAX_PIECES_FOR_INSUFFMAT = 11

_INF = math.inf


def _w(raw: RawType) -> PieceType:
    return PieceType(raw, Player.WHITE)


def _b(raw: RawType) -> PieceType:
    return PieceType(raw, Player.BLACK)


# Lone black king against white material (white king present).
_DRAWS_WITH_KINGS: tuple[Scenario, ...] = (
    {_w(RawType.QUEEN): 1},
    {_w(RawType.BISHOP): (_INF, 1)},
    {_w(RawType.KNIGHT): 3},
    {_w(RawType.HAWK): 2},
    {_w(RawType.HAWK): 1, _w(RawType.BISHOP): (1, 0)},
    {_w(RawType.ROOK): 1, _w(RawType.KNIGHT): 1},
    {_w(RawType.ROOK): 1, _w(RawType.BISHOP): (1, 0)},
    {_w(RawType.ROOK): 1, _b(RawType.ROOK): 1},
    {_w(RawType.ARCHBISHOP): 1, _w(RawType.BISHOP): (1, 0)},
    {_w(RawType.ARCHBISHOP): 1, _w(RawType.KNIGHT): 1},
    {_w(RawType.KNIGHT): 1, _w(RawType.BISHOP): (_INF, 0)},
    {_w(RawType.KNIGHT): 1, _w(RawType.BISHOP): (1, 1)},
    {_w(RawType.KNIGHT): 2, _w(RawType.BISHOP): (1, 0)},
    {_w(RawType.GUARD): 1},
    {_w(RawType.CHANCELLOR): 1},
    {_w(RawType.KNIGHTRIDER): 2},
    {_w(RawType.PAWN): 3},
)

# Lone black king, no white king.
_DRAWS_WITHOUT_WHITE_KING: tuple[Scenario, ...] = (
    {_w(RawType.QUEEN): 1, _w(RawType.ROOK): 1},
    {_w(RawType.QUEEN): 1, _w(RawType.KNIGHT): 1},
    {_w(RawType.QUEEN): 1, _w(RawType.BISHOP): (1, 0)},
    {_w(RawType.QUEEN): 1, _w(RawType.PAWN): 1},
    {_w(RawType.BISHOP): (2, 2)},
    {_w(RawType.BISHOP): (_INF, 1)},
    {_w(RawType.KNIGHT): 4},
    {_w(RawType.KNIGHT): 2, _w(RawType.BISHOP): (_INF, 0)},
    {_w(RawType.KNIGHT): 2, _w(RawType.BISHOP): (1, 1)},
    {_w(RawType.KNIGHT): 1, _w(RawType.BISHOP): (2, 1)},
    {_w(RawType.HAWK): 3},
    {_w(RawType.ROOK): 1, _w(RawType.KNIGHT): 1, _w(RawType.BISHOP): (1, 0)},
    {_w(RawType.ROOK): 1, _w(RawType.KNIGHT): 1, _w(RawType.PAWN): 1},
    {_w(RawType.ROOK): 1, _w(RawType.KNIGHT): 2},
    {_w(RawType.ROOK): 1, _w(RawType.GUARD): 1},
    {_w(RawType.ROOK): 2, _w(RawType.BISHOP): (1, 0)},
    {_w(RawType.ROOK): 2, _w(RawType.KNIGHT): 1},
    {_w(RawType.ROOK): 2, _w(RawType.PAWN): 1},
    {_w(RawType.ARCHBISHOP): 1, _w(RawType.BISHOP): (2, 0)},
    {_w(RawType.ARCHBISHOP): 1, _w(RawType.BISHOP): (1, 1)},
    {_w(RawType.ARCHBISHOP): 1, _w(RawType.KNIGHT): 2},
    {_w(RawType.ARCHBISHOP): 2},
    {_w(RawType.CHANCELLOR): 1, _w(RawType.GUARD): 1},
    {_w(RawType.CHANCELLOR): 1, _w(RawType.KNIGHT): 1},
    {_w(RawType.CHANCELLOR): 1, _w(RawType.ROOK): 1},
    {_w(RawType.GUARD): 2},
    {_w(RawType.AMAZON): 1},
    {_w(RawType.KNIGHTRIDER): 3},
    {_w(RawType.PAWN): 6},
    {_w(RawType.HUYGEN): 4},
)

# Everything else: royal centaurs and kings without a lone black king.
_DRAWS_SPECIAL: tuple[Scenario, ...] = (
    {_b(RawType.KING): _INF, _w(RawType.KING): _INF},
    {_b(RawType.ROYALCENTAUR): _INF, _w(RawType.ROYALCENTAUR): _INF},
    {_b(RawType.ROYALCENTAUR): 1, _w(RawType.AMAZON): 1},
)


def _has_more_pieces(count: Count, limit: Count) -> bool:
    if isinstance(count, tuple):
        if not isinstance(limit, tuple):
            return True
        return count[0] > limit[0] or count[1] > limit[1]
    if isinstance(limit, tuple):
        return True
    return count > limit


def _is_scenario_drawn(scenario: Scenario) -> bool:
    scenario = dict(scenario)
    black_king = _b(RawType.KING)
    white_king = _w(RawType.KING)
    if scenario.get(black_king) == 1 and scenario.get(white_king) == 1:
        del scenario[black_king], scenario[white_king]
        table = _DRAWS_WITH_KINGS
    elif scenario.get(black_king) == 1 and white_king not in scenario:
        del scenario[black_king]
        table = _DRAWS_WITHOUT_WHITE_KING
    else:
        table = _DRAWS_SPECIAL

    for draw in table:
        if all(
            piece_type in draw and not _has_more_pieces(count, draw[piece_type])
            for piece_type, count in scenario.items()
        ):
            return True
    return False


def detect_insufficient_material(game: Game) -> str | Literal[False]:
    """``"draw insuffmat"`` if neither side can force checkmate."""
    rules = game.rules
    for player in (Player.WHITE, Player.BLACK):
        if rules.win_conditions.get(player) != [WinCondition.CHECKMATE]:
            return False
    if game.moves:
        last = game.moves[-1]
        if not last.is_capture and last.promotion is None:
            return False

    board = game.board
    if board.piece_count(ignore=(RawType.OBSTACLE,)) >= MAX_PIECES_FOR_INSUFFMAT:
        return False

    scenario: Scenario = {}
    bishops = {Player.WHITE: [0, 0], Player.BLACK: [0, 0]}
    for piece in board.pieces():
        if piece.raw == RawType.OBSTACLE:
            continue
        if piece.raw == RawType.BISHOP and piece.player in bishops:
            bishops[piece.player][sum(piece.coords) % 2] += 1
        else:
            scenario[piece.type] = scenario.get(piece.type, 0) + 1
    for player, parities in bishops.items():
        if any(parities):
            scenario[PieceType(RawType.BISHOP, player)] = tuple(
                sorted(parities, reverse=True)
            )

    if rules.promotion_ranks is not None:
        for player in (Player.WHITE, Player.BLACK):
            has_pawn = PieceType(RawType.PAWN, player) in scenario
            if has_pawn and rules.promotions_allowed.get(player):
                return False

    inverted = {piece_type.inverted: count for piece_type, count in scenario.items()}
    if _is_scenario_drawn(scenario) or _is_scenario_drawn(inverted):
        return "draw insuffmat"
    return False
