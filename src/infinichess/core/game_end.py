"""Game-end evaluation.

A conclusion is a string ``"<victor> <condition>"`` such as
``"white checkmate"`` or ``"draw repetition"``; ``False`` means the game goes
on.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Literal

from infinichess.core import insufficient_material, move_generator, repetition
from infinichess.core.enums import Player, RawType, WinCondition
from infinichess.core.piece import PieceType

if TYPE_CHECKING:
    from infinichess.core.game import Game

Conclusion = str | Literal[False]

# Above this many pieces, checkmate detection is too slow to run every move.
PIECE_COUNT_TO_DISABLE_CHECKMATE = 50_000
MAX_SLIDES_FOR_CHECKMATE = 16

KOTH_SQUARES: tuple[tuple[int, int], ...] = ((4, 4), (5, 4), (4, 5), (5, 5))

_INDECISIVE_CONDITIONS = frozenset(
    {"time", "resignation", "aborted", "disconnect", "agreement"}
)


def conclusion_string(victor: Player, condition: str) -> str:
    if victor == Player.NEUTRAL:
        return f"draw {condition}"
    return f"{victor} {condition}"


def is_conclusion_decisive(conclusion: str) -> bool:
    """False for endings declared outside the board (time, resignation, ...)."""
    condition = conclusion.split(" ")[-1]
    return condition not in _INDECISIVE_CONDITIONS


def is_checkmate_compatible(game: Game) -> bool:
    """Whether checkmate can be detected efficiently in this game."""
    if game.board.piece_count() >= PIECE_COUNT_TO_DISABLE_CHECKMATE:
        return False
    if len(game.board.slides) > MAX_SLIDES_FOR_CHECKMATE:
        return False
    if len(game.rules.players) > 2:
        return False
    if game.rules.any_player_moves_twice():
        return False
    return not game.colinears_present


def get_game_conclusion(game: Game) -> Conclusion:
    """Evaluate the position at the front of *game*."""
    if not game.is_at_front:
        raise RuntimeError("Game conclusion can only be evaluated at the front")
    for detector in _DETECTORS:
        conclusion = detector(game)
        if conclusion:
            return conclusion
    return False


def _last_mover(game: Game) -> Player:
    """Player who made the last move (or who moved last before the start)."""
    if game.moves:
        return game.rules.player_of_move(len(game.moves) - 1)
    return game.rules.turn_order[-1]


def _last_move_captured_royal(game: Game) -> bool:
    if not game.moves:
        return False
    return any(piece.type.is_royal for piece in game.moves[-1].captured)


def _detect_all_pieces_captured(game: Game) -> Conclusion:
    if not game.rules.opponent_uses(game.whos_turn, WinCondition.ALLPIECESCAPTURED):
        return False
    if not game.moves or game.board.piece_count_of(game.whos_turn) > 0:
        return False
    return conclusion_string(_last_mover(game), WinCondition.ALLPIECESCAPTURED.value)


def _detect_royal_capture(game: Game) -> Conclusion:
    if not game.rules.opponent_uses(game.whos_turn, WinCondition.ROYALCAPTURE):
        return False
    if not _last_move_captured_royal(game):
        return False
    return conclusion_string(_last_mover(game), WinCondition.ROYALCAPTURE.value)


def _detect_all_royals_captured(game: Game) -> Conclusion:
    if not game.rules.opponent_uses(game.whos_turn, WinCondition.ALLROYALSCAPTURED):
        return False
    if not _last_move_captured_royal(game):
        return False
    if game.board.royal_coords(game.whos_turn):
        return False
    return conclusion_string(
        _last_mover(game), WinCondition.ALLROYALSCAPTURED.value
    )


def _detect_three_check(game: Game) -> Conclusion:
    if not game.rules.opponent_uses(game.whos_turn, WinCondition.THREECHECK):
        return False
    mover = _last_mover(game)
    if game.checks_given.get(mover, 0) < 3:
        return False
    return conclusion_string(mover, WinCondition.THREECHECK.value)


def _detect_koth(game: Game) -> Conclusion:
    if not game.rules.opponent_uses(game.whos_turn, WinCondition.KOTH):
        return False
    if not game.moves or game.moves[-1].type.raw != RawType.KING:
        return False
    mover = _last_mover(game)
    king = PieceType(RawType.KING, mover)
    if not any(game.board.type_at(square) == king for square in KOTH_SQUARES):
        return False
    return conclusion_string(mover, WinCondition.KOTH.value)


def _detect_checkmate_or_stalemate(game: Game) -> Conclusion:
    """Checkmate when no legal move exists and the side to move is in check."""
    generator = move_generator.MoveGenerator(game)
    for piece in list(game.board.pieces_of(game.whos_turn)):
        legal = generator.calculate(piece)
        if move_generator.has_at_least_one_move(legal, game, piece):
            return False

    uses_checkmate = game.rules.opponent_uses(game.whos_turn, WinCondition.CHECKMATE)
    if uses_checkmate and game.is_player_in_check(game.whos_turn):
        return conclusion_string(_last_mover(game), WinCondition.CHECKMATE.value)
    return conclusion_string(Player.NEUTRAL, "stalemate")


def _detect_move_rule(game: Game) -> Conclusion:
    if game.rules.move_rule is None:
        return False
    if game.move_rule_state < game.rules.move_rule:
        return False
    return conclusion_string(Player.NEUTRAL, "moverule")


_DETECTORS: tuple[Callable[[Game], Conclusion], ...] = (
    _detect_all_pieces_captured,
    _detect_royal_capture,
    _detect_all_royals_captured,
    _detect_three_check,
    _detect_koth,
    _detect_checkmate_or_stalemate,
    _detect_move_rule,
    repetition.detect_repetition_draw,
    insufficient_material.detect_insufficient_material,
)
