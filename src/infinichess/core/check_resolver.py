"""Remove moves that would leave the mover's royals in check.

Slides are filtered geometrically (blocking squares, pins) so that they stay
compact; every individual move is simulated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from infinichess.core import attacks, move_generator
from infinichess.core.enums import Player, WinCondition
from infinichess.core.move import Path
from infinichess.core.piece import SLIDING_ROYALS, Piece
from infinichess.core.types import (
    Coords,
    are_general_forms_equal,
    chebyshev_distance,
    general_form_from_coords_and_vec,
    general_form_from_two_coords,
    intersection_point,
)

if TYPE_CHECKING:
    from infinichess.core.game import Game
    from infinichess.core.move_generator import LegalMoves, MoveTarget


def remove_check_invalid_moves(
    game: Game, legal: LegalMoves, piece: Piece, color: Player
) -> None:
    """Filter *legal* in place. No-op unless an opponent wins by checkmate."""
    if color == Player.NEUTRAL:
        return
    if not game.rules.opponent_uses(color, WinCondition.CHECKMATE):
        return
    _remove_check_invalid_sliding(game, legal, piece, color)
    legal.individual = [
        target
        for target in legal.individual
        if not is_move_check_invalid(game, piece, target, color)
    ]


def is_move_check_invalid(
    game: Game, piece: Piece, target: MoveTarget, color: Player
) -> bool:
    """Whether moving *piece* to *target* leaves *color* in check."""
    return game.simulate_move(target.to_draft(piece.coords), color).check


def _remove_check_invalid_sliding(
    game: Game, legal: LegalMoves, piece: Piece, color: Player
) -> None:
    if not legal.sliding:
        return
    if piece.raw in SLIDING_ROYALS:
        legal.brute = True
        return
    if not game.board.jumping_royal_coords(color):
        return
    if _address_existing_checks(game, legal, piece.coords, color):
        return
    _remove_sliding_moves_that_open_discovered(game, legal, piece, color)


def _append_target(legal: LegalMoves, coords: Coords) -> None:
    if any(target.coords == coords for target in legal.individual):
        return
    legal.individual.append(move_generator.MoveTarget(coords))


def _address_existing_checks(
    game: Game, legal: LegalMoves, coords: Coords, color: Player
) -> bool:
    """Restrict slides to captures and blocks of the current check.

    Returns False when *color* is not in check.
    """
    if not game.is_player_in_check(color):
        return False
    if not game.attackers:
        raise RuntimeError("Player is in check but no attacker was recorded")

    royal = next(c for c in game.in_check if c in game.board.royal_coords(color))
    attacker = game.attackers[0]
    generator = move_generator.MoveGenerator(game)

    capture: Coords | None = None
    capture_possible = len(game.attackers) == 1 or game.colinears_present
    if capture_possible and generator.check_if_move_legal(
        legal, coords, attacker.coords, color, ignore_individual=True
    ):
        capture = attacker.coords

    path_length = len(attacker.path) if attacker.path else 2
    unblockable = (not attacker.sliding_check and path_length < 3) or (
        attacker.sliding_check and chebyshev_distance(royal, attacker.coords) == 1
    )
    if not unblockable:
        if attacker.sliding_check:
            _append_blocking_moves(game, royal, attacker.coords, legal, coords, color)
        else:
            _append_path_blocking_moves(game, attacker.path or (), legal, coords, color)
        if legal.brute:
            return True

    legal.sliding = {}
    if capture is not None:
        _append_target(legal, capture)
    return True


def _append_blocking_moves(
    game: Game,
    square1: Coords,
    square2: Coords,
    legal: LegalMoves,
    coords: Coords,
    color: Player,
) -> None:
    """Add every slide square strictly between *square1* and *square2*."""
    generator = move_generator.MoveGenerator(game)
    left, right = sorted((square1[0], square2[0]))
    bottom, top = sorted((square1[1], square2[1]))
    segment = general_form_from_two_coords(square1, square2)

    for direction in list(legal.sliding):
        slide_line = general_form_from_coords_and_vec(coords, direction)
        point = intersection_point(slide_line, segment)
        if point is None:
            if game.colinears_present and are_general_forms_equal(slide_line, segment):
                # Sliding along the check line itself: keep only that line
                # and let simulation decide square by square.
                legal.brute = True
                for other in list(legal.sliding):
                    other_line = general_form_from_coords_and_vec(coords, other)
                    if not are_general_forms_equal(slide_line, other_line):
                        del legal.sliding[other]
                return
            continue
        x, y = point
        if not (left <= x <= right and bottom <= y <= top):
            continue
        if x.denominator != 1 or y.denominator != 1:
            continue
        block = (int(x), int(y))
        if block == square1 or block == square2:
            continue
        if generator.check_if_move_legal(
            legal, coords, block, color, ignore_individual=True
        ):
            _append_target(legal, block)


def _append_path_blocking_moves(
    game: Game, path: Path, legal: LegalMoves, coords: Coords, color: Player
) -> None:
    generator = move_generator.MoveGenerator(game)
    for block in path[1:-1]:
        if generator.check_if_move_legal(
            legal, coords, block, color, ignore_individual=True
        ):
            _append_target(legal, block)


def _remove_sliding_moves_that_open_discovered(
    game: Game, legal: LegalMoves, piece: Piece, color: Player
) -> None:
    """Keep only the slides of a pinned piece that stay on the pin line."""
    board = game.board
    removed = board.remove(piece.coords)
    try:
        result = attacks.detect_check(game, color, track_attackers=True)
        if result.check:
            _restrict_pinned_slides(game, legal, piece, color, result)
    finally:
        board.organize(removed.type, removed.coords, removed.index)


def _restrict_pinned_slides(
    game: Game,
    legal: LegalMoves,
    piece: Piece,
    color: Player,
    result: attacks.CheckResult,
) -> None:
    generator = move_generator.MoveGenerator(game)
    for royal in result.royals_in_check:
        for attacker in result.attackers or ():
            if not attacker.sliding_check:
                # A curved check through our square can only be blocked or
                # the attacker captured.
                _append_path_blocking_moves(
                    game, attacker.path or (), legal, piece.coords, color
                )
                if generator.check_if_move_legal(
                    legal, piece.coords, attacker.coords, color, ignore_individual=True
                ):
                    _append_target(legal, attacker.coords)
                legal.sliding = {}
                return
            pin_line = general_form_from_two_coords(royal, attacker.coords)
            if not are_general_forms_equal(
                pin_line, general_form_from_two_coords(royal, piece.coords)
            ):
                continue
            for direction in list(legal.sliding):
                slide_line = general_form_from_coords_and_vec(piece.coords, direction)
                if not are_general_forms_equal(pin_line, slide_line):
                    del legal.sliding[direction]
    if legal.sliding and game.colinears_present:
        legal.brute = True
