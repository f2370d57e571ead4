"""Attack detection — is a square attacked by an enemy, and by whom."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from infinichess.core import move_generator
from infinichess.core.enums import Player
from infinichess.core.move import Attacker
from infinichess.core.types import Coords, Vec2

if TYPE_CHECKING:
    from infinichess.core.game import Game

__all__ = [
    "Attacker",
    "CheckResult",
    "detect_check",
    "does_line_attack_square",
    "is_player_in_check",
    "is_square_attacked",
]


@dataclass(slots=True)
class CheckResult:
    check: bool
    royals_in_check: list[Coords]
    # None when attackers were not tracked.
    attackers: list[Attacker] | None


def detect_check(game: Game, player: Player, track_attackers: bool = False) -> CheckResult:
    """Which royals of *player* are attacked in the current position."""
    attackers: list[Attacker] | None = [] if track_attackers else None
    royals_in_check = [
        coords
        for coords in game.board.royal_coords(player)
        if is_square_attacked(game, coords, player, attackers)
    ]
    return CheckResult(bool(royals_in_check), royals_in_check, attackers)


def is_player_in_check(game: Game, player: Player) -> bool:
    return game.is_player_in_check(player)


def is_square_attacked(
    game: Game,
    coords: Coords,
    friendly: Player,
    attackers: list[Attacker] | None = None,
) -> bool:
    """Whether an enemy of *friendly* attacks *coords*.

    Without an *attackers* list the search stops at the first hit; with
    one, every attacker is collected.
    """
    attacked = False
    for detector in (_vicinity_attacks, _special_attacks, _sliding_attacks):
        if detector(game, coords, friendly, attackers):
            if attackers is None:
                return True
            attacked = True
    return attacked


def _is_enemy(player: Player, friendly: Player) -> bool:
    return player != friendly and player != Player.NEUTRAL


def _vicinity_attacks(
    game: Game, coords: Coords, friendly: Player, attackers: list[Attacker] | None
) -> bool:
    board = game.board
    for offset, raws in game.vicinity.items():
        square = (coords[0] - offset[0], coords[1] - offset[1])
        piece_type = board.type_at(square)
        if piece_type is None or not _is_enemy(piece_type.player, friendly):
            continue
        if piece_type.raw not in raws:
            continue
        if attackers is not None:
            _append_attacker(attackers, Attacker(square, sliding_check=False))
        # A second leaper never changes how the check can be resolved.
        return True
    return False


def _special_attacks(
    game: Game, coords: Coords, friendly: Player, attackers: list[Attacker] | None
) -> bool:
    board = game.board
    generator = move_generator.MoveGenerator(game)
    for offset, raws in game.special_vicinity.items():
        square = (coords[0] - offset[0], coords[1] - offset[1])
        piece = board.piece_at(square)
        if piece is None or not _is_enemy(piece.player, friendly):
            continue
        if piece.raw not in raws:
            continue
        legal = generator.calculate(piece, only_specials=True, ignore_check=True)
        target = generator.check_if_move_legal(legal, square, coords, friendly)
        if target is None:
            continue
        if attackers is not None:
            _append_attacker(
                attackers, Attacker(square, sliding_check=False, path=target.path)
            )
        return True
    return False


def _sliding_attacks(
    game: Game, coords: Coords, friendly: Player, attackers: list[Attacker] | None
) -> bool:
    attacked = False
    for direction in game.board.slides:
        line = game.board.line_bucket(direction, coords)
        if does_line_attack_square(game, line, direction, coords, friendly, attackers):
            if attackers is None:
                return True
            attacked = True
    return attacked


def does_line_attack_square(
    game: Game,
    line: list[Coords],
    direction: Vec2,
    coords: Coords,
    friendly: Player,
    attackers: list[Attacker] | None = None,
) -> bool:
    """Whether an enemy slider on *line* reaches *coords* along *direction*."""
    board = game.board
    attacked = False
    for piece_coords in line:
        piece_type = board.type_at(piece_coords)
        if piece_type is None or not _is_enemy(piece_type.player, friendly):
            continue
        moveset = game.moveset_of(piece_type)
        limits = moveset.sliding.get(direction)
        if limits is None:
            continue
        legal_limits = move_generator.slide_legal_limit(
            moveset.blocking,
            board,
            line,
            direction,
            limits,
            piece_coords,
            piece_type.player,
        )
        if not move_generator.slide_contains_square(
            legal_limits, direction, piece_coords, coords, moveset.ignore
        ):
            continue
        if attackers is None:
            return True
        _append_attacker(attackers, Attacker(piece_coords, sliding_check=True))
        attacked = True
    return attacked


def _append_attacker(attackers: list[Attacker], attacker: Attacker) -> None:
    for i, existing in enumerate(attackers):
        if existing.coords != attacker.coords:
            continue
        if attacker.sliding_check and not existing.sliding_check:
            attackers[i] = Attacker(existing.coords, True, existing.path)
        return
    attackers.append(attacker)
