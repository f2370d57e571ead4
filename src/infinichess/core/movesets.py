"""Moveset catalog — static movement templates for every species.

A moveset lists leap offsets (``individual``), sliding directions with their
step limits (``sliding``), and optionally a special-move category whose
handlers add moves such as castling or pawn pushes.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from infinichess.core.enums import BlockResult, Player, RawType, SpecialCategory
from infinichess.core.piece import Piece
from infinichess.core.types import Coords, Vec2, chebyshev_distance, is_prime

SlideLimits = tuple[float, float]
BlockingFunction = Callable[[Player, Piece, Coords], BlockResult]
IgnoreFunction = Callable[[Coords, Coords], bool]


def default_blocking(friendly: Player, blocker: Piece, coords: Coords) -> BlockResult:
    """Friendlies and voids block on their own square; enemies can be captured."""
    del coords
    if blocker.player == friendly or blocker.raw == RawType.VOID:
        return BlockResult.BLOCKS
    return BlockResult.CAPTURABLE


def default_ignore(start: Coords, end: Coords) -> bool:
    del start, end
    return True


def _huygen_blocking(friendly: Player, blocker: Piece, coords: Coords) -> BlockResult:
    # Pieces at non-prime distances are jumped over.
    if not is_prime(chebyshev_distance(coords, blocker.coords)):
        return BlockResult.NONE
    if blocker.player == friendly:
        return BlockResult.BLOCKS
    return BlockResult.CAPTURABLE


def _huygen_ignore(start: Coords, end: Coords) -> bool:
    return is_prime(chebyshev_distance(start, end))


@dataclass(frozen=True, slots=True)
class Moveset:
    """Movement template of one species."""

    individual: tuple[Coords, ...] = ()
    sliding: Mapping[Vec2, SlideLimits] = field(default_factory=dict)
    blocking: BlockingFunction = default_blocking
    ignore: IgnoreFunction = default_ignore
    special: SpecialCategory | None = None


# ── Offset tables ───────────────────────────────────────────────────────────

_KNIGHT: tuple[Coords, ...] = (
    (-2, 1), (-1, 2), (1, 2), (2, 1),
    (-2, -1), (-1, -2), (1, -2), (2, -1),
)
_GUARD: tuple[Coords, ...] = (
    (-1, 0), (-1, 1), (0, 1), (1, 1),
    (1, 0), (1, -1), (0, -1), (-1, -1),
)
_HAWK: tuple[Coords, ...] = (
    (-3, 0), (-2, 0), (2, 0), (3, 0),
    (0, -3), (0, -2), (0, 2), (0, 3),
    (-2, -2), (-2, 2), (2, -2), (2, 2),
    (-3, -3), (-3, 3), (3, -3), (3, 3),
)
_CAMEL: tuple[Coords, ...] = (
    (-3, 1), (-1, 3), (1, 3), (3, 1),
    (-3, -1), (-1, -3), (1, -3), (3, -1),
)
_GIRAFFE: tuple[Coords, ...] = (
    (-4, 1), (-1, 4), (1, 4), (4, 1),
    (-4, -1), (-1, -4), (1, -4), (4, -1),
)
_ZEBRA: tuple[Coords, ...] = (
    (-3, 2), (-2, 3), (2, 3), (3, 2),
    (-3, -2), (-2, -3), (2, -3), (3, -2),
)

_ORTHOGONALS: tuple[Vec2, ...] = ((1, 0), (0, 1))
_DIAGONALS: tuple[Vec2, ...] = ((1, 1), (1, -1))
_HIPPOGONALS: tuple[Vec2, ...] = ((1, 2), (1, -2), (2, 1), (2, -1))

# Squares a pawn or a rose might capture on, relative to itself.
_PAWN_VICINITY: tuple[Coords, ...] = ((-1, 1), (1, 1), (-1, -1), (1, -1))
_ROSE_VICINITY: tuple[Coords, ...] = (
    (-2, -1), (-3, -3), (-2, -5), (0, -6), (2, -5), (3, -3), (2, -1), (-4, 0),
    (-5, 2), (-4, 4), (-2, 5), (0, 4), (1, 2), (-1, -2), (0, -4), (4, -4),
    (5, -2), (4, 0), (2, 1), (-5, -2), (-6, 0), (-3, 3), (-1, 2), (1, -2),
    (6, 0), (5, 2), (3, 3), (-4, -4), (-2, 1), (4, 4), (2, 5), (0, 6),
)


def _slides(directions: Iterable[Vec2], slide_limit: float) -> dict[Vec2, SlideLimits]:
    return {d: (-slide_limit, slide_limit) for d in directions}


def default_movesets(slide_limit: float = math.inf) -> dict[RawType, Moveset]:
    """Return fresh movesets for every mobile species.

    *slide_limit* caps how many steps any slide may travel.
    """
    if slide_limit <= 0:
        raise ValueError(f"slide_limit must be positive, got {slide_limit}")

    rook = _slides(_ORTHOGONALS, slide_limit)
    bishop = _slides(_DIAGONALS, slide_limit)
    queen = {**rook, **bishop}
    return {
        RawType.PAWN: Moveset(special=SpecialCategory.PAWN),
        RawType.KNIGHT: Moveset(individual=_KNIGHT),
        RawType.HAWK: Moveset(individual=_HAWK),
        RawType.KING: Moveset(individual=_GUARD, special=SpecialCategory.CASTLER),
        RawType.GUARD: Moveset(individual=_GUARD),
        RawType.ROYALCENTAUR: Moveset(
            individual=_GUARD + _KNIGHT, special=SpecialCategory.CASTLER
        ),
        RawType.CENTAUR: Moveset(individual=_GUARD + _KNIGHT),
        RawType.ROOK: Moveset(sliding=rook),
        RawType.BISHOP: Moveset(sliding=bishop),
        RawType.QUEEN: Moveset(sliding=queen),
        RawType.ROYALQUEEN: Moveset(sliding=dict(queen)),
        RawType.CHANCELLOR: Moveset(individual=_KNIGHT, sliding=dict(rook)),
        RawType.ARCHBISHOP: Moveset(individual=_KNIGHT, sliding=dict(bishop)),
        RawType.AMAZON: Moveset(individual=_KNIGHT, sliding=dict(queen)),
        RawType.CAMEL: Moveset(individual=_CAMEL),
        RawType.GIRAFFE: Moveset(individual=_GIRAFFE),
        RawType.ZEBRA: Moveset(individual=_ZEBRA),
        RawType.KNIGHTRIDER: Moveset(sliding=_slides(_HIPPOGONALS, slide_limit)),
        RawType.HUYGEN: Moveset(
            sliding=_slides(_ORTHOGONALS, slide_limit),
            blocking=_huygen_blocking,
            ignore=_huygen_ignore,
        ),
        RawType.ROSE: Moveset(special=SpecialCategory.ROSE),
    }


def empty_moveset() -> Moveset:
    """Moveset of immobile (neutral) pieces."""
    return Moveset()


# ── Derived tables ──────────────────────────────────────────────────────────


Vicinity = dict[Coords, list[RawType]]


def generate_vicinity(movesets: Mapping[RawType, Moveset]) -> Vicinity:
    """Reverse index: leap offset → species able to leap by that offset."""
    vicinity: Vicinity = {}
    for raw, moveset in movesets.items():
        for offset in moveset.individual:
            vicinity.setdefault(offset, []).append(raw)
    return vicinity


def generate_special_vicinity(raw_types: Iterable[RawType]) -> Vicinity:
    """Offsets from which special movers present in the game might capture."""
    present = set(raw_types)
    vicinity: Vicinity = {}
    for raw, offsets in ((RawType.PAWN, _PAWN_VICINITY), (RawType.ROSE, _ROSE_VICINITY)):
        if raw not in present:
            continue
        for offset in offsets:
            vicinity.setdefault(offset, []).append(raw)
    return vicinity


def possible_slides(movesets: Mapping[RawType, Moveset]) -> list[Vec2]:
    """All slide directions used in the game. ``(1, 0)`` is always present for castling."""
    slides: dict[Vec2, None] = {(1, 0): None}
    for moveset in movesets.values():
        for direction in moveset.sliding:
            slides[direction] = None
    return list(slides)


def colinears_present(slides: Iterable[Vec2]) -> bool:
    """Whether two organized directions are parallel, e.g. ``(1, 0)`` and ``(2, 0)``."""
    seen = list(slides)
    for i, (ax, ay) in enumerate(seen):
        for bx, by in seen[i + 1 :]:
            if ax * by - ay * bx == 0:
                return True
    return False
