"""Coordinate aliases and the integer geometry the board indices rely on.

Coordinates are plain ``(x, y)`` tuples of Python ints, so the board has no
bounds. Sliding directions are normalized so that ``dx > 0``, or ``dx == 0``
and ``dy > 0``; a direction and its negation describe the same line.
"""

from __future__ import annotations

from fractions import Fraction
from typing import TypeAlias

Coords: TypeAlias = tuple[int, int]
Vec2: TypeAlias = tuple[int, int]
LineKey: TypeAlias = tuple[int, int]  # (C, X)
GeneralForm: TypeAlias = tuple[int, int, int]  # a*x + b*y + c = 0


def posmod(a: int, b: int) -> int:
    """Modulo that is always non-negative for positive *b*."""
    return a % abs(b)


def add_coords(a: Coords, b: Coords) -> Coords:
    return (a[0] + b[0], a[1] + b[1])


def chebyshev_distance(a: Coords, b: Coords) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def coords_key(coords: Coords) -> str:
    """Human-readable ``"x,y"`` form, used in log messages and reprs."""
    return f"{coords[0]},{coords[1]}"


# ── Organized lines ─────────────────────────────────────────────────────────


def line_c(direction: Vec2, coords: Coords) -> int:
    """Standard-form constant ``C = dx*y - dy*x`` of the line."""
    dx, dy = direction
    return dx * coords[1] - dy * coords[0]


def line_x(direction: Vec2, coords: Coords) -> int:
    """Nearest intercept on or after the governing axis, modulo the step.

    Two points with the same ``C`` can still sit on different lattices when
    the step is larger than one (``(2, 0)`` from ``x=0`` never reaches
    ``x=1``); ``X`` separates them. Vertical lines use the y axis.
    """
    if direction[0] == 0:
        return posmod(coords[1], direction[1])
    return posmod(coords[0], direction[0])


def line_key(direction: Vec2, coords: Coords) -> LineKey:
    """Identifier of the organized line through *coords* along *direction*."""
    return (line_c(direction, coords), line_x(direction, coords))


def slide_axis(direction: Vec2) -> int:
    """Coordinate index used to measure steps along *direction*."""
    return 1 if direction[0] == 0 else 0


# ── General-form line algebra ───────────────────────────────────────────────


def general_form_from_coords_and_vec(coords: Coords, vec: Vec2) -> GeneralForm:
    dx, dy = vec
    return (dy, -dx, dx * coords[1] - dy * coords[0])


def general_form_from_two_coords(a: Coords, b: Coords) -> GeneralForm:
    return general_form_from_coords_and_vec(a, (b[0] - a[0], b[1] - a[1]))


def are_general_forms_equal(l1: GeneralForm, l2: GeneralForm) -> bool:
    """True when both equations describe the same line."""
    a1, b1, c1 = l1
    a2, b2, c2 = l2
    return a1 * b2 == a2 * b1 and a1 * c2 == a2 * c1 and b1 * c2 == b2 * c1


def intersection_point(
    l1: GeneralForm, l2: GeneralForm
) -> tuple[Fraction, Fraction] | None:
    """Exact intersection of two lines, or ``None`` if parallel or equal."""
    a1, b1, c1 = l1
    a2, b2, c2 = l2
    det = a1 * b2 - a2 * b1
    if det == 0:
        return None
    x = Fraction(b1 * c2 - b2 * c1, det)
    y = Fraction(c1 * a2 - c2 * a1, det)
    return (x, y)


def is_prime(n: int) -> bool:
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True
