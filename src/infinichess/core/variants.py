"""Starting positions, written as short position strings.

A position string is a ``|``-separated list of pieces, each a short piece
code followed by ``x,y`` and an optional ``+`` for a special right
(castling or a pawn's double push), e.g. ``"K5,1+|R8,1+|k5,8+"``.
"""

from __future__ import annotations

import re

from infinichess.core.piece import PieceType
from infinichess.core.types import Coords, coords_key

Position = dict[Coords, PieceType]

_TOKEN_RE = re.compile(r"^([A-Za-z]+)(-?\d+),(-?\d+)(\+?)$")


def position_from_string(text: str) -> tuple[Position, set[Coords]]:
    """Parse a position string into pieces and special rights."""
    position: Position = {}
    special_rights: set[Coords] = set()
    for token in filter(None, (part.strip() for part in text.split("|"))):
        match = _TOKEN_RE.match(token)
        if match is None:
            raise ValueError(f"Invalid position token: {token!r}")
        code, x, y, plus = match.groups()
        coords = (int(x), int(y))
        if coords in position:
            raise ValueError(f"Two pieces on {coords_key(coords)}")
        position[coords] = PieceType.from_short(code)
        if plus:
            special_rights.add(coords)
    return position, special_rights


def position_to_string(position: Position, special_rights: set[Coords] = frozenset()) -> str:
    tokens = []
    for coords, piece_type in sorted(position.items(), key=lambda item: (item[0][1], item[0][0])):
        plus = "+" if coords in special_rights else ""
        tokens.append(f"{piece_type.short}{coords_key(coords)}{plus}")
    return "|".join(tokens)


def _back_rank(y: int, white: bool) -> list[str]:
    order = ("R", "N", "B", "Q", "K", "B", "N", "R")
    tokens = []
    for x, code in enumerate(order, start=1):
        code = code if white else code.lower()
        plus = "+" if code.upper() in ("R", "K") else ""
        tokens.append(f"{code}{x},{y}{plus}")
    return tokens


def _pawn_rank(y: int, white: bool) -> list[str]:
    code = "P" if white else "p"
    return [f"{code}{x},{y}+" for x in range(1, 9)]


CLASSICAL = "|".join(
    _pawn_rank(2, True) + _back_rank(1, True) + _pawn_rank(7, False) + _back_rank(8, False)
)


def classical_position() -> tuple[Position, set[Coords]]:
    """The orthodox chess setup on an unbounded board."""
    return position_from_string(CLASSICAL)

