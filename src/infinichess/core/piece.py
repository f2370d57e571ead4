"""Piece type and piece value objects."""

from __future__ import annotations

from dataclasses import dataclass

from infinichess.core.enums import Player, RawType
from infinichess.core.types import Coords

_SHORT_CODES: dict[RawType, str] = {
    RawType.KING: "k",
    RawType.GIRAFFE: "gi",
    RawType.CAMEL: "ca",
    RawType.ZEBRA: "ze",
    RawType.KNIGHTRIDER: "nr",
    RawType.AMAZON: "am",
    RawType.QUEEN: "q",
    RawType.ROYALQUEEN: "rq",
    RawType.HAWK: "ha",
    RawType.CHANCELLOR: "ch",
    RawType.ARCHBISHOP: "ar",
    RawType.KNIGHT: "n",
    RawType.GUARD: "gu",
    RawType.ROOK: "r",
    RawType.BISHOP: "b",
    RawType.PAWN: "p",
    RawType.ROYALCENTAUR: "rc",
    RawType.CENTAUR: "ce",
    RawType.HUYGEN: "hu",
    RawType.ROSE: "ro",
    RawType.OBSTACLE: "ob",
    RawType.VOID: "vo",
}
_RAW_BY_CODE: dict[str, RawType] = {code: raw for raw, code in _SHORT_CODES.items()}

NEUTRAL_TYPES: frozenset[RawType] = frozenset({RawType.OBSTACLE, RawType.VOID})

ROYALS: frozenset[RawType] = frozenset(
    {RawType.KING, RawType.ROYALQUEEN, RawType.ROYALCENTAUR}
)
JUMPING_ROYALS: frozenset[RawType] = frozenset({RawType.KING, RawType.ROYALCENTAUR})
SLIDING_ROYALS: frozenset[RawType] = frozenset({RawType.ROYALQUEEN})


@dataclass(frozen=True, slots=True)
class PieceType:
    """Species plus owner. Hashable, so it keys the per-type arenas."""

    raw: RawType
    player: Player

    def __post_init__(self) -> None:
        is_neutral_species = self.raw in NEUTRAL_TYPES
        if is_neutral_species != (self.player == Player.NEUTRAL):
            raise ValueError(
                f"{self.raw.name.lower()} cannot belong to {self.player}"
            )

    @property
    def is_royal(self) -> bool:
        return self.raw in ROYALS

    @property
    def inverted(self) -> PieceType:
        """The same species owned by the other side."""
        return PieceType(self.raw, self.player.opposite)

    @property
    def short(self) -> str:
        code = _SHORT_CODES[self.raw]
        return code.upper() if self.player == Player.WHITE else code

    @classmethod
    def from_short(cls, code: str) -> PieceType:
        """Parse a short code: ``"Q"`` is a white queen, ``"q"`` black, ``"ob"`` neutral."""
        raw = _RAW_BY_CODE.get(code.lower())
        if raw is None:
            raise ValueError(f"Unknown piece code: {code!r}")
        if raw in NEUTRAL_TYPES:
            if code != code.lower():
                raise ValueError(f"Neutral piece codes are lower case: {code!r}")
            return cls(raw, Player.NEUTRAL)
        if code == code.upper():
            return cls(raw, Player.WHITE)
        if code == code.lower():
            return cls(raw, Player.BLACK)
        raise ValueError(f"Mixed-case piece code: {code!r}")

    def __str__(self) -> str:
        return self.short

    def __repr__(self) -> str:
        return f"PieceType({self.short})"


@dataclass(frozen=True, slots=True)
class Piece:
    """A piece on the board: its type, where it stands and its arena slot."""

    type: PieceType
    coords: Coords
    index: int

    @property
    def player(self) -> Player:
        return self.type.player

    @property
    def raw(self) -> RawType:
        return self.type.raw

    def __repr__(self) -> str:
        return f"Piece({self.type.short}@{self.coords[0]},{self.coords[1]}#{self.index})"
