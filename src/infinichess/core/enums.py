"""Core enumerations for the infinite chess domain."""

from __future__ import annotations

from enum import Enum, IntEnum


class Player(IntEnum):
    """Owner of a piece. Neutral pieces belong to nobody and never move."""

    NEUTRAL = 0
    WHITE = 1
    BLACK = 2

    @property
    def opposite(self) -> Player:
        if self == Player.NEUTRAL:
            return Player.NEUTRAL
        return Player.BLACK if self == Player.WHITE else Player.WHITE

    def __str__(self) -> str:
        return self.name.lower()


class RawType(IntEnum):
    """Piece species, independent of owner."""

    KING = 0
    GIRAFFE = 1
    CAMEL = 2
    ZEBRA = 3
    KNIGHTRIDER = 4
    AMAZON = 5
    QUEEN = 6
    ROYALQUEEN = 7
    HAWK = 8
    CHANCELLOR = 9
    ARCHBISHOP = 10
    KNIGHT = 11
    GUARD = 12
    ROOK = 13
    BISHOP = 14
    PAWN = 15
    ROYALCENTAUR = 16
    CENTAUR = 17
    HUYGEN = 18
    ROSE = 19
    OBSTACLE = 20
    VOID = 21


class SpecialCategory(IntEnum):
    """Families of pieces that carry their own move detection and execution."""

    CASTLER = 1
    PAWN = 2
    ROSE = 3


class BlockResult(IntEnum):
    """How a piece on a line affects a slider travelling along it."""

    NONE = 0
    BLOCKS = 1
    CAPTURABLE = 2


class WinCondition(str, Enum):
    """Ways a player can win. Values double as conclusion suffixes."""

    CHECKMATE = "checkmate"
    ROYALCAPTURE = "royalcapture"
    ALLROYALSCAPTURED = "allroyalscaptured"
    ALLPIECESCAPTURED = "allpiecescaptured"
    THREECHECK = "threecheck"
    KOTH = "koth"

    def __str__(self) -> str:
        return self.value


class BoardChangeKind(IntEnum):
    """Kinds of board diffs published on the change feed."""

    ADDED = 0
    REMOVED = 1
    MOVED = 2
