"""Move drafts, move records, and the tagged diffs that make rewinding exact."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias

from infinichess.core.enums import BoardChangeKind, Player
from infinichess.core.piece import Piece, PieceType
from infinichess.core.types import Coords, coords_key

Path: TypeAlias = tuple[Coords, ...]


# ── Special-move tags ───────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class CastleTag:
    """Castle toward *direction* (-1 left, +1 right) with the piece on *partner*."""

    direction: int
    partner: Coords


@dataclass(frozen=True, slots=True)
class EnPassant:
    """En passant state: capture lands on *square*, the victim stands on *pawn*."""

    square: Coords
    pawn: Coords


@dataclass(frozen=True, slots=True)
class MoveDraft:
    """The bare minimum describing a move, as produced by a UI or the network."""

    start_coords: Coords
    end_coords: Coords
    promotion: PieceType | None = None
    castle: CastleTag | None = None
    enpassant: bool = False
    enpassant_create: EnPassant | None = None
    path: Path | None = None

    def __str__(self) -> str:
        text = f"{coords_key(self.start_coords)}>{coords_key(self.end_coords)}"
        if self.promotion is not None:
            text += self.promotion.short
        return text


# ── Board changes ───────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class AddPiece:
    piece: Piece


@dataclass(frozen=True, slots=True)
class DeletePiece:
    piece: Piece


@dataclass(frozen=True, slots=True)
class MovePiece:
    piece: Piece
    end_coords: Coords
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class CapturePiece:
    """Delete *captured*, then move *piece* onto *end_coords*."""

    piece: Piece
    end_coords: Coords
    captured: Piece
    path: Path | None = None


BoardChange: TypeAlias = AddPiece | DeletePiece | MovePiece | CapturePiece


# ── Check state ─────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Attacker:
    """A piece giving check. *path* is set for checks along a curved route (rose)."""

    coords: Coords
    sliding_check: bool
    path: Path | None = None


# ── State deltas (rewind info) ──────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class EnPassantChange:
    current: EnPassant | None
    future: EnPassant | None


@dataclass(frozen=True, slots=True)
class SpecialRightChange:
    coords: Coords
    current: bool
    future: bool


@dataclass(frozen=True, slots=True)
class MoveRuleChange:
    current: int
    future: int


@dataclass(frozen=True, slots=True)
class CheckChange:
    current: tuple[Coords, ...]
    future: tuple[Coords, ...]


@dataclass(frozen=True, slots=True)
class AttackersChange:
    current: tuple[Attacker, ...]
    future: tuple[Attacker, ...]


@dataclass(frozen=True, slots=True)
class ChecksGivenChange:
    current: tuple[tuple[Player, int], ...]
    future: tuple[tuple[Player, int], ...]


@dataclass(frozen=True, slots=True)
class ConclusionChange:
    current: str | Literal[False]
    future: str | Literal[False]


StateChange: TypeAlias = (
    EnPassantChange
    | SpecialRightChange
    | MoveRuleChange
    | CheckChange
    | AttackersChange
    | ChecksGivenChange
    | ConclusionChange
)


# ── Change feed ─────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class BoardChangeEvent:
    """One diff applied to the board, as seen by renderers.

    For ``MOVED`` events *piece* is the piece at its new square and
    *previous_coords* is where it came from.
    """

    kind: BoardChangeKind
    piece: Piece
    previous_coords: Coords | None = None


# ── Move record ─────────────────────────────────────────────────────────────


@dataclass(slots=True)
class Move:
    """A generated move: the draft plus everything needed to replay or undo it."""

    type: PieceType
    start_coords: Coords
    end_coords: Coords
    generate_index: int
    promotion: PieceType | None = None
    castle: CastleTag | None = None
    enpassant: bool = False
    enpassant_create: EnPassant | None = None
    path: Path | None = None
    changes: list[BoardChange] = field(default_factory=list)
    rewind_info: list[StateChange] = field(default_factory=list)
    check: bool = False
    mate: bool = False

    @property
    def draft(self) -> MoveDraft:
        return MoveDraft(
            start_coords=self.start_coords,
            end_coords=self.end_coords,
            promotion=self.promotion,
            castle=self.castle,
            enpassant=self.enpassant,
            enpassant_create=self.enpassant_create,
            path=self.path,
        )

    @property
    def captured(self) -> list[Piece]:
        return [c.captured for c in self.changes if isinstance(c, CapturePiece)]

    @property
    def is_capture(self) -> bool:
        return any(isinstance(c, CapturePiece) for c in self.changes)

    @property
    def compact(self) -> str:
        return str(self.draft)

    def __str__(self) -> str:
        return self.compact
