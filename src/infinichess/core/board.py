"""Board index — sparse piece storage with by-square and by-line lookups.

Pieces of each type live in a :class:`SlotArena`. A deleted piece leaves an
empty slot that is pushed onto the arena's free-list, so slot indices held by
other systems (renderer buffers) stay valid and are reused by the next piece
of that type.

Two derived indices are maintained on every mutation:

* by square: ``coords -> PieceType``;
* by line: for every organized slide direction, ``line key -> coords`` of the
  pieces on that exact line.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from infinichess.core.enums import Player, RawType
from infinichess.core.piece import JUMPING_ROYALS, ROYALS, Piece, PieceType
from infinichess.core.types import Coords, LineKey, Vec2, line_key

SLOT_HEADROOM = 5


class SlotArena:
    """Per-type slot list with a free-list of empty slot indices."""

    __slots__ = ("_slots", "_free")

    def __init__(self, headroom: int = SLOT_HEADROOM) -> None:
        self._slots: list[Coords | None] = []
        self._free: list[int] = []
        self.grow(headroom)

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, index: int) -> Coords | None:
        return self._slots[index]

    @property
    def free_slots(self) -> tuple[int, ...]:
        return tuple(self._free)

    def occupied(self) -> Iterator[tuple[int, Coords]]:
        for index, coords in enumerate(self._slots):
            if coords is not None:
                yield index, coords

    def count(self) -> int:
        return len(self._slots) - len(self._free)

    def grow(self, amount: int) -> None:
        """Append *amount* empty slots. Lower indices are handed out first."""
        start = len(self._slots)
        self._slots.extend([None] * amount)
        self._free.extend(reversed(range(start, start + amount)))

    def peek_free(self) -> int:
        """Index the next :meth:`alloc` without an explicit index would use."""
        if not self._free:
            return len(self._slots)
        return self._free[-1]

    def alloc(self, coords: Coords, index: int | None = None) -> int:
        """Store *coords* in slot *index* (or the next free one) and return it."""
        if index is None:
            if not self._free:
                self.grow(SLOT_HEADROOM)
            index = self._free.pop()
        else:
            while index >= len(self._slots):
                self.grow(SLOT_HEADROOM)
            if self._slots[index] is not None:
                raise ValueError(f"Slot {index} is already occupied")
            if self._free and self._free[-1] == index:
                self._free.pop()
            else:
                self._free.remove(index)
        self._slots[index] = coords
        return index

    def free(self, index: int) -> None:
        if self._slots[index] is None:
            raise ValueError(f"Slot {index} is already empty")
        self._slots[index] = None
        self._free.append(index)

    def relocate(self, index: int, coords: Coords) -> None:
        if self._slots[index] is None:
            raise ValueError(f"Slot {index} is empty")
        self._slots[index] = coords

    def snapshot(self) -> tuple[tuple[Coords | None, ...], tuple[int, ...]]:
        return tuple(self._slots), tuple(self._free)


class Board:
    """All pieces on an unbounded board, organized three ways."""

    __slots__ = ("_arenas", "_by_square", "_by_line", "_slot_of")

    def __init__(self, slides: Iterable[Vec2], types: Iterable[PieceType] = ()) -> None:
        self._arenas: dict[PieceType, SlotArena] = {}
        self._by_square: dict[Coords, PieceType] = {}
        # coords -> slot index, so lookups never scan an arena.
        self._slot_of: dict[Coords, int] = {}
        self._by_line: dict[Vec2, dict[LineKey, list[Coords]]] = {
            direction: {} for direction in slides
        }
        for piece_type in types:
            self.ensure_arena(piece_type)

    @classmethod
    def from_position(
        cls,
        position: dict[Coords, PieceType],
        slides: Iterable[Vec2],
        extra_types: Iterable[PieceType] = (),
    ) -> Board:
        """Build the indices once from a starting position."""
        board = cls(slides, extra_types)
        for coords, piece_type in position.items():
            board.organize(piece_type, coords)
        return board

    # ── Mutation ─────────────────────────────────────────────────────────

    def ensure_arena(self, piece_type: PieceType) -> SlotArena:
        arena = self._arenas.get(piece_type)
        if arena is None:
            arena = SlotArena()
            self._arenas[piece_type] = arena
        return arena

    def organize(self, piece_type: PieceType, coords: Coords, index: int | None = None) -> Piece:
        """Place a piece, optionally into a specific slot."""
        if coords in self._by_square:
            raise ValueError(
                f"Cannot organize {piece_type} onto occupied square {coords}"
            )
        slot = self.ensure_arena(piece_type).alloc(coords, index)
        self._by_square[coords] = piece_type
        self._slot_of[coords] = slot
        self._add_to_lines(coords)
        return Piece(piece_type, coords, slot)

    def remove(self, coords: Coords) -> Piece:
        """Delete the piece on *coords*, freeing its slot."""
        piece_type = self._by_square.get(coords)
        if piece_type is None:
            raise ValueError(f"Cannot remove piece from empty square {coords}")
        slot = self._slot_of.pop(coords)
        del self._by_square[coords]
        self._arenas[piece_type].free(slot)
        self._remove_from_lines(coords)
        return Piece(piece_type, coords, slot)

    def relocate(self, start: Coords, end: Coords) -> Piece:
        """Move the piece on *start* to the empty square *end*, keeping its slot."""
        piece_type = self._by_square.get(start)
        if piece_type is None:
            raise ValueError(f"Cannot move piece from empty square {start}")
        if end in self._by_square:
            raise ValueError(f"Cannot move piece onto occupied square {end}")
        slot = self._slot_of.pop(start)
        del self._by_square[start]
        self._remove_from_lines(start)
        self._arenas[piece_type].relocate(slot, end)
        self._by_square[end] = piece_type
        self._slot_of[end] = slot
        self._add_to_lines(end)
        return Piece(piece_type, end, slot)

    def _add_to_lines(self, coords: Coords) -> None:
        for direction, lines in self._by_line.items():
            lines.setdefault(line_key(direction, coords), []).append(coords)

    def _remove_from_lines(self, coords: Coords) -> None:
        for direction, lines in self._by_line.items():
            key = line_key(direction, coords)
            bucket = lines[key]
            bucket.remove(coords)
            if not bucket:
                del lines[key]

    # ── Queries ──────────────────────────────────────────────────────────

    def __contains__(self, coords: object) -> bool:
        return coords in self._by_square

    def __len__(self) -> int:
        return len(self._by_square)

    def type_at(self, coords: Coords) -> PieceType | None:
        return self._by_square.get(coords)

    def piece_at(self, coords: Coords) -> Piece | None:
        piece_type = self._by_square.get(coords)
        if piece_type is None:
            return None
        return Piece(piece_type, coords, self._slot_of[coords])

    def piece_index(self, piece_type: PieceType, coords: Coords) -> int:
        if self._by_square.get(coords) != piece_type:
            raise ValueError(f"No {piece_type} on {coords}")
        return self._slot_of[coords]

    @property
    def slides(self) -> tuple[Vec2, ...]:
        return tuple(self._by_line)

    def line_bucket(self, direction: Vec2, coords: Coords) -> list[Coords]:
        """Coords of every piece on the *direction* line through *coords*."""
        lines = self._by_line.get(direction)
        if lines is None:
            raise ValueError(f"Direction {direction} is not organized")
        return lines.get(line_key(direction, coords), [])

    def arena(self, piece_type: PieceType) -> SlotArena | None:
        return self._arenas.get(piece_type)

    @property
    def types(self) -> tuple[PieceType, ...]:
        return tuple(self._arenas)

    def pieces(self) -> Iterator[Piece]:
        for piece_type, arena in self._arenas.items():
            for index, coords in arena.occupied():
                yield Piece(piece_type, coords, index)

    def pieces_of(self, player: Player) -> Iterator[Piece]:
        for piece_type, arena in self._arenas.items():
            if piece_type.player != player:
                continue
            for index, coords in arena.occupied():
                yield Piece(piece_type, coords, index)

    def royal_coords(self, player: Player) -> list[Coords]:
        return self._coords_of_raws(player, ROYALS)

    def jumping_royal_coords(self, player: Player) -> list[Coords]:
        return self._coords_of_raws(player, JUMPING_ROYALS)

    def _coords_of_raws(self, player: Player, raws: frozenset[RawType]) -> list[Coords]:
        result: list[Coords] = []
        for piece_type, arena in self._arenas.items():
            if piece_type.player == player and piece_type.raw in raws:
                result.extend(coords for _, coords in arena.occupied())
        return result

    def piece_count(self, ignore: Iterable[RawType] = ()) -> int:
        ignored = set(ignore)
        return sum(
            arena.count()
            for piece_type, arena in self._arenas.items()
            if piece_type.raw not in ignored
        )

    def piece_count_of(self, player: Player) -> int:
        return sum(
            arena.count()
            for piece_type, arena in self._arenas.items()
            if piece_type.player == player
        )

    def snapshot(self) -> tuple[object, ...]:
        """Equality-comparable copy of every index, for round-trip checks."""
        arenas = {t: a.snapshot() for t, a in self._arenas.items()}
        lines = {
            direction: {key: sorted(bucket) for key, bucket in lines.items()}
            for direction, lines in self._by_line.items()
        }
        return (arenas, dict(self._by_square), lines)
