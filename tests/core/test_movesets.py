"""Tests for the moveset catalog and its derived tables."""

import math

import pytest

from infinichess.core.enums import Player, RawType, SpecialCategory
from infinichess.core.movesets import (
    colinears_present,
    default_movesets,
    generate_special_vicinity,
    generate_vicinity,
    possible_slides,
)
from infinichess.core.piece import NEUTRAL_TYPES, PieceType


class TestCatalog:
    def test_every_mobile_species_present(self) -> None:
        movesets = default_movesets()
        assert set(movesets) == set(RawType) - NEUTRAL_TYPES

    def test_slides_unbounded_by_default(self) -> None:
        rook = default_movesets()[RawType.ROOK]
        assert rook.sliding == {(1, 0): (-math.inf, math.inf), (0, 1): (-math.inf, math.inf)}

    def test_slide_limit_caps_every_slide(self) -> None:
        for moveset in default_movesets(slide_limit=5).values():
            for limits in moveset.sliding.values():
                assert limits == (-5, 5)

    def test_non_positive_slide_limit_rejected(self) -> None:
        with pytest.raises(ValueError):
            default_movesets(slide_limit=0)

    def test_special_categories(self) -> None:
        movesets = default_movesets()
        assert movesets[RawType.KING].special == SpecialCategory.CASTLER
        assert movesets[RawType.ROYALCENTAUR].special == SpecialCategory.CASTLER
        assert movesets[RawType.PAWN].special == SpecialCategory.PAWN
        assert movesets[RawType.ROSE].special == SpecialCategory.ROSE
        assert movesets[RawType.QUEEN].special is None

    def test_huygen_lands_on_prime_distances_only(self) -> None:
        huygen = default_movesets()[RawType.HUYGEN]
        assert huygen.ignore((0, 0), (3, 0))
        assert huygen.ignore((0, 0), (0, -7))
        assert not huygen.ignore((0, 0), (4, 0))
        assert not huygen.ignore((0, 0), (1, 0))

    def test_default_blocking(self) -> None:
        from infinichess.core.enums import BlockResult
        from infinichess.core.piece import Piece

        rook = default_movesets()[RawType.ROOK]
        friend = Piece(PieceType(RawType.PAWN, Player.WHITE), (3, 0), 0)
        enemy = Piece(PieceType(RawType.PAWN, Player.BLACK), (3, 0), 0)
        void = Piece(PieceType(RawType.VOID, Player.NEUTRAL), (3, 0), 0)
        assert rook.blocking(Player.WHITE, friend, (0, 0)) == BlockResult.BLOCKS
        assert rook.blocking(Player.WHITE, enemy, (0, 0)) == BlockResult.CAPTURABLE
        assert rook.blocking(Player.WHITE, void, (0, 0)) == BlockResult.BLOCKS


class TestDerivedTables:
    def test_vicinity_maps_offsets_to_leapers(self) -> None:
        movesets = default_movesets()
        vicinity = generate_vicinity(
            {raw: movesets[raw] for raw in (RawType.KNIGHT, RawType.KING)}
        )
        assert vicinity[(1, 2)] == [RawType.KNIGHT]
        assert vicinity[(1, 1)] == [RawType.KING]
        assert (3, 3) not in vicinity

    def test_special_vicinity_only_for_present_species(self) -> None:
        assert generate_special_vicinity([RawType.KING, RawType.ROOK]) == {}
        vicinity = generate_special_vicinity([RawType.PAWN])
        assert set(vicinity) == {(-1, 1), (1, 1), (-1, -1), (1, -1)}

    def test_rose_special_vicinity_has_32_offsets(self) -> None:
        assert len(generate_special_vicinity([RawType.ROSE])) == 32

    def test_horizontal_slide_always_present(self) -> None:
        movesets = default_movesets()
        assert possible_slides({RawType.KNIGHT: movesets[RawType.KNIGHT]}) == [(1, 0)]

    def test_possible_slides_deduplicates(self) -> None:
        movesets = default_movesets()
        slides = possible_slides(
            {raw: movesets[raw] for raw in (RawType.ROOK, RawType.QUEEN)}
        )
        assert sorted(slides) == [(0, 1), (1, -1), (1, 0), (1, 1)]

    def test_colinears(self) -> None:
        assert colinears_present([(1, 0), (2, 0)])
        assert colinears_present([(1, 1), (2, 2)])
        assert not colinears_present([(1, 0), (0, 1), (1, 1), (1, -1)])
        assert not colinears_present(possible_slides(default_movesets()))
