"""Tests for castling, pawn moves, promotion and the rose."""

from infinichess.core import specials
from infinichess.core.enums import Player, RawType, SpecialCategory
from infinichess.core.game import Game
from infinichess.core.move import CastleTag, EnPassant, MoveDraft, MovePiece
from infinichess.core.move_generator import MoveGenerator, MoveTarget
from infinichess.core.piece import Piece, PieceType

WHITE_QUEEN = PieceType(RawType.QUEEN, Player.WHITE)


def _targets(game: Game, coords: tuple[int, int]) -> list[MoveTarget]:
    return MoveGenerator(game).calculate(game.board.piece_at(coords)).individual


def _play(
    game: Game,
    start: tuple[int, int],
    end: tuple[int, int],
    promotion: PieceType | None = None,
):
    gen = MoveGenerator(game)
    piece = game.board.piece_at(start)
    target = gen.check_if_move_legal(gen.calculate(piece), start, end, piece.player)
    assert target is not None, f"{start}>{end} is illegal"
    return game.make_move_from_draft(
        target.to_draft(start, promotion), do_game_over_checks=True
    )


class TestHandlers:
    def test_every_category_has_a_handler(self) -> None:
        assert set(specials._HANDLERS) == set(SpecialCategory)


class TestCastling:
    def test_both_sides(self) -> None:
        game = Game.from_string("K5,1+|R8,1+|R1,1+|k5,8+")
        castles = {t.coords: t.castle for t in _targets(game, (5, 1)) if t.castle}
        assert castles == {
            (7, 1): CastleTag(1, (8, 1)),
            (3, 1): CastleTag(-1, (1, 1)),
        }

    def test_castle_moves_partner_and_consumes_rights(self) -> None:
        game = Game.from_string("K5,1+|R8,1+|R1,1+|k5,8+")
        _play(game, (5, 1), (7, 1))
        assert game.board.type_at((7, 1)) == PieceType(RawType.KING, Player.WHITE)
        assert game.board.type_at((6, 1)) == PieceType(RawType.ROOK, Player.WHITE)
        assert game.board.type_at((8, 1)) is None
        assert (5, 1) not in game.special_rights
        assert (8, 1) not in game.special_rights
        assert (1, 1) in game.special_rights

    def test_rewind_restores_rights(self) -> None:
        game = Game.from_string("K5,1+|R8,1+|k5,8+")
        before = set(game.special_rights)
        _play(game, (5, 1), (7, 1))
        game.rewind_move()
        assert game.special_rights == before
        assert game.board.type_at((8, 1)) == PieceType(RawType.ROOK, Player.WHITE)

    def test_partner_too_close(self) -> None:
        game = Game.from_string("K5,1+|R7,1+|k5,8+")
        assert not any(t.castle for t in _targets(game, (5, 1)))

    def test_no_castling_through_check(self) -> None:
        game = Game.from_string("K5,1+|R8,1+|r6,8|k1,8")
        assert not any(t.castle for t in _targets(game, (5, 1)))

    def test_no_castling_out_of_check(self) -> None:
        game = Game.from_string("K5,1+|R8,1+|r5,8|k1,8")
        assert not any(t.castle for t in _targets(game, (5, 1)))

    def test_partner_needs_its_right(self) -> None:
        game = Game.from_string("K5,1+|R8,1|k5,8")
        assert not any(t.castle for t in _targets(game, (5, 1)))

    def test_pawn_is_never_a_partner(self) -> None:
        game = Game.from_string("K5,1+|P8,1+|k5,8")
        assert not any(t.castle for t in _targets(game, (5, 1)))


class TestPawn:
    def test_single_push_without_right(self) -> None:
        game = Game.from_string("K1,1|P5,3|k20,20")
        assert [t.coords for t in _targets(game, (5, 3))] == [(5, 4)]

    def test_double_push_blocked(self) -> None:
        game = Game.from_string("K1,1|P5,2+|n5,4|k20,20")
        assert [t.coords for t in _targets(game, (5, 2))] == [(5, 3)]

    def test_black_pawns_move_down(self) -> None:
        game = Game.from_string("K1,1|p5,7+|k20,20")
        targets = specials.detect(game, (5, 7), Player.BLACK, SpecialCategory.PAWN)
        assert [t.coords for t in targets] == [(5, 6), (5, 5)]

    def test_captures_skip_voids(self) -> None:
        game = Game.from_string("K1,1|P5,2|n6,3|vo4,3|k20,20")
        assert {t.coords for t in _targets(game, (5, 2))} == {(5, 3), (6, 3)}

    def test_promotion_trigger(self) -> None:
        game = Game.from_string("K1,1|P5,7|k20,20")
        [target] = _targets(game, (5, 7))
        assert target.coords == (5, 8)
        assert target.promote_trigger

    def test_en_passant(self) -> None:
        game = Game.from_string("K1,1|P5,5|p4,7+|k8,8")
        _play(game, (1, 1), (1, 2))
        _play(game, (4, 7), (4, 5))
        assert game.enpassant == EnPassant(square=(4, 6), pawn=(4, 5))

        [capture] = [t for t in _targets(game, (5, 5)) if t.enpassant]
        assert capture.coords == (4, 6)
        move = _play(game, (5, 5), (4, 6))
        assert move.is_capture
        assert game.board.type_at((4, 5)) is None
        assert game.board.type_at((4, 6)) == PieceType(RawType.PAWN, Player.WHITE)
        assert game.enpassant is None

        game.rewind_move()
        assert game.board.type_at((4, 5)) == PieceType(RawType.PAWN, Player.BLACK)
        assert game.enpassant == EnPassant(square=(4, 6), pawn=(4, 5))

    def test_en_passant_expires(self) -> None:
        game = Game.from_string("K1,1|P5,5|p4,7+|k8,8")
        _play(game, (1, 1), (1, 2))
        _play(game, (4, 7), (4, 5))
        _play(game, (1, 2), (1, 3))
        _play(game, (8, 8), (8, 7))
        assert not any(t.enpassant for t in _targets(game, (5, 5)))

    def test_promotion_takes_lowest_free_slot(self) -> None:
        game = Game.from_string("K1,1|P5,7|k20,20")
        before = game.board.snapshot()
        _play(game, (5, 7), (5, 8), WHITE_QUEEN)
        assert game.board.type_at((5, 8)) == WHITE_QUEEN
        assert game.board.piece_index(WHITE_QUEEN, (5, 8)) == 0

        game.rewind_move()
        assert game.board.snapshot() == before

    def test_promotion_reuses_captured_slot(self) -> None:
        game = Game.from_string("K1,1|Q3,3|Q4,3|P5,7|r3,10|k20,20")
        _play(game, (1, 1), (1, 2))
        _play(game, (3, 10), (3, 3))
        _play(game, (5, 7), (5, 8), WHITE_QUEEN)
        assert game.board.piece_index(WHITE_QUEEN, (5, 8)) == 0
        assert game.board.piece_index(WHITE_QUEEN, (4, 3)) == 1


class TestRose:
    def test_single_step(self) -> None:
        game = Game.from_string("K1,1|RO10,10|k30,30")
        by_coords = {t.coords: t for t in _targets(game, (10, 10))}
        assert by_coords[(12, 11)].path == ((10, 10), (12, 11))

    def test_spiral_keeps_shortest_path(self) -> None:
        game = Game.from_string("K1,1|RO10,10|k30,30")
        by_coords = {t.coords: t for t in _targets(game, (10, 10))}
        path = by_coords[(10, 16)].path
        assert len(path) == 5
        for (x1, y1), (x2, y2) in zip(path, path[1:]):
            assert sorted((abs(x2 - x1), abs(y2 - y1))) == [1, 2]

    def test_blocked_by_friendly(self) -> None:
        game = Game.from_string("K1,1|RO10,10|N12,11|k30,30")
        by_coords = {t.coords: t for t in _targets(game, (10, 10))}
        assert (12, 11) not in by_coords

    def test_move_carries_path(self) -> None:
        game = Game.from_string("K1,1|RO10,10|k30,30")
        move = _play(game, (10, 10), (12, 11))
        assert move.path == ((10, 10), (12, 11))
        rose = Piece(PieceType(RawType.ROSE, Player.WHITE), (10, 10), 0)
        assert move.changes == [MovePiece(rose, (12, 11), path=((10, 10), (12, 11)))]


class TestUntaggedDrafts:
    """Bare start/end drafts, as replayed from a stored move list."""

    def test_castle(self) -> None:
        game = Game.from_string("K5,1+|R8,1+|k5,8+")
        move = game.make_move_from_draft(MoveDraft((5, 1), (7, 1)))
        assert move.castle == CastleTag(1, (8, 1))
        assert game.board.type_at((6, 1)) == PieceType(RawType.ROOK, Player.WHITE)
        assert game.board.type_at((8, 1)) is None
        assert (8, 1) not in game.special_rights

        game.rewind_move()
        assert game.board.type_at((8, 1)) == PieceType(RawType.ROOK, Player.WHITE)
        assert (8, 1) in game.special_rights

    def test_king_step_is_not_a_castle(self) -> None:
        game = Game.from_string("K5,1+|R8,1+|k5,8+")
        move = game.make_move_from_draft(MoveDraft((5, 1), (6, 1)))
        assert move.castle is None
        assert game.board.type_at((8, 1)) == PieceType(RawType.ROOK, Player.WHITE)

    def test_double_push(self) -> None:
        game = Game.from_string("K1,1|P5,2+|k20,20")
        game.make_move_from_draft(MoveDraft((5, 2), (5, 4)))
        assert game.enpassant == EnPassant(square=(5, 3), pawn=(5, 4))

    def test_en_passant_capture(self) -> None:
        game = Game.from_string("K1,1|P5,5|p4,7+|k8,8")
        _play(game, (1, 1), (1, 2))
        _play(game, (4, 7), (4, 5))
        move = game.make_move_from_draft(MoveDraft((5, 5), (4, 6)))
        assert move.enpassant
        assert game.board.type_at((4, 5)) is None

    def test_rose_path(self) -> None:
        game = Game.from_string("K1,1|RO10,10|k30,30")
        move = game.make_move_from_draft(MoveDraft((10, 10), (12, 11)))
        assert move.path == ((10, 10), (12, 11))
