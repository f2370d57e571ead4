"""Tests for GameController — the external facade."""

import pytest

from infinichess.core.enums import BoardChangeKind, Player, RawType
from infinichess.core.move import MoveDraft
from infinichess.core.piece import PieceType
from infinichess.game.controller import GameController
from infinichess.game.interfaces import GamePhase

WHITE_QUEEN = PieceType(RawType.QUEEN, Player.WHITE)
LADDER = "K0,0|P100,2|r20,-1|r22,1|r21,5|k50,50"


def _controller(position: str | None = None) -> GameController:
    ctrl = GameController()
    ctrl.new_game(position=position)
    return ctrl


class TestNewGame:
    def test_no_game_before_start(self) -> None:
        ctrl = GameController()
        assert ctrl.phase == GamePhase.NOT_STARTED
        with pytest.raises(RuntimeError):
            _ = ctrl.game

    def test_phase_awaiting(self) -> None:
        ctrl = _controller()
        assert ctrl.phase == GamePhase.AWAITING_MOVE
        assert ctrl.conclusion is False
        assert not ctrl.is_game_over

    def test_events_on_start(self) -> None:
        ctrl = GameController()
        turns: list[Player] = []
        phases: list[GamePhase] = []
        ctrl.events.on_turn_flipped.append(turns.append)
        ctrl.events.on_phase_changed.append(phases.append)
        ctrl.new_game()
        assert turns == [Player.WHITE]
        assert phases == [GamePhase.AWAITING_MOVE]

    def test_custom_position(self) -> None:
        ctrl = _controller("K5,1+|R1,1+|k5,8+")
        assert len(ctrl.game.board) == 3
        assert (1, 1) in ctrl.game.special_rights

    def test_restart_detaches_old_game(self) -> None:
        ctrl = _controller()
        old = ctrl.game
        events = []
        ctrl.events.on_board_change.append(events.append)
        ctrl.new_game()
        old.make_move_from_draft(MoveDraft((5, 2), (5, 4)))
        assert events == []


class TestSubmitMove:
    def test_legal_move_accepted(self) -> None:
        ctrl = _controller()
        moves = []
        turns: list[Player] = []
        ctrl.events.on_move.append(lambda move, game: moves.append(move))
        ctrl.events.on_turn_flipped.append(turns.append)
        assert ctrl.submit_move(MoveDraft((5, 2), (5, 4)))
        assert ctrl.game.whos_turn == Player.BLACK
        assert [m.compact for m in moves] == ["5,2>5,4"]
        assert turns == [Player.BLACK]

    def test_special_tags_filled_in(self) -> None:
        ctrl = _controller()
        ctrl.submit_move(MoveDraft((5, 2), (5, 4)))
        assert ctrl.game.enpassant is not None

    def test_illegal_move_rejected(self) -> None:
        ctrl = _controller()
        assert not ctrl.submit_move(MoveDraft((5, 2), (5, 5)))
        assert ctrl.game.moves == []

    def test_opponents_piece_rejected(self) -> None:
        ctrl = _controller()
        assert not ctrl.submit_move(MoveDraft((5, 7), (5, 5)))

    def test_empty_square_rejected(self) -> None:
        ctrl = _controller()
        assert not ctrl.submit_move(MoveDraft((5, 4), (5, 5)))

    def test_promotion_required(self) -> None:
        ctrl = _controller("K1,1|P5,7|k20,20")
        assert not ctrl.submit_move(MoveDraft((5, 7), (5, 8)))
        assert ctrl.submit_move(MoveDraft((5, 7), (5, 8), WHITE_QUEEN))
        assert ctrl.game.board.type_at((5, 8)) == WHITE_QUEEN

    def test_promotion_only_on_promotion_rank(self) -> None:
        ctrl = _controller()
        assert not ctrl.submit_move(MoveDraft((5, 2), (5, 4), WHITE_QUEEN))

    def test_promotion_to_disallowed_type(self) -> None:
        ctrl = _controller("K1,1|P5,7|k20,20")
        king = PieceType(RawType.KING, Player.WHITE)
        assert not ctrl.submit_move(MoveDraft((5, 7), (5, 8), king))

    def test_rejected_while_reviewing(self) -> None:
        ctrl = _controller()
        ctrl.submit_move(MoveDraft((5, 2), (5, 4)))
        ctrl.jump_to(-1)
        assert not ctrl.submit_move(MoveDraft((5, 2), (5, 4)))


class TestLegalMoves:
    def test_at_front(self) -> None:
        ctrl = _controller()
        legal = ctrl.legal_moves((2, 1))
        assert legal is not None
        assert len(legal.targets()) == 7

    def test_empty_square(self) -> None:
        ctrl = _controller()
        assert ctrl.legal_moves((5, 5)) is None

    def test_none_while_reviewing(self) -> None:
        ctrl = _controller()
        ctrl.submit_move(MoveDraft((5, 2), (5, 4)))
        ctrl.jump_to(-1)
        assert ctrl.legal_moves((2, 1)) is None


class TestHistory:
    def test_undo(self) -> None:
        ctrl = _controller()
        ctrl.submit_move(MoveDraft((5, 2), (5, 4)))
        assert ctrl.undo_move()
        assert ctrl.game.moves == []
        assert ctrl.game.whos_turn == Player.WHITE

    def test_undo_without_moves(self) -> None:
        ctrl = _controller()
        assert not ctrl.undo_move()

    def test_jump_and_return(self) -> None:
        ctrl = _controller()
        ctrl.submit_move(MoveDraft((5, 2), (5, 4)))
        ctrl.submit_move(MoveDraft((5, 7), (5, 5)))
        ctrl.jump_to(0)
        assert ctrl.phase == GamePhase.REVIEWING
        assert ctrl.game.board.type_at((5, 5)) is None
        ctrl.forward_to_front()
        assert ctrl.phase == GamePhase.AWAITING_MOVE
        assert ctrl.game.board.type_at((5, 5)) is not None

    def test_board_changes_forwarded(self) -> None:
        ctrl = _controller()
        events = []
        ctrl.events.on_board_change.append(events.append)
        ctrl.submit_move(MoveDraft((7, 1), (6, 3)))
        ctrl.jump_to(-1)
        assert [e.kind for e in events] == [BoardChangeKind.MOVED, BoardChangeKind.MOVED]
        assert events[1].piece.coords == (7, 1)


class TestRemoteMoves:
    def test_validate_without_playing(self) -> None:
        ctrl = _controller()
        assert ctrl.validate_remote_move(MoveDraft((5, 2), (5, 4))) is True
        assert ctrl.game.moves == []
        assert ctrl.validate_remote_move(None) == "Move is not defined."

    def test_reject(self) -> None:
        ctrl = _controller()
        verdict = ctrl.apply_remote_move(MoveDraft((5, 2), (5, 5)))
        assert verdict == "Destination coordinates are illegal."
        assert ctrl.game.moves == []

    def test_accept(self) -> None:
        ctrl = _controller()
        assert ctrl.apply_remote_move(MoveDraft((5, 2), (5, 4))) is True
        assert len(ctrl.game.moves) == 1
        assert ctrl.game.enpassant is not None

    def test_accept_while_reviewing(self) -> None:
        ctrl = _controller()
        ctrl.submit_move(MoveDraft((5, 2), (5, 4)))
        ctrl.submit_move(MoveDraft((5, 7), (5, 5)))
        ctrl.jump_to(0)
        assert ctrl.apply_remote_move(MoveDraft((7, 1), (6, 3))) is True
        assert len(ctrl.game.moves) == 3
        assert ctrl.game.is_at_front
        assert ctrl.phase == GamePhase.AWAITING_MOVE

    def test_accept_list_coords(self) -> None:
        ctrl = _controller()
        assert ctrl.apply_remote_move(MoveDraft([5, 2], [5, 4])) is True
        assert ctrl.game.moves[-1].compact == "5,2>5,4"
        assert ctrl.game.enpassant is not None

    def test_wrong_claim_rejected(self) -> None:
        ctrl = _controller()
        verdict = ctrl.apply_remote_move(MoveDraft((5, 2), (5, 4)), "white checkmate")
        assert isinstance(verdict, str)
        assert verdict.startswith("Game conclusion isn't correct.")


class TestGameOver:
    def test_checkmate(self) -> None:
        ctrl = _controller(LADDER)
        endings: list[str] = []
        ctrl.events.on_game_over.append(endings.append)
        assert ctrl.submit_move(MoveDraft((100, 2), (100, 3)))
        assert ctrl.apply_remote_move(MoveDraft((21, 5), (21, 0)), "black checkmate") is True
        assert ctrl.conclusion == "black checkmate"
        assert ctrl.phase == GamePhase.GAME_OVER
        assert endings == ["black checkmate"]

    def test_nothing_moves_after_game_over(self) -> None:
        ctrl = _controller(LADDER)
        ctrl.submit_move(MoveDraft((100, 2), (100, 3)))
        ctrl.apply_remote_move(MoveDraft((21, 5), (21, 0)), "black checkmate")
        assert ctrl.apply_remote_move(MoveDraft((0, 0), (1, 0))) == "Game is already over."
        assert not ctrl.submit_move(MoveDraft((100, 3), (100, 4)))
        assert not ctrl.undo_move()

    def test_review_after_game_over_keeps_phase(self) -> None:
        ctrl = _controller(LADDER)
        ctrl.submit_move(MoveDraft((100, 2), (100, 3)))
        ctrl.apply_remote_move(MoveDraft((21, 5), (21, 0)), "black checkmate")
        ctrl.jump_to(-1)
        assert ctrl.phase == GamePhase.GAME_OVER

    def test_conclude(self) -> None:
        ctrl = _controller()
        endings: list[str] = []
        ctrl.events.on_game_over.append(endings.append)
        ctrl.conclude("black resignation")
        ctrl.conclude("white time")
        assert ctrl.conclusion == "black resignation"
        assert ctrl.is_game_over
        assert endings == ["black resignation"]
