"""Tests for GameRules."""

import pytest

from infinichess.core.enums import Player, RawType, WinCondition
from infinichess.core.rules import GameRules


class TestGameRules:
    def test_classical_defaults(self) -> None:
        rules = GameRules.classical()
        assert rules.players == (Player.WHITE, Player.BLACK)
        assert rules.opponent_uses(Player.WHITE, WinCondition.CHECKMATE)
        assert rules.move_rule == 100
        assert rules.is_promotion_rank(Player.WHITE, 8)
        assert rules.is_promotion_rank(Player.BLACK, 1)
        assert not rules.is_promotion_rank(Player.WHITE, 1)

    def test_turn_order(self) -> None:
        rules = GameRules()
        assert rules.whose_turn_at(-1) == Player.WHITE
        assert rules.whose_turn_at(0) == Player.BLACK
        assert rules.player_of_move(0) == Player.WHITE
        assert rules.player_of_move(3) == Player.BLACK

    def test_moves_twice(self) -> None:
        assert not GameRules().any_player_moves_twice()
        rules = GameRules(turn_order=(Player.WHITE, Player.BLACK, Player.BLACK))
        assert rules.any_player_moves_twice()
        assert rules.players == (Player.WHITE, Player.BLACK)

    def test_swap_checkmate(self) -> None:
        rules = GameRules.koth()
        rules.swap_checkmate_for_royal_capture()
        assert rules.win_conditions[Player.WHITE] == [
            WinCondition.KOTH,
            WinCondition.ROYALCAPTURE,
        ]

    def test_copy_is_independent(self) -> None:
        rules = GameRules()
        copy = rules.copy()
        copy.win_conditions[Player.WHITE].append(WinCondition.KOTH)
        assert rules.win_conditions[Player.WHITE] == [WinCondition.CHECKMATE]
        assert copy.promotions_allowed[Player.WHITE][0] == RawType.QUEEN

    def test_no_promotion(self) -> None:
        rules = GameRules(promotion_ranks=None)
        assert not rules.is_promotion_rank(Player.WHITE, 8)

    @pytest.mark.parametrize(
        "kwargs", [{"turn_order": ()}, {"move_rule": 0}, {"slide_limit": -1}]
    )
    def test_invalid(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ValueError):
            GameRules(**kwargs)
