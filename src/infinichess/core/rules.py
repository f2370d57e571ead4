"""Game rules — the per-game configuration of turn order and win conditions."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from infinichess.core.enums import Player, RawType, WinCondition

DEFAULT_PROMOTIONS: tuple[RawType, ...] = (
    RawType.QUEEN,
    RawType.ROOK,
    RawType.BISHOP,
    RawType.KNIGHT,
)


def _both(*conditions: WinCondition) -> dict[Player, list[WinCondition]]:
    return {Player.WHITE: list(conditions), Player.BLACK: list(conditions)}


@dataclass
class GameRules:
    """Rules of one game. Defaults describe classical infinite chess."""

    turn_order: tuple[Player, ...] = (Player.WHITE, Player.BLACK)
    win_conditions: dict[Player, list[WinCondition]] = field(
        default_factory=lambda: _both(WinCondition.CHECKMATE)
    )
    # None disables promotion entirely.
    promotion_ranks: dict[Player, tuple[int, ...]] | None = field(
        default_factory=lambda: {Player.WHITE: (8,), Player.BLACK: (1,)}
    )
    promotions_allowed: dict[Player, tuple[RawType, ...]] = field(
        default_factory=lambda: {
            Player.WHITE: DEFAULT_PROMOTIONS,
            Player.BLACK: DEFAULT_PROMOTIONS,
        }
    )
    move_rule: int | None = 100
    slide_limit: float = math.inf

    def __post_init__(self) -> None:
        if not self.turn_order:
            raise ValueError("turn_order cannot be empty")
        if self.move_rule is not None and self.move_rule <= 0:
            raise ValueError(f"move_rule must be positive, got {self.move_rule}")
        if self.slide_limit <= 0:
            raise ValueError(f"slide_limit must be positive, got {self.slide_limit}")

    # ── Presets ──────────────────────────────────────────────────────────

    @classmethod
    def classical(cls) -> GameRules:
        return cls()

    @classmethod
    def royal_capture(cls) -> GameRules:
        return cls(win_conditions=_both(WinCondition.ROYALCAPTURE))

    @classmethod
    def koth(cls) -> GameRules:
        return cls(win_conditions=_both(WinCondition.CHECKMATE, WinCondition.KOTH))

    @classmethod
    def three_check(cls) -> GameRules:
        return cls(
            win_conditions=_both(WinCondition.CHECKMATE, WinCondition.THREECHECK)
        )

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def players(self) -> tuple[Player, ...]:
        return tuple(dict.fromkeys(self.turn_order))

    def has_win_condition(self, player: Player, condition: WinCondition) -> bool:
        return condition in self.win_conditions.get(player, ())

    def opponent_uses(self, player: Player, condition: WinCondition) -> bool:
        """Whether any opponent of *player* can win by *condition*."""
        return any(
            self.has_win_condition(other, condition)
            for other in self.players
            if other != player
        )

    def whose_turn_at(self, move_index: int) -> Player:
        """Player to move after the move at *move_index* (-1 = start) was played."""
        return self.turn_order[(move_index + 1) % len(self.turn_order)]

    def player_of_move(self, move_index: int) -> Player:
        """Player who played the move at *move_index*."""
        return self.turn_order[move_index % len(self.turn_order)]

    def any_player_moves_twice(self) -> bool:
        order = self.turn_order
        return any(order[i] == order[(i + 1) % len(order)] for i in range(len(order)))

    def is_promotion_rank(self, player: Player, y: int) -> bool:
        if self.promotion_ranks is None:
            return False
        return y in self.promotion_ranks.get(player, ())

    # ── Mutation ─────────────────────────────────────────────────────────

    def swap_checkmate_for_royal_capture(self) -> None:
        for player, conditions in self.win_conditions.items():
            if WinCondition.CHECKMATE not in conditions:
                continue
            swapped = [c for c in conditions if c != WinCondition.CHECKMATE]
            if WinCondition.ROYALCAPTURE not in swapped:
                swapped.append(WinCondition.ROYALCAPTURE)
            self.win_conditions[player] = swapped

    def copy(self) -> GameRules:
        return GameRules(
            turn_order=tuple(self.turn_order),
            win_conditions={p: list(c) for p, c in self.win_conditions.items()},
            promotion_ranks=(
                None
                if self.promotion_ranks is None
                else dict(self.promotion_ranks)
            ),
            promotions_allowed=dict(self.promotions_allowed),
            move_rule=self.move_rule,
            slide_limit=self.slide_limit,
        )
