"""Core domain layer — infinite-chess rules with no external dependencies.

Quick start::

    from infinichess.core import Game, MoveDraft, MoveGenerator

    game = Game.classical()
    gen = MoveGenerator(game)
    legal = gen.calculate(game.board.piece_at((7, 1)))
    game.make_move_from_draft(MoveDraft((7, 1), (6, 3)), do_game_over_checks=True)
"""

from infinichess.core.attacks import (
    Attacker,
    CheckResult,
    detect_check,
    is_square_attacked,
)
from infinichess.core.board import Board, SlotArena
from infinichess.core.enums import (
    BlockResult,
    BoardChangeKind,
    Player,
    RawType,
    SpecialCategory,
    WinCondition,
)
from infinichess.core.game import Game, SimulationResult
from infinichess.core.game_end import get_game_conclusion, is_conclusion_decisive
from infinichess.core.move import BoardChangeEvent, CastleTag, EnPassant, Move, MoveDraft
from infinichess.core.move_generator import (
    LegalMoves,
    MoveGenerator,
    MoveTarget,
    is_opponents_move_legal,
    normalize_draft,
)
from infinichess.core.movesets import Moveset, default_movesets
from infinichess.core.piece import Piece, PieceType
from infinichess.core.rules import GameRules
from infinichess.core.types import Coords, Vec2, line_key
from infinichess.core.variants import (
    classical_position,
    position_from_string,
    position_to_string,
)

__all__ = [
    # Enums
    "BlockResult",
    "BoardChangeKind",
    "Player",
    "RawType",
    "SpecialCategory",
    "WinCondition",
    # Types / helpers
    "Coords",
    "Vec2",
    "line_key",
    # Domain objects
    "Attacker",
    "Board",
    "BoardChangeEvent",
    "CastleTag",
    "CheckResult",
    "EnPassant",
    "Game",
    "GameRules",
    "LegalMoves",
    "Move",
    "MoveDraft",
    "MoveGenerator",
    "MoveTarget",
    "Moveset",
    "Piece",
    "PieceType",
    "SimulationResult",
    "SlotArena",
    # Operations
    "default_movesets",
    "detect_check",
    "get_game_conclusion",
    "is_conclusion_decisive",
    "is_opponents_move_legal",
    "is_square_attacked",
    "normalize_draft",
    # Variants
    "classical_position",
    "position_from_string",
    "position_to_string",
]
