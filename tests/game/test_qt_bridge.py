"""Tests for the Qt change-feed bridge."""

from __future__ import annotations

import pytest
from PyQt6.QtTest import QSignalSpy

from infinichess.core.enums import Player
from infinichess.core.move import MoveDraft
from infinichess.core.piece import Piece
from infinichess.core.types import Coords
from infinichess.game.controller import GameController
from infinichess.game.interfaces import GamePhase
from infinichess.game.qt_bridge import ChangeFeedBridge

pytestmark = pytest.mark.usefixtures("qapp")


def _bridged(position: str | None = None) -> tuple[GameController, ChangeFeedBridge]:
    ctrl = GameController()
    bridge = ChangeFeedBridge(ctrl)
    ctrl.new_game(position=position)
    return ctrl, bridge


def _collect_moves(bridge: ChangeFeedBridge) -> list[tuple[Piece, Coords]]:
    moves: list[tuple[Piece, Coords]] = []
    bridge.piece_moved.connect(lambda piece, previous: moves.append((piece, previous)))
    return moves


def _collect(signal) -> list[Piece]:
    pieces: list[Piece] = []
    signal.connect(pieces.append)
    return pieces


class TestChangeFeedBridge:
    def test_move_signal(self) -> None:
        ctrl, bridge = _bridged()
        moves = _collect_moves(bridge)

        ctrl.submit_move(MoveDraft((5, 2), (5, 4)))

        assert len(moves) == 1
        piece, previous = moves[0]
        assert piece.coords == (5, 4)
        assert previous == (5, 2)

    def test_capture_signals(self) -> None:
        ctrl, bridge = _bridged("K1,1|R5,5|n5,9|k20,20")
        removed = _collect(bridge.piece_removed)
        added = QSignalSpy(bridge.piece_added)
        moved = QSignalSpy(bridge.piece_moved)

        ctrl.submit_move(MoveDraft((5, 5), (5, 9)))

        assert [piece.coords for piece in removed] == [(5, 9)]
        assert len(moved) == 1
        assert len(added) == 0

    def test_navigation_signals(self) -> None:
        # Enough material is left after the capture for the game to go on.
        ctrl, bridge = _bridged("K1,1|Q2,3|R5,5|n5,9|k20,20")
        ctrl.submit_move(MoveDraft((5, 5), (5, 9)))
        added = _collect(bridge.piece_added)
        phases = QSignalSpy(bridge.phase_changed)

        bridge.jump_to(-1)

        assert [piece.coords for piece in added] == [(5, 9)]
        assert len(phases) == 1
        assert phases[0][0] == int(GamePhase.REVIEWING)

    def test_turn_signal(self) -> None:
        ctrl, bridge = _bridged()
        turns = QSignalSpy(bridge.turn_flipped)

        ctrl.submit_move(MoveDraft((5, 2), (5, 4)))

        assert len(turns) == 1
        assert turns[0][0] == int(Player.BLACK)

    def test_game_over_signal(self) -> None:
        ctrl, bridge = _bridged()
        over = QSignalSpy(bridge.game_over)

        ctrl.conclude("white resignation")

        assert len(over) == 1
        assert over[0][0] == "white resignation"

    def test_detach(self) -> None:
        ctrl, bridge = _bridged()
        moved = QSignalSpy(bridge.piece_moved)

        bridge.detach()
        ctrl.submit_move(MoveDraft((5, 2), (5, 4)))

        assert len(moved) == 0
        assert ctrl.events.on_board_change == []
