"""Qt bridge that republishes a controller's change feed as signals."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from infinichess.core.enums import BoardChangeKind, Player
from infinichess.core.move import BoardChangeEvent
from infinichess.game.controller import GameController
from infinichess.game.interfaces import GamePhase


class ChangeFeedBridge(QObject):
    """Thread-affine adapter between a :class:`GameController` and Qt views.

    Renderers connect to the piece signals to keep per-type slot buffers in
    sync; ``piece_moved`` carries the piece at its new square and the square
    it left.
    """

    piece_added = pyqtSignal(object)
    piece_removed = pyqtSignal(object)
    piece_moved = pyqtSignal(object, object)
    turn_flipped = pyqtSignal(int)
    phase_changed = pyqtSignal(int)
    game_over = pyqtSignal(str)

    __slots__ = ("_controller",)

    def __init__(self, controller: GameController) -> None:
        super().__init__()
        self._controller = controller
        events = controller.events
        events.on_board_change.append(self._on_board_change)
        events.on_turn_flipped.append(self._on_turn_flipped)
        events.on_phase_changed.append(self._on_phase_changed)
        events.on_game_over.append(self._on_game_over)

    @pyqtSlot(int)
    def jump_to(self, index: int) -> None:
        """Navigate the controller's history (e.g. from a move list view)."""
        self._controller.jump_to(index)

    @pyqtSlot()
    def detach(self) -> None:
        """Stop listening to the controller."""
        events = self._controller.events
        events.on_board_change.remove(self._on_board_change)
        events.on_turn_flipped.remove(self._on_turn_flipped)
        events.on_phase_changed.remove(self._on_phase_changed)
        events.on_game_over.remove(self._on_game_over)

    def _on_board_change(self, event: BoardChangeEvent) -> None:
        if event.kind == BoardChangeKind.ADDED:
            self.piece_added.emit(event.piece)
        elif event.kind == BoardChangeKind.REMOVED:
            self.piece_removed.emit(event.piece)
        else:
            self.piece_moved.emit(event.piece, event.previous_coords)

    def _on_turn_flipped(self, player: Player) -> None:
        self.turn_flipped.emit(int(player))

    def _on_phase_changed(self, phase: GamePhase) -> None:
        self.phase_changed.emit(int(phase))

    def _on_game_over(self, conclusion: str) -> None:
        self.game_over.emit(conclusion)
