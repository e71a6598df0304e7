"""Drag interaction state: tracks the payload of the gesture in flight."""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from src.team_builder.models import DraftRosterPlayer, Player

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolPlayerPayload:
    """A player dragged from the pool, not yet on the roster."""

    player: Player


@dataclass(frozen=True)
class SlotPlayerPayload:
    """A player dragged out of a roster slot."""

    player: Player
    slot_player: DraftRosterPlayer
    drop_id: Optional[str] = None  # Drop zone the player was picked up from


DragPayload = Union[PoolPlayerPayload, SlotPlayerPayload]


@dataclass(frozen=True)
class DragStart:
    payload: DragPayload


@dataclass(frozen=True)
class DragOver:
    over: Optional[str] = None


@dataclass(frozen=True)
class DragEnd:
    over: Optional[str] = None  # Drop zone id, None when dropped outside


@dataclass(frozen=True)
class DragCancel:
    pass


class DragController:
    """Idle -> Dragging(payload) -> Idle.

    The controller only tracks what is being dragged. Applying a drop to
    the roster is the drop handler's job.
    """

    def __init__(self):
        self.active_player: Optional[Player] = None
        self.active_slot_player: Optional[DraftRosterPlayer] = None
        self._payload: Optional[DragPayload] = None

    @property
    def is_dragging(self) -> bool:
        return self._payload is not None

    @property
    def payload(self) -> Optional[DragPayload]:
        return self._payload

    def drag_start(self, event: DragStart):
        if self._payload is not None:
            logger.warning(
                "Drag started while %s was still in flight; replacing payload",
                self.active_player.player_id if self.active_player else None,
            )

        payload = event.payload
        if isinstance(payload, PoolPlayerPayload):
            self.active_player = payload.player
            self.active_slot_player = None
        elif isinstance(payload, SlotPlayerPayload):
            self.active_player = payload.player
            self.active_slot_player = payload.slot_player
        else:
            raise TypeError(f"Unknown drag payload: {payload!r}")
        self._payload = payload

    def drag_over(self, event: DragOver):
        # Over-state feedback is derived from active_player alone
        pass

    def drag_end(self, event: DragEnd) -> Optional[DragPayload]:
        """Finish the gesture and hand back its payload for the drop handler."""
        payload = self._payload
        self._clear()
        return payload

    def drag_cancel(self, event: Optional[DragCancel] = None):
        self._clear()

    def _clear(self):
        self.active_player = None
        self.active_slot_player = None
        self._payload = None
