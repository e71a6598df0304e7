from src.team_builder.drag_controller import (
    DragCancel,
    DragController,
    DragEnd,
    DragOver,
    DragStart,
    PoolPlayerPayload,
    SlotPlayerPayload,
)
from src.team_builder.errors import (
    DataUnavailable,
    DropRejected,
    PersistenceFailure,
    RosterLockedError,
    SessionClosed,
    TeamBuilderError,
    TransferLimitExceeded,
    TransferWindowClosed,
    ValidationError,
)
from src.team_builder.events import EventChannel
from src.team_builder.models import (
    DraftRosterPlayer,
    Player,
    RosterConfig,
    Snapshot,
    TransferWindowConfig,
)
from src.team_builder.navigation_guard import NavigationGuard
from src.team_builder.roster_manager import RosterStateManager
from src.team_builder.roster_validator import RosterValidator, Violation, ViolationKind
from src.team_builder.session import TeamBuilderSession
from src.team_builder.snapshot_store import JsonSnapshotStore
from src.team_builder.transfers import TransferSet, compute_transfers

__all__ = [
    "DataUnavailable",
    "DragCancel",
    "DragController",
    "DragEnd",
    "DragOver",
    "DragStart",
    "DraftRosterPlayer",
    "DropRejected",
    "EventChannel",
    "JsonSnapshotStore",
    "NavigationGuard",
    "PersistenceFailure",
    "Player",
    "PoolPlayerPayload",
    "RosterConfig",
    "RosterLockedError",
    "RosterStateManager",
    "RosterValidator",
    "SessionClosed",
    "SlotPlayerPayload",
    "Snapshot",
    "TeamBuilderError",
    "TeamBuilderSession",
    "TransferLimitExceeded",
    "TransferSet",
    "TransferWindowClosed",
    "TransferWindowConfig",
    "ValidationError",
    "Violation",
    "ViolationKind",
    "compute_transfers",
]
