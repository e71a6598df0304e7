"""Team builder data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional, Tuple
import uuid

from src.team_builder.config import (
    DEFAULT_BENCH_CAPACITY,
    DEFAULT_BUDGET,
    DEFAULT_SLOT_CAPACITY,
    MAX_TRANSFERS_PER_WEEK,
)


@dataclass
class Player:
    """A player in the pool, with its value for the current week."""

    player_id: str
    name: str
    position: str
    current_value: float
    team_id: Optional[str] = None
    starting_value: Optional[float] = None
    draft_order: Optional[int] = None
    role: Optional[str] = None


@dataclass(frozen=True)
class DraftRosterPlayer:
    """One entry of a roster: which player sits in which slot."""

    player_id: str
    slot: str
    is_benched: bool = False
    is_captain: bool = False

    def placed(self, slot: str, is_benched: bool) -> "DraftRosterPlayer":
        """Copy of this entry moved to another placement."""
        return DraftRosterPlayer(
            player_id=self.player_id,
            slot=slot,
            is_benched=is_benched,
            is_captain=self.is_captain,
        )

    def with_captain(self, is_captain: bool) -> "DraftRosterPlayer":
        return DraftRosterPlayer(
            player_id=self.player_id,
            slot=self.slot,
            is_benched=self.is_benched,
            is_captain=is_captain,
        )


@dataclass(frozen=True)
class Snapshot:
    """Committed roster for one (team, week). Only created by a save."""

    snapshot_id: str
    week_id: str
    team_id: str
    players: Tuple[DraftRosterPlayer, ...]
    created_at: str
    transfers_used: int = 0
    total_value: float = 0.0

    @classmethod
    def create(
        cls,
        week_id: str,
        team_id: str,
        players: List[DraftRosterPlayer],
        transfers_used: int = 0,
        total_value: float = 0.0,
    ) -> "Snapshot":
        return cls(
            snapshot_id=str(uuid.uuid4()),
            week_id=week_id,
            team_id=team_id,
            players=tuple(players),
            created_at=datetime.now().isoformat(),
            transfers_used=transfers_used,
            total_value=total_value,
        )

    @property
    def player_ids(self) -> FrozenSet[str]:
        return frozenset(p.player_id for p in self.players)


@dataclass(frozen=True)
class RosterConfig:
    """Squad composition and budget rules."""

    slot_capacity: Dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_SLOT_CAPACITY)
    )
    bench_capacity: int = DEFAULT_BENCH_CAPACITY
    budget: float = DEFAULT_BUDGET
    max_transfers_per_week: int = MAX_TRANSFERS_PER_WEEK

    def get_slot_capacity(self, position: str) -> int:
        """Starting slots for position (0 for unknown positions)."""
        return self.slot_capacity.get(position, 0)


@dataclass(frozen=True)
class TransferWindowConfig:
    """Transfer window bounds and the users allowed to ignore them."""

    opens_at: datetime
    closes_at: datetime
    bypass_user_ids: FrozenSet[str] = frozenset()

    def __post_init__(self):
        if self.closes_at < self.opens_at:
            raise ValueError(
                f"closes_at ({self.closes_at.isoformat()}) must not be before "
                f"opens_at ({self.opens_at.isoformat()})"
            )
