"""Interfaces of the external collaborators the team builder talks to."""

from typing import List, Optional, Protocol, Sequence

from src.team_builder.models import DraftRosterPlayer, Player, Snapshot
from src.team_builder.transfers import TransferSet


class SnapshotLoader(Protocol):
    async def fetch_snapshot(self, team_id: str, week_id: str) -> Optional[Snapshot]:
        """Committed snapshot for (team, week), None if the team has none.

        Raises DataUnavailable when the fetch itself fails.
        """
        ...

    async def fetch_previous_snapshot(
        self, team_id: str, week_id: str
    ) -> Optional[Snapshot]:
        """Most recent snapshot from a week before week_id.

        Weeks the team skipped are passed over. None means the team has
        never saved before this week. Raises DataUnavailable.
        """
        ...


class PlayerDirectory(Protocol):
    async def fetch_players(self, team_id: str, week_id: str) -> List[Player]:
        """Player pool valued for week_id. Raises DataUnavailable."""
        ...


class Persistence(Protocol):
    async def save_roster(
        self,
        team_id: str,
        week_id: str,
        roster: Sequence[DraftRosterPlayer],
        transfers: Optional[TransferSet] = None,
        total_value: float = 0.0,
    ) -> Snapshot:
        """Commit roster and return the new snapshot. Raises PersistenceFailure."""
        ...
