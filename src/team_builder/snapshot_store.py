"""Snapshot store - save and load committed rosters to/from JSON files."""

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from src.team_builder.config import SNAPSHOTS_DIR
from src.team_builder.errors import DataUnavailable, PersistenceFailure
from src.team_builder.models import DraftRosterPlayer, Snapshot
from src.team_builder.transfers import TransferSet
from src.team_builder.weeks import is_before, week_number

logger = logging.getLogger(__name__)


class JsonSnapshotStore:
    """One JSON file per (team, week); each save replaces the file.

    Serves as both the snapshot loader and the persistence collaborator.
    Weeks are ordered by the optional schedule (week ids in season order),
    otherwise by the number at the end of the week id.
    """

    def __init__(
        self,
        storage_dir: Optional[Path] = None,
        weeks: Optional[Sequence[str]] = None,
    ):
        self.storage_dir = storage_dir or SNAPSHOTS_DIR
        self.weeks = list(weeks) if weeks is not None else None
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Collaborator interface
    # ------------------------------------------------------------------
    async def fetch_snapshot(self, team_id: str, week_id: str) -> Optional[Snapshot]:
        return self.load_snapshot(team_id, week_id)

    async def fetch_previous_snapshot(
        self, team_id: str, week_id: str
    ) -> Optional[Snapshot]:
        return self.load_previous_snapshot(team_id, week_id)

    async def save_roster(
        self,
        team_id: str,
        week_id: str,
        roster: Sequence[DraftRosterPlayer],
        transfers: Optional[TransferSet] = None,
        total_value: float = 0.0,
    ) -> Snapshot:
        snapshot = Snapshot.create(
            week_id=week_id,
            team_id=team_id,
            players=list(roster),
            transfers_used=transfers.transfers_used if transfers else 0,
            total_value=total_value,
        )
        self.save_snapshot(snapshot)
        return snapshot

    # ------------------------------------------------------------------
    # File operations
    # ------------------------------------------------------------------
    def save_snapshot(self, snapshot: Snapshot) -> Path:
        """Write snapshot atomically.

        Returns:
            Path to the saved file.
        """
        filepath = self._path_for(snapshot.team_id, snapshot.week_id)
        tmp_path = filepath.with_suffix(".json.tmp")

        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._snapshot_to_dict(snapshot), f, indent=2)
            os.replace(tmp_path, filepath)
        except OSError as e:
            logger.warning("Failed to save snapshot to %s: %s", filepath, e)
            raise PersistenceFailure(f"Could not save roster: {e}") from e

        logger.info(
            "Saved snapshot %s (team %s, week %s, %d players) to %s",
            snapshot.snapshot_id,
            snapshot.team_id,
            snapshot.week_id,
            len(snapshot.players),
            filepath,
        )
        return filepath

    def load_snapshot(self, team_id: str, week_id: str) -> Optional[Snapshot]:
        """Load the snapshot for (team, week).

        Returns:
            Snapshot if found, None if the team has never saved this week.

        Raises:
            DataUnavailable: the file exists but cannot be read.
        """
        filepath = self._path_for(team_id, week_id)

        if not filepath.exists():
            logger.debug("No snapshot for team %s week %s", team_id, week_id)
            return None

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
            return self._dict_to_snapshot(data)
        except (json.JSONDecodeError, OSError, KeyError, TypeError) as e:
            logger.warning("Corrupt snapshot file %s: %s", filepath, e)
            raise DataUnavailable(f"Could not read snapshot for week {week_id}") from e

    def load_previous_snapshot(self, team_id: str, week_id: str) -> Optional[Snapshot]:
        """Load the team's most recent snapshot from a week before week_id.

        Returns:
            Snapshot if the team saved in any earlier week, else None.

        Raises:
            DataUnavailable: week_id cannot be placed in the season, or the
                snapshot file cannot be read.
        """
        if week_number(week_id, self.weeks) is None:
            raise DataUnavailable(f"Unknown week {week_id}")

        earlier = [
            s["week_id"]
            for s in self.list_snapshots(team_id)
            if is_before(s["week_id"], week_id, self.weeks)
        ]
        if not earlier:
            logger.debug("No snapshot for team %s before week %s", team_id, week_id)
            return None

        latest = max(earlier, key=lambda w: week_number(w, self.weeks))
        return self.load_snapshot(team_id, latest)

    def list_snapshots(self, team_id: str) -> List[Dict]:
        """List a team's snapshots with metadata, most recent first."""
        snapshots = []

        for filepath in self.storage_dir.glob(f"snapshot_{team_id}_*.json"):
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = json.load(f)

                if data["team_id"] != team_id:
                    continue
                snapshots.append(
                    {
                        "snapshot_id": data["snapshot_id"],
                        "week_id": data["week_id"],
                        "created_at": data["created_at"],
                        "player_count": len(data.get("players", [])),
                        "transfers_used": data.get("transfers_used", 0),
                    }
                )
            except (json.JSONDecodeError, OSError, KeyError, TypeError) as e:
                logger.warning("Skipping corrupt snapshot file %s: %s", filepath, e)
                continue

        return sorted(snapshots, key=lambda x: x["created_at"], reverse=True)

    def _path_for(self, team_id: str, week_id: str) -> Path:
        return self.storage_dir / f"snapshot_{team_id}_{week_id}.json"

    def _snapshot_to_dict(self, snapshot: Snapshot) -> Dict:
        """Convert Snapshot to JSON-serializable dict."""
        return {
            "snapshot_id": snapshot.snapshot_id,
            "week_id": snapshot.week_id,
            "team_id": snapshot.team_id,
            "created_at": snapshot.created_at,
            "transfers_used": snapshot.transfers_used,
            "total_value": snapshot.total_value,
            "players": [
                {
                    "player_id": p.player_id,
                    "slot": p.slot,
                    "is_benched": p.is_benched,
                    "is_captain": p.is_captain,
                }
                for p in snapshot.players
            ],
        }

    def _dict_to_snapshot(self, data: Dict) -> Snapshot:
        """Reconstruct Snapshot from dict."""
        players = tuple(
            DraftRosterPlayer(
                player_id=pd["player_id"],
                slot=pd["slot"],
                is_benched=pd.get("is_benched", False),
                is_captain=pd.get("is_captain", False),
            )
            for pd in data["players"]
        )
        return Snapshot(
            snapshot_id=data["snapshot_id"],
            week_id=data["week_id"],
            team_id=data["team_id"],
            players=players,
            created_at=data["created_at"],
            transfers_used=data.get("transfers_used", 0),
            total_value=data.get("total_value", 0.0),
        )
