"""Report on a team's committed roster against current player values.

Usage:
    python -m src.team_builder.roster_report <team_id> <week_id> [players_dir] [snapshots_dir]

Examples:
    python -m src.team_builder.roster_report team-1 week-3
    python -m src.team_builder.roster_report team-1 week-3 /path/to/csvs /path/to/snapshots
"""

import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from src.logging_config import setup_logging
from src.player_data.config import PLAYERS_DATA_DIR
from src.player_data.directory import CsvPlayerDirectory
from src.player_data.ingestion import PlayerCsvIngester
from src.team_builder.config import SNAPSHOTS_DIR
from src.team_builder.errors import DataUnavailable
from src.team_builder.models import RosterConfig, TransferWindowConfig
from src.team_builder.roster_validator import RosterValidator, roster_value
from src.team_builder.session import TeamBuilderSession
from src.team_builder.snapshot_store import JsonSnapshotStore

logger = logging.getLogger(__name__)


def build_roster_report(
    team_id: str,
    week_id: str,
    players_dir: Optional[Path] = None,
    snapshots_dir: Optional[Path] = None,
    roster_config: Optional[RosterConfig] = None,
) -> Dict:
    """Load a team's roster and summarize its value, slots and violations.

    Raises:
        DataUnavailable: if the snapshot or player data cannot be read.
    """
    store = JsonSnapshotStore(snapshots_dir or SNAPSHOTS_DIR)
    directory = CsvPlayerDirectory(PlayerCsvIngester(players_dir or PLAYERS_DATA_DIR))
    roster_config = roster_config or RosterConfig()

    # Reporting never submits, so the window is irrelevant
    now = datetime.now(timezone.utc)
    session = TeamBuilderSession(
        team_id=team_id,
        week_id=week_id,
        loader=store,
        directory=directory,
        persistence=store,
        window_config=TransferWindowConfig(opens_at=now, closes_at=now),
        roster_config=roster_config,
    )

    try:
        loaded = asyncio.run(session.load())
        if not loaded:
            raise session.load_error or DataUnavailable("Roster could not be loaded")

        roster = session.draft_roster
        validator = RosterValidator(roster_config)
        snapshot = session.manager.snapshot
        return {
            "team_id": team_id,
            "week_id": week_id,
            "snapshot_id": snapshot.snapshot_id if snapshot else None,
            "player_count": len(roster),
            "team_value": round(roster_value(roster, session.value_lookup), 2),
            "budget": roster_config.budget,
            "slots": validator.get_roster_summary(roster),
            "violations": [v.message for v in session.violations],
        }
    finally:
        session.close()


if __name__ == "__main__":
    setup_logging()

    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(2)

    team_id, week_id = sys.argv[1], sys.argv[2]
    players_dir = Path(sys.argv[3]) if len(sys.argv) > 3 else None
    snapshots_dir = Path(sys.argv[4]) if len(sys.argv) > 4 else None

    try:
        report = build_roster_report(team_id, week_id, players_dir, snapshots_dir)
    except DataUnavailable:
        logger.exception("Roster report failed")
        sys.exit(1)

    print(f"Team {report['team_id']} / week {report['week_id']}")
    print(f"  Players: {report['player_count']}")
    print(f"  Value:   {report['team_value']:.2f} / {report['budget']:.2f}")
    for position, usage in report["slots"].items():
        print(f"  {position:<9} {usage['filled']}/{usage['capacity']}")
    if report["violations"]:
        print("  Violations:")
        for message in report["violations"]:
            print(f"    - {message}")
    else:
        print("  Roster is valid")
