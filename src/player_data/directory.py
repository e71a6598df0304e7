"""CSV-backed player directory."""

import logging
import math
from typing import List, Optional, Sequence

import pandas as pd

from src.player_data.cleaning import PlayerCleaner
from src.player_data.ingestion import IngestionError, PlayerCsvIngester
from src.team_builder.errors import DataUnavailable
from src.team_builder.models import Player

logger = logging.getLogger(__name__)


def _safe(val, default=None):
    """Return *default* when *val* is NaN/None/pd.NA, else the value."""
    if val is None or val is pd.NA:
        return default
    if isinstance(val, float) and math.isnan(val):
        return default
    return val


class CsvPlayerDirectory:
    """Serves the player pool from CSV files.

    A player's current value is their value for the requested week (or the
    latest earlier week), falling back to the starting value.
    """

    def __init__(
        self,
        ingester: PlayerCsvIngester,
        cleaner: Optional[PlayerCleaner] = None,
        weeks: Optional[Sequence[str]] = None,
    ):
        self.ingester = ingester
        self.cleaner = cleaner or PlayerCleaner()
        self.weeks = list(weeks) if weeks is not None else None

    async def fetch_players(
        self, team_id: str, week_id: Optional[str] = None
    ) -> List[Player]:
        return self.load_players(week_id)

    def load_players(self, week_id: Optional[str] = None) -> List[Player]:
        """Read, clean and convert the player pool, valued as of week_id.

        Raises:
            DataUnavailable: if the CSV files cannot be read.
        """
        try:
            raw = self.ingester.read_all()
        except IngestionError as e:
            logger.warning("Player data unavailable: %s", e)
            raise DataUnavailable(f"Player data unavailable: {e}") from e

        players_df = self.cleaner.clean_players(raw["players"])
        values = self.cleaner.current_values(raw["values"], week_id, self.weeks)

        players = [self._row_to_player(row, values) for _, row in players_df.iterrows()]
        logger.info("Player directory loaded %d players", len(players))
        return players

    @staticmethod
    def _row_to_player(row: pd.Series, values: dict) -> Player:
        starting_value = _safe(row.get("starting_value"), 0.0)
        draft_order = _safe(row.get("draft_order"))
        return Player(
            player_id=str(row["player_id"]),
            name=row["name"],
            position=row["position"],
            current_value=float(values.get(row["player_id"], starting_value)),
            team_id=_safe(row.get("team_id")),
            starting_value=float(starting_value),
            draft_order=int(draft_order) if draft_order is not None else None,
            role=_safe(row.get("role")),
        )
