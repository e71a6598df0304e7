"""Data cleaning for player CSV data.

- Normalize positions (H -> handler, Cutter -> cutter)
- Normalize player names
- Resolve each player's value for a given week from weekly values
"""

import logging
from typing import Dict, Optional, Sequence

import pandas as pd

from src.team_builder.config import POSITIONS
from src.team_builder.weeks import week_number

logger = logging.getLogger(__name__)

# Aliases that map to canonical position names
_POSITION_ALIASES = {
    "h": "handler",
    "c": "cutter",
    "r": "receiver",
    "handlers": "handler",
    "cutters": "cutter",
    "receivers": "receiver",
}


class PlayerCleaner:
    """Cleans and standardizes player data."""

    @staticmethod
    def normalize_position(pos_str: str) -> Optional[str]:
        """Map a raw position to its canonical name, None if unknown.

        Examples:
            "Handler" -> "handler"
            "C"       -> "cutter"
            "goalie"  -> None
        """
        if pd.isna(pos_str):
            return None

        pos = str(pos_str).strip().lower()
        canonical = _POSITION_ALIASES.get(pos, pos)
        return canonical if canonical in POSITIONS else None

    @staticmethod
    def normalize_player_name(name: str) -> Optional[str]:
        """Strip quotes, standardize apostrophes and collapse whitespace."""
        if pd.isna(name):
            return None

        name = str(name).strip().strip('"')
        if name == "":
            return None

        name = name.replace("’", "'").replace("‘", "'")
        return " ".join(name.split())

    def clean_players(self, df: pd.DataFrame) -> pd.DataFrame:
        """Normalize positions and names, dropping rows that cannot be used."""
        out = df.copy()
        out["position"] = out["position"].apply(self.normalize_position)
        out["name"] = out["name"].apply(self.normalize_player_name)

        invalid = out["position"].isna() | out["name"].isna()
        if invalid.any():
            logger.warning(
                "Dropping %d players with unknown position or blank name: %s",
                int(invalid.sum()),
                ", ".join(out.loc[invalid, "player_id"].astype(str)),
            )
            out = out[~invalid]

        dupes = out["player_id"].duplicated(keep="first")
        if dupes.any():
            logger.warning("Dropping %d duplicate player rows", int(dupes.sum()))
            out = out[~dupes]

        out = out.reset_index(drop=True)
        logger.info("Cleaned players: %d rows", len(out))
        return out

    @staticmethod
    def current_values(
        values: Optional[pd.DataFrame],
        week_id: Optional[str] = None,
        schedule: Optional[Sequence[str]] = None,
    ) -> Dict[str, float]:
        """Value per player as of week_id.

        Each player gets their value for week_id, or failing that their value
        for the latest earlier week. Later weeks are ignored. Without a
        week_id the last row per player in the file wins. Players with no
        usable row are absent (callers fall back to the starting value).
        """
        if values is None or values.empty:
            return {}
        if week_id is None:
            latest = values.drop_duplicates(subset=["player_id"], keep="last")
            return dict(zip(latest["player_id"], latest["value"].astype(float)))

        target = week_number(week_id, schedule)
        if target is None:
            logger.warning("Cannot order week %s; using its own values only", week_id)
            upto = values[values["week_id"] == week_id]
        else:
            numbers = pd.to_numeric(
                values["week_id"].map(lambda w: week_number(w, schedule)),
                errors="coerce",
            )
            upto = values.assign(_week=numbers)
            upto = upto[upto["_week"].notna() & (upto["_week"] <= target)]
            upto = upto.sort_values("_week", kind="stable")

        latest = upto.drop_duplicates(subset=["player_id"], keep="last")
        return dict(zip(latest["player_id"], latest["value"].astype(float)))
