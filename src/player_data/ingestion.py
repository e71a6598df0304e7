"""CSV ingestion for the player pool.

Reads two files from a data directory:
- players.csv: one row per player with its season starting value
- player_values.csv (optional): one row per player per week with the
  market value for that week
"""

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from src.player_data.config import (
    FILE_PATTERNS,
    OPTIONAL_PLAYER_COLUMNS,
    PLAYER_COLUMNS,
    VALUE_COLUMNS,
)

logger = logging.getLogger(__name__)


class IngestionError(Exception):
    """Raised when CSV ingestion fails."""


def _parse_money(value):
    """Parse a money string that may contain "$" or commas ("$1,250" -> 1250.0)."""
    if pd.isna(value):
        return value
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value).replace(",", "").replace("$", "").strip().strip('"')
    if s == "":
        return float("nan")
    try:
        return float(s)
    except ValueError:
        return float("nan")


class PlayerCsvIngester:
    """Reads player CSV exports into pandas DataFrames."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _resolve_path(self, file_key: str) -> Path:
        return self.data_dir / FILE_PATTERNS[file_key]

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------
    def read_players(self) -> pd.DataFrame:
        """Read the player list.

        Returns DataFrame with columns:
            player_id, name, position, team_id, starting_value,
            draft_order, role
        """
        filepath = self._resolve_path("players")
        if not filepath.exists():
            raise IngestionError(f"Expected file not found: {filepath}")
        logger.info("Reading players: %s", filepath.name)

        df = pd.read_csv(filepath, dtype={"player_id": str, "team_id": str})

        missing = [c for c in PLAYER_COLUMNS if c not in df.columns]
        if missing:
            raise IngestionError(f"{filepath.name} is missing columns: {missing}")
        for col in OPTIONAL_PLAYER_COLUMNS:
            if col not in df.columns:
                df[col] = pd.NA

        df = self._strip_strings(df)
        df["starting_value"] = df["starting_value"].apply(_parse_money)
        df["draft_order"] = pd.to_numeric(df["draft_order"], errors="coerce")

        df = df[df["player_id"].notna() & (df["player_id"] != "")]
        df = df.reset_index(drop=True)

        logger.info("Loaded %d players", len(df))
        return df

    # ------------------------------------------------------------------
    # Weekly values
    # ------------------------------------------------------------------
    def read_player_values(self) -> Optional[pd.DataFrame]:
        """Read weekly player values, or None when the file is absent.

        Returns DataFrame with columns: player_id, week_id, value
        """
        filepath = self._resolve_path("values")
        if not filepath.exists():
            logger.info("No weekly values file; using starting values")
            return None
        logger.info("Reading player values: %s", filepath.name)

        df = pd.read_csv(filepath, dtype={"player_id": str, "week_id": str})

        missing = [c for c in VALUE_COLUMNS if c not in df.columns]
        if missing:
            raise IngestionError(f"{filepath.name} is missing columns: {missing}")

        df = self._strip_strings(df)
        df["value"] = df["value"].apply(_parse_money)
        df = df.dropna(subset=["player_id", "value"]).reset_index(drop=True)

        logger.info("Loaded %d weekly values", len(df))
        return df

    def read_all(self) -> dict:
        """Read both files.

        Returns:
            dict with keys: 'players', 'values' ('values' may be None)

        Raises:
            IngestionError: if any file cannot be read.
        """
        try:
            return {
                "players": self.read_players(),
                "values": self.read_player_values(),
            }
        except IngestionError:
            raise
        except Exception as e:
            raise IngestionError(f"Failed to read CSV files: {e}") from e

    @staticmethod
    def _strip_strings(df: pd.DataFrame) -> pd.DataFrame:
        for col in df.select_dtypes(include=["object", "str"]).columns:
            df[col] = df[col].str.strip('"').str.strip()
        return df
