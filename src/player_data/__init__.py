from src.player_data.cleaning import PlayerCleaner
from src.player_data.directory import CsvPlayerDirectory
from src.player_data.ingestion import IngestionError, PlayerCsvIngester

__all__ = [
    "CsvPlayerDirectory",
    "IngestionError",
    "PlayerCleaner",
    "PlayerCsvIngester",
]
