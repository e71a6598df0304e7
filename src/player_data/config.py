from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
PLAYERS_DATA_DIR = DATA_DIR / "players"

# CSV file names
FILE_PATTERNS = {
    "players": "players.csv",
    "values": "player_values.csv",
}

# Required columns per file
PLAYER_COLUMNS = ["player_id", "name", "position", "team_id", "starting_value"]
OPTIONAL_PLAYER_COLUMNS = ["draft_order", "role"]
VALUE_COLUMNS = ["player_id", "week_id", "value"]
