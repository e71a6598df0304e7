from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
SNAPSHOTS_DIR = PROJECT_ROOT / "data" / "snapshots"

# Positions in lineup order
POSITIONS = ("handler", "cutter", "receiver")

# Default starting-lineup capacity per position
DEFAULT_SLOT_CAPACITY = {
    "handler": 3,
    "cutter": 2,
    "receiver": 2,
}

# One bench spot per position
DEFAULT_BENCH_CAPACITY = 3

# Default team budget (salary cap)
DEFAULT_BUDGET = 450.0

# Transfers allowed per week after the first week
MAX_TRANSFERS_PER_WEEK = 2
