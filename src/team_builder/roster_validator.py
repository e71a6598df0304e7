"""Roster validation against composition and budget rules."""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from src.team_builder.models import DraftRosterPlayer, Player, RosterConfig


class ViolationKind(str, Enum):
    """Violation kinds, declared in the order they are reported."""

    DUPLICATE_PLAYER = "duplicate_player"
    SLOT_OVERFLOW = "slot_overflow"
    BENCH_OVERFLOW = "bench_overflow"
    MISSING_CAPTAIN = "missing_captain"
    MULTIPLE_CAPTAINS = "multiple_captains"
    CAPTAIN_BENCHED = "captain_benched"
    BUDGET_EXCEEDED = "budget_exceeded"


@dataclass(frozen=True)
class Violation:
    """A named reason a roster fails validation."""

    kind: ViolationKind
    message: str
    player_id: Optional[str] = None
    position: Optional[str] = None


def build_value_lookup(players: Iterable[Player]) -> Dict[str, float]:
    """Map player_id -> current-week value."""
    return {p.player_id: p.current_value for p in players}


def roster_value(
    roster: Sequence[DraftRosterPlayer], value_lookup: Mapping[str, float]
) -> float:
    """Total current value of every entry, benched players included."""
    return sum(value_lookup.get(p.player_id, 0.0) for p in roster)


def validate(
    roster: Sequence[DraftRosterPlayer],
    config: RosterConfig,
    value_lookup: Mapping[str, float],
) -> List[Violation]:
    """
    Validate a candidate roster.

    Every check runs so the caller always sees the complete, stably ordered
    list. An empty list means the roster is valid.
    """
    violations: List[Violation] = []

    # 1. Duplicates
    id_counts = Counter(p.player_id for p in roster)
    for player_id, count in id_counts.items():
        if count > 1:
            violations.append(
                Violation(
                    ViolationKind.DUPLICATE_PLAYER,
                    f"Player {player_id} appears {count} times",
                    player_id=player_id,
                )
            )

    # 2. Starting slots, configured positions first
    starting_counts = Counter(p.slot for p in roster if not p.is_benched)
    positions = list(config.slot_capacity)
    positions.extend(pos for pos in starting_counts if pos not in config.slot_capacity)
    for position in positions:
        count = starting_counts.get(position, 0)
        capacity = config.get_slot_capacity(position)
        if count > capacity:
            violations.append(
                Violation(
                    ViolationKind.SLOT_OVERFLOW,
                    f"Too many {position} players in starting lineup "
                    f"(have {count}, max {capacity})",
                    position=position,
                )
            )

    # 3. Bench
    bench_count = sum(1 for p in roster if p.is_benched)
    if bench_count > config.bench_capacity:
        violations.append(
            Violation(
                ViolationKind.BENCH_OVERFLOW,
                f"Too many players on bench "
                f"(have {bench_count}, max {config.bench_capacity})",
            )
        )

    # 4-6. Captaincy
    captains = [p for p in roster if p.is_captain]
    if roster and not any(not p.is_benched for p in captains):
        violations.append(
            Violation(ViolationKind.MISSING_CAPTAIN, "Must have a captain in the starting lineup")
        )
    if len(captains) > 1:
        violations.append(
            Violation(
                ViolationKind.MULTIPLE_CAPTAINS,
                f"Must have exactly one captain, found {len(captains)}",
            )
        )
    for captain in captains:
        if captain.is_benched:
            violations.append(
                Violation(
                    ViolationKind.CAPTAIN_BENCHED,
                    f"Captain {captain.player_id} cannot be on the bench",
                    player_id=captain.player_id,
                )
            )

    # 7. Budget
    total = roster_value(roster, value_lookup)
    if total > config.budget:
        violations.append(
            Violation(
                ViolationKind.BUDGET_EXCEEDED,
                f"Team value exceeds budget: {total:.2f} / {config.budget:.2f}",
            )
        )

    return violations


class RosterValidator:
    """Validates rosters against one RosterConfig."""

    def __init__(self, roster_config: RosterConfig):
        self.roster_config = roster_config

    def validate(
        self,
        roster: Sequence[DraftRosterPlayer],
        value_lookup: Mapping[str, float],
    ) -> List[Violation]:
        return validate(roster, self.roster_config, value_lookup)

    def is_position_full(
        self, roster: Sequence[DraftRosterPlayer], position: str
    ) -> bool:
        """Whether position's starting slots and the bench are both full."""
        starting = sum(1 for p in roster if p.slot == position and not p.is_benched)
        benched = sum(1 for p in roster if p.is_benched)
        return (
            starting >= self.roster_config.get_slot_capacity(position)
            and benched >= self.roster_config.bench_capacity
        )

    def get_roster_summary(
        self, roster: Sequence[DraftRosterPlayer]
    ) -> Dict[str, Dict]:
        """Generate summary of the roster's slot usage."""
        summary = {}

        for position, capacity in self.roster_config.slot_capacity.items():
            filled = sum(
                1 for p in roster if p.slot == position and not p.is_benched
            )
            summary[position] = {
                "filled": filled,
                "capacity": capacity,
                "remaining": max(0, capacity - filled),
            }

        benched = sum(1 for p in roster if p.is_benched)
        summary["bench"] = {
            "filled": benched,
            "capacity": self.roster_config.bench_capacity,
            "remaining": max(0, self.roster_config.bench_capacity - benched),
        }

        return summary
