"""Pure roster edit operations.

Each function takes a roster and returns a new list; the input is never
modified. Operations that cannot be applied raise DropRejected and leave
the caller's roster untouched.
"""

import re
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

from src.team_builder.drag_controller import DragPayload, SlotPlayerPayload
from src.team_builder.errors import DropRejected
from src.team_builder.models import DraftRosterPlayer, Player, RosterConfig

_DROP_ZONE_RE = re.compile(r"^(position|bench)-([a-z_]+)-(\d+)$")


@dataclass(frozen=True)
class DropTarget:
    """A placement on the pitch: position, index and field/bench."""

    position: str
    slot_index: int
    is_bench: bool = False

    @property
    def drop_id(self) -> str:
        prefix = "bench" if self.is_bench else "position"
        return f"{prefix}-{self.position}-{self.slot_index}"


def parse_drop_zone_id(drop_id: Optional[str]) -> Optional[DropTarget]:
    """Parse "position-handler-0" / "bench-cutter-1". None if not a drop zone."""
    if not drop_id:
        return None
    match = _DROP_ZONE_RE.match(drop_id)
    if not match:
        return None
    kind, position, index = match.groups()
    return DropTarget(position=position, slot_index=int(index), is_bench=kind == "bench")


def placed_at(
    roster: Sequence[DraftRosterPlayer], position: str, is_bench: bool
) -> List[DraftRosterPlayer]:
    """Entries in one placement zone, in roster order."""
    return [p for p in roster if p.slot == position and p.is_benched == is_bench]


def find_entry(
    roster: Sequence[DraftRosterPlayer], player_id: str
) -> Optional[DraftRosterPlayer]:
    for entry in roster:
        if entry.player_id == player_id:
            return entry
    return None


def is_player_in_roster(roster: Sequence[DraftRosterPlayer], player_id: str) -> bool:
    return find_entry(roster, player_id) is not None


def _has_room(
    roster: Sequence[DraftRosterPlayer],
    config: RosterConfig,
    position: str,
    is_bench: bool,
) -> bool:
    if is_bench:
        return sum(1 for p in roster if p.is_benched) < config.bench_capacity
    return len(placed_at(roster, position, False)) < config.get_slot_capacity(position)


def apply_drop(
    roster: Sequence[DraftRosterPlayer],
    payload: DragPayload,
    target: DropTarget,
    config: RosterConfig,
) -> List[DraftRosterPlayer]:
    """Apply a finished drag to the roster.

    Dropping onto an occupied placement swaps: a pool player replaces the
    occupant (inheriting its captaincy), a slot player trades placements
    with it. Dropping onto an empty placement moves or adds the player.
    """
    player = payload.player
    if player.position != target.position:
        raise DropRejected(
            f"Cannot place {player.position} in {target.position} position"
        )
    if target.position not in config.slot_capacity:
        raise DropRejected(f"Unknown position: {target.position}")

    if isinstance(payload, SlotPlayerPayload):
        source = find_entry(roster, payload.slot_player.player_id)
        if source is None:
            raise DropRejected(f"{player.name} is no longer on the roster")
    else:
        source = find_entry(roster, player.player_id)

    zone = placed_at(roster, target.position, target.is_bench)
    occupant = zone[target.slot_index] if target.slot_index < len(zone) else None

    if source is not None:
        return _move_entry(roster, source, occupant, target, config)

    new_entry = DraftRosterPlayer(
        player_id=player.player_id,
        slot=target.position,
        is_benched=target.is_bench,
        is_captain=False,
    )
    if occupant is not None:
        new_entry = new_entry.with_captain(occupant.is_captain)
        return [new_entry if p is occupant else p for p in roster]

    if not _has_room(roster, config, target.position, target.is_bench):
        where = "bench" if target.is_bench else f"{target.position} slots"
        raise DropRejected(f"Cannot add {player.name}: {where} full")
    return list(roster) + [new_entry]


def _move_entry(
    roster: Sequence[DraftRosterPlayer],
    source: DraftRosterPlayer,
    occupant: Optional[DraftRosterPlayer],
    target: DropTarget,
    config: RosterConfig,
) -> List[DraftRosterPlayer]:
    if occupant is source:
        return list(roster)

    if occupant is not None:
        moved_source = source.placed(occupant.slot, occupant.is_benched)
        moved_occupant = occupant.placed(source.slot, source.is_benched)
        result = []
        for p in roster:
            if p is source:
                result.append(moved_occupant)
            elif p is occupant:
                result.append(moved_source)
            else:
                result.append(p)
        return result

    remaining = [p for p in roster if p is not source]
    if not _has_room(remaining, config, target.position, target.is_bench):
        where = "bench" if target.is_bench else f"{target.position} slots"
        raise DropRejected(f"Cannot move player {source.player_id}: {where} full")
    return remaining + [source.placed(target.position, target.is_bench)]


def add_player(
    roster: Sequence[DraftRosterPlayer], player: Player, config: RosterConfig
) -> List[DraftRosterPlayer]:
    """Add player to the first free placement: starting lineup, then bench."""
    if is_player_in_roster(roster, player.player_id):
        raise DropRejected(f"{player.name} is already on your team")

    for is_bench in (False, True):
        if _has_room(roster, config, player.position, is_bench):
            return list(roster) + [
                DraftRosterPlayer(
                    player_id=player.player_id,
                    slot=player.position,
                    is_benched=is_bench,
                    is_captain=False,
                )
            ]
    raise DropRejected(
        f"No room for another {player.position}; transfer a player out first"
    )


def remove_player(
    roster: Sequence[DraftRosterPlayer], player_id: str
) -> List[DraftRosterPlayer]:
    return [p for p in roster if p.player_id != player_id]


def swap_players(
    roster: Sequence[DraftRosterPlayer], player_in: Player, player_out_id: str
) -> List[DraftRosterPlayer]:
    """Replace player_out with player_in, keeping its placement and captaincy."""
    player_out = find_entry(roster, player_out_id)
    if player_out is None:
        raise DropRejected(f"Player {player_out_id} is not on the roster")
    if player_out.slot != player_in.position:
        raise DropRejected(
            f"Cannot swap {player_in.position} for {player_out.slot}"
        )
    if is_player_in_roster(roster, player_in.player_id):
        raise DropRejected(f"{player_in.name} is already on your team")

    replacement = DraftRosterPlayer(
        player_id=player_in.player_id,
        slot=player_out.slot,
        is_benched=player_out.is_benched,
        is_captain=player_out.is_captain,
    )
    return [replacement if p is player_out else p for p in roster]


def set_captain(
    roster: Sequence[DraftRosterPlayer], player_id: str
) -> List[DraftRosterPlayer]:
    if not is_player_in_roster(roster, player_id):
        raise DropRejected(f"Player {player_id} is not on the roster")
    return [p.with_captain(p.player_id == player_id) for p in roster]


def ensure_single_captain(
    roster: Sequence[DraftRosterPlayer], value_lookup: Mapping[str, float]
) -> List[DraftRosterPlayer]:
    """
    Leave exactly one captain in the starting lineup where possible.

    No captain: the most valuable starter becomes captain. Several captains:
    only the most valuable starting one is kept. Ties go to roster order.
    """
    starters = [p for p in roster if not p.is_benched]
    if not starters:
        return list(roster)

    captains = [p for p in starters if p.is_captain]
    if len(captains) == 1 and sum(1 for p in roster if p.is_captain) == 1:
        return list(roster)

    candidates = captains or starters
    best = max(candidates, key=lambda p: value_lookup.get(p.player_id, 0.0))
    return [p.with_captain(p.player_id == best.player_id) for p in roster]


def swap_candidates(
    roster: Sequence[DraftRosterPlayer],
    position: str,
    players: Mapping[str, Player],
) -> List[Tuple[Player, DraftRosterPlayer]]:
    """Roster entries at position an incoming player could replace.

    Entries whose player is missing from players are skipped.
    """
    return [
        (players[p.player_id], p)
        for p in roster
        if p.slot == position and p.player_id in players
    ]
