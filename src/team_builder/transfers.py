"""Transfer computation from snapshot diffs.

Transfers are never stored: they are derived by comparing the draft roster
against the last committed snapshot at submit time.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from src.team_builder.config import POSITIONS
from src.team_builder.models import DraftRosterPlayer, Snapshot


@dataclass(frozen=True)
class Transfer:
    """One player in / player out pair. Either side may be empty."""

    player_in_id: Optional[str]
    player_out_id: Optional[str]
    position: str


@dataclass(frozen=True)
class TransferSet:
    """Difference between a draft roster and its baseline snapshot."""

    players_in: FrozenSet[str]
    players_out: FrozenSet[str]
    transfers: Tuple[Transfer, ...] = ()
    is_initial: bool = False

    @property
    def transfers_used(self) -> int:
        """One-for-one swap model: each in/out pair costs one transfer."""
        if self.is_initial:
            return 0
        return max(len(self.players_in), len(self.players_out))


def compute_transfers(
    draft: Sequence[DraftRosterPlayer], snapshot: Optional[Snapshot]
) -> TransferSet:
    """Compute the transfers a save of draft would consume.

    Without a prior snapshot nothing is transferred out, so an initial
    draft spends no transfers.
    """
    draft_ids = frozenset(p.player_id for p in draft)
    if snapshot is None:
        return TransferSet(
            players_in=draft_ids, players_out=frozenset(), is_initial=True
        )

    snapshot_ids = snapshot.player_ids
    players_in = draft_ids - snapshot_ids
    players_out = snapshot_ids - draft_ids

    return TransferSet(
        players_in=players_in,
        players_out=players_out,
        transfers=tuple(pair_transfers(draft, snapshot.players)),
    )


def pair_transfers(
    current: Sequence[DraftRosterPlayer], previous: Sequence[DraftRosterPlayer]
) -> List[Transfer]:
    """Pair incoming and outgoing players within each position.

    A handler can only be swapped for a handler, etc. Unmatched players are
    paired with None. Pairing follows roster order.
    """
    current_ids = {p.player_id for p in current}
    previous_ids = {p.player_id for p in previous}

    ins_by_position: Dict[str, List[str]] = {}
    for p in current:
        if p.player_id not in previous_ids:
            ins_by_position.setdefault(p.slot, []).append(p.player_id)

    outs_by_position: Dict[str, List[str]] = {}
    for p in previous:
        if p.player_id not in current_ids:
            outs_by_position.setdefault(p.slot, []).append(p.player_id)

    positions = list(POSITIONS)
    for pos in list(ins_by_position) + list(outs_by_position):
        if pos not in positions:
            positions.append(pos)

    transfers = []
    for position in positions:
        ins = ins_by_position.get(position, [])
        outs = outs_by_position.get(position, [])
        for i in range(max(len(ins), len(outs))):
            transfers.append(
                Transfer(
                    player_in_id=ins[i] if i < len(ins) else None,
                    player_out_id=outs[i] if i < len(outs) else None,
                    position=position,
                )
            )
    return transfers


def is_within_transfer_limit(
    transfer_count: int, is_first_week: bool, max_transfers: int
) -> bool:
    """First week is unlimited (building the initial roster)."""
    if is_first_week:
        return True
    return transfer_count <= max_transfers
