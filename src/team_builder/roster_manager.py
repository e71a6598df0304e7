"""Roster state manager - single owner of the in-memory draft roster."""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Tuple

from src.team_builder.errors import RosterLockedError
from src.team_builder.events import EventChannel
from src.team_builder.models import DraftRosterPlayer, Snapshot

logger = logging.getLogger(__name__)

IdentityKey = Tuple[Optional[str], Optional[str], Optional[str]]


class RosterStateManager:
    """Owns the draft roster, its dirty flag and re-hydration from snapshots.

    Hydration is keyed on the (snapshot_id, week_id, team_id) tuple: calling
    initialize() again with the same identity is a no-op, so repeated
    upstream notifications never clobber in-progress edits.
    """

    def __init__(self):
        self._draft: List[DraftRosterPlayer] = []
        self._baseline: Tuple[DraftRosterPlayer, ...] = ()
        self._snapshot: Optional[Snapshot] = None
        self._dirty = False
        self._identity: Optional[IdentityKey] = None
        self._frozen = False
        self.dirty_changed = EventChannel("dirty_changed")

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def draft_roster(self) -> List[DraftRosterPlayer]:
        return list(self._draft)

    @property
    def has_unsaved_changes(self) -> bool:
        return self._dirty

    @property
    def baseline(self) -> Tuple[DraftRosterPlayer, ...]:
        """Entries as last hydrated."""
        return self._baseline

    @property
    def snapshot(self) -> Optional[Snapshot]:
        """Snapshot the draft was hydrated from, None for a new team."""
        return self._snapshot

    @property
    def identity(self) -> Optional[IdentityKey]:
        return self._identity

    @property
    def is_hydrated(self) -> bool:
        return self._identity is not None

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def initialize(
        self,
        snapshot: Optional[Snapshot],
        week_id: Optional[str],
        team_id: Optional[str],
    ) -> bool:
        """Hydrate the draft from snapshot (or empty when None).

        Returns:
            True if the draft was re-hydrated, False if the identity was
            unchanged and the call was ignored.
        """
        identity = (
            snapshot.snapshot_id if snapshot is not None else None,
            week_id,
            team_id,
        )
        if identity == self._identity:
            return False
        self._check_not_frozen("re-hydrate")

        self._identity = identity
        self._snapshot = snapshot
        self._baseline = tuple(snapshot.players) if snapshot is not None else ()
        self._draft = list(self._baseline)
        self._set_dirty(False)

        logger.info(
            "Hydrated roster for team %s week %s from %s (%d players)",
            team_id,
            week_id,
            f"snapshot {identity[0]}" if snapshot is not None else "empty roster",
            len(self._draft),
        )
        return True

    def mutate(self, next_roster: Sequence[DraftRosterPlayer]):
        """Replace the draft. Any explicit edit marks the roster dirty."""
        self._check_not_frozen("edit")
        self._draft = list(next_roster)
        self._set_dirty(True)

    def reset(self):
        """Discard edits and restore the hydrated baseline."""
        self._check_not_frozen("reset")
        self._draft = list(self._baseline)
        self._set_dirty(False)
        logger.info("Discarded unsaved roster changes")

    @contextmanager
    def frozen(self) -> Iterator[List[DraftRosterPlayer]]:
        """Freeze the draft while a save is in flight; yields a copy of it."""
        self._check_not_frozen("save")
        self._frozen = True
        try:
            yield list(self._draft)
        finally:
            self._frozen = False

    def _check_not_frozen(self, action: str):
        if self._frozen:
            raise RosterLockedError(f"Cannot {action} roster while a save is in progress")

    def _set_dirty(self, dirty: bool):
        changed = dirty != self._dirty
        self._dirty = dirty
        if changed:
            self.dirty_changed.publish(dirty)
