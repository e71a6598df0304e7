"""Team builder session - orchestrates loading, editing and saving a roster."""

import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from src.team_builder.collaborators import Persistence, PlayerDirectory, SnapshotLoader
from src.team_builder.drag_controller import (
    DragCancel,
    DragController,
    DragEnd,
    DragOver,
    DragStart,
    SlotPlayerPayload,
)
from src.team_builder.errors import (
    DataUnavailable,
    DropRejected,
    PersistenceFailure,
    SessionClosed,
    TransferLimitExceeded,
    ValidationError,
)
from src.team_builder.events import EventChannel
from src.team_builder.models import (
    DraftRosterPlayer,
    Player,
    RosterConfig,
    Snapshot,
    TransferWindowConfig,
)
from src.team_builder import roster_operations as ops
from src.team_builder.roster_manager import RosterStateManager
from src.team_builder.roster_validator import (
    Violation,
    build_value_lookup,
    roster_value,
    validate,
)
from src.team_builder.transfer_window import check_transfer_permitted
from src.team_builder.transfers import TransferSet, compute_transfers, is_within_transfer_limit

logger = logging.getLogger(__name__)


class TeamBuilderSession:
    """Editing session for one fantasy team in one week.

    Transfers are counted against the team's last snapshot from an earlier
    week, so every save within one week draws on the same allowance. A week
    the team has not saved yet starts from that earlier roster.

    Coordinates the collaborators (snapshot loader, player directory,
    persistence) with the RosterStateManager and DragController. The session
    must be closed when its consumer goes away; results of fetches or saves
    that complete after close() are discarded.
    """

    def __init__(
        self,
        team_id: str,
        week_id: str,
        loader: SnapshotLoader,
        directory: PlayerDirectory,
        persistence: Persistence,
        window_config: TransferWindowConfig,
        roster_config: Optional[RosterConfig] = None,
        auth_events: Optional[EventChannel] = None,
        is_first_week: Optional[bool] = None,
        weeks: Optional[Sequence[str]] = None,
    ):
        self.team_id = team_id
        self.week_id = week_id
        self.loader = loader
        self.directory = directory
        self.persistence = persistence
        self.window_config = window_config
        self.roster_config = roster_config or RosterConfig()
        self.manager = RosterStateManager()
        self.drag = DragController()
        self.players: Dict[str, Player] = {}
        self.load_error: Optional[DataUnavailable] = None
        self.user_id: Optional[str] = None
        self.weeks = list(weeks) if weeks is not None else None
        self.previous_snapshot: Optional[Snapshot] = None
        self._is_first_week = is_first_week
        self._closed = False
        self._auth_subscription = None
        if auth_events is not None:
            self._auth_subscription = auth_events.subscribe(self, self._on_auth_change)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_loaded(self) -> bool:
        return self.manager.is_hydrated

    async def load(self) -> bool:
        """Fetch this week's snapshot, the previous week's and the player pool.

        The draft is hydrated from this week's snapshot, or from the most
        recent earlier one when the team has not saved this week.

        Returns:
            True if the roster was hydrated. False on a fetch failure (see
            load_error; call load() again to retry) or when the session was
            closed while fetching.
        """
        self._check_open()
        results = await asyncio.gather(
            self.loader.fetch_snapshot(self.team_id, self.week_id),
            self.loader.fetch_previous_snapshot(self.team_id, self.week_id),
            self.directory.fetch_players(self.team_id, self.week_id),
            return_exceptions=True,
        )

        if self._closed:
            logger.debug("Discarding load result for closed session (team %s)", self.team_id)
            return False

        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            self.load_error = self._as_data_unavailable(errors[0])
            logger.warning(
                "Could not load team %s week %s: %s",
                self.team_id,
                self.week_id,
                self.load_error,
            )
            return False

        snapshot, previous, players = results
        self.load_error = None
        self.players = {p.player_id: p for p in players}
        self.previous_snapshot = previous
        self.manager.initialize(
            snapshot if snapshot is not None else previous, self.week_id, self.team_id
        )
        return True

    def close(self):
        """Tear down: cancel any drag and release event subscriptions."""
        if self._closed:
            return
        self._closed = True
        self.drag.drag_cancel(DragCancel())
        if self._auth_subscription is not None:
            self._auth_subscription.unsubscribe()
            self._auth_subscription = None
        logger.debug("Closed session for team %s week %s", self.team_id, self.week_id)

    async def __aenter__(self) -> "TeamBuilderSession":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def draft_roster(self) -> List[DraftRosterPlayer]:
        return self.manager.draft_roster

    @property
    def has_unsaved_changes(self) -> bool:
        return self.manager.has_unsaved_changes

    @property
    def violations(self) -> List[Violation]:
        return validate(self.manager.draft_roster, self.roster_config, self.value_lookup)

    @property
    def value_lookup(self) -> Dict[str, float]:
        return build_value_lookup(self.players.values())

    @property
    def active_player(self) -> Optional[Player]:
        return self.drag.active_player

    @property
    def active_slot_player(self) -> Optional[DraftRosterPlayer]:
        return self.drag.active_slot_player

    @property
    def is_first_week(self) -> bool:
        """First week of the season: transfers are unlimited.

        An explicit flag wins; then the week schedule; otherwise a team with
        no snapshot from an earlier week is building its first roster.
        """
        if self._is_first_week is not None:
            return self._is_first_week
        if self.weeks:
            return self.weeks[0] == self.week_id
        return self.previous_snapshot is None

    def pending_transfers(self) -> TransferSet:
        return compute_transfers(self.manager.draft_roster, self.previous_snapshot)

    def swap_candidates(self, position: str) -> List[Tuple[Player, DraftRosterPlayer]]:
        return ops.swap_candidates(self.manager.draft_roster, position, self.players)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------
    def mutate(self, next_roster: Sequence[DraftRosterPlayer]):
        self._check_open()
        self.manager.mutate(next_roster)

    def reset(self):
        self._check_open()
        self.manager.reset()

    def add_player(self, player_id: str):
        player = self._get_player(player_id)
        self.mutate(ops.add_player(self.manager.draft_roster, player, self.roster_config))

    def remove_player(self, player_id: str):
        self.mutate(ops.remove_player(self.manager.draft_roster, player_id))

    def swap_players(self, player_in_id: str, player_out_id: str):
        player_in = self._get_player(player_in_id)
        self.mutate(ops.swap_players(self.manager.draft_roster, player_in, player_out_id))

    def set_captain(self, player_id: str):
        self.mutate(ops.set_captain(self.manager.draft_roster, player_id))

    def ensure_single_captain(self):
        self.mutate(ops.ensure_single_captain(self.manager.draft_roster, self.value_lookup))

    def undo_transfer(self, player_in_id: Optional[str], player_out_id: Optional[str]):
        """Revert one pending transfer: player_out_id returns, player_in_id leaves.

        Either side may be None for an unpaired transfer (a plain removal
        or addition since last week).

        Raises:
            DropRejected: the pair is not a pending transfer, or the
                returning player no longer fits.
        """
        pending = self.pending_transfers()
        if (
            (player_in_id is None and player_out_id is None)
            or (player_in_id is not None and player_in_id not in pending.players_in)
            or (player_out_id is not None and player_out_id not in pending.players_out)
        ):
            raise DropRejected(
                f"No pending transfer of {player_in_id} for {player_out_id}"
            )

        roster = self.manager.draft_roster
        if player_out_id is None:
            next_roster = ops.remove_player(roster, player_in_id)
        elif player_in_id is None:
            player_out = self._get_player(player_out_id)
            next_roster = ops.add_player(roster, player_out, self.roster_config)
        else:
            player_out = self._get_player(player_out_id)
            next_roster = ops.swap_players(roster, player_out, player_in_id)

        logger.info("Undid transfer: %s back in for %s", player_out_id, player_in_id)
        self.mutate(next_roster)

    # ------------------------------------------------------------------
    # Drag and drop
    # ------------------------------------------------------------------
    def on_drag_start(self, event: DragStart):
        self._check_open()
        self.drag.drag_start(event)

    def on_drag_over(self, event: DragOver):
        self.drag.drag_over(event)

    def on_drag_cancel(self, event: Optional[DragCancel] = None):
        self.drag.drag_cancel(event)

    def on_drag_end(self, event: DragEnd) -> bool:
        """Finish the gesture and apply the drop to the roster.

        Returns:
            True if the roster changed. Drops outside a drop zone or back
            onto the zone the player came from are ignored.

        Raises:
            DropRejected: the drop cannot be applied; the roster is unchanged.
        """
        payload = self.drag.drag_end(event)
        if self._closed or payload is None:
            return False

        target = ops.parse_drop_zone_id(event.over)
        if target is None:
            return False
        if isinstance(payload, SlotPlayerPayload) and payload.drop_id == event.over:
            return False

        try:
            next_roster = ops.apply_drop(
                self.manager.draft_roster, payload, target, self.roster_config
            )
        except DropRejected as e:
            logger.warning("Drop of %s rejected: %s", payload.player.player_id, e)
            raise

        self.mutate(next_roster)
        return True

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------
    async def submit(
        self, now: datetime, acting_user_id: Optional[str] = None
    ) -> Snapshot:
        """Validate, authorize and save the draft roster.

        On any failure the draft roster and its dirty flag are left exactly
        as they were.

        Raises:
            ValidationError: roster breaks composition or budget rules.
            TransferWindowClosed: window closed and user cannot bypass it.
            TransferLimitExceeded: too many transfers this week.
            PersistenceFailure: the save itself failed.
        """
        self._check_open()
        user_id = acting_user_id if acting_user_id is not None else self.user_id

        roster = self.manager.draft_roster
        value_lookup = self.value_lookup
        violations = validate(roster, self.roster_config, value_lookup)
        if violations:
            logger.warning("Submit blocked by %d violations", len(violations))
            raise ValidationError(violations)

        transfers = compute_transfers(roster, self.previous_snapshot)
        check_transfer_permitted(now, self.window_config, user_id)

        max_transfers = self.roster_config.max_transfers_per_week
        if not is_within_transfer_limit(
            transfers.transfers_used, self.is_first_week, max_transfers
        ):
            logger.warning(
                "Submit blocked: %d transfers (max %d)",
                transfers.transfers_used,
                max_transfers,
            )
            raise TransferLimitExceeded(transfers.transfers_used, max_transfers)

        with self.manager.frozen() as frozen_roster:
            try:
                snapshot = await self.persistence.save_roster(
                    self.team_id,
                    self.week_id,
                    frozen_roster,
                    transfers=transfers,
                    total_value=roster_value(frozen_roster, value_lookup),
                )
            except PersistenceFailure as e:
                logger.warning("Save failed for team %s: %s", self.team_id, e)
                raise
            except Exception as e:
                logger.warning("Save failed for team %s: %s", self.team_id, e)
                raise PersistenceFailure(f"Could not save roster: {e}") from e

        if self._closed:
            logger.debug("Discarding save result for closed session (team %s)", self.team_id)
            return snapshot

        self.manager.initialize(snapshot, self.week_id, self.team_id)
        logger.info(
            "Saved roster for team %s week %s: %d transfers (in=%s, out=%s)",
            self.team_id,
            self.week_id,
            transfers.transfers_used,
            sorted(transfers.players_in),
            sorted(transfers.players_out),
        )
        return snapshot

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _check_open(self):
        if self._closed:
            raise SessionClosed(f"Session for team {self.team_id} is closed")

    @staticmethod
    def _as_data_unavailable(error: BaseException) -> DataUnavailable:
        if isinstance(error, DataUnavailable):
            return error
        if not isinstance(error, Exception):
            raise error
        wrapped = DataUnavailable(f"Could not load roster data: {error}")
        wrapped.__cause__ = error
        return wrapped

    def _get_player(self, player_id: str) -> Player:
        try:
            return self.players[player_id]
        except KeyError:
            raise DropRejected(f"Player {player_id} not found in player directory") from None

    def _on_auth_change(self, user_id: Optional[str]):
        self.user_id = user_id
