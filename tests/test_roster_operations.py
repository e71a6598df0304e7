"""Tests for pure roster edit operations."""

import pytest

from conftest import make_full_roster, make_players
from src.team_builder.drag_controller import PoolPlayerPayload, SlotPlayerPayload
from src.team_builder.errors import DropRejected
from src.team_builder.models import DraftRosterPlayer, RosterConfig
from src.team_builder.roster_operations import (
    DropTarget,
    add_player,
    apply_drop,
    ensure_single_captain,
    find_entry,
    parse_drop_zone_id,
    remove_player,
    set_captain,
    swap_candidates,
    swap_players,
)

PLAYERS = {p.player_id: p for p in make_players()}


def _slot_payload(roster, pid, drop_id=None):
    return SlotPlayerPayload(PLAYERS[pid], find_entry(roster, pid), drop_id)


# ── Drop zone ids ────────────────────────────────────────────────────

class TestParseDropZoneId:
    def test_field_zone(self):
        assert parse_drop_zone_id("position-handler-2") == DropTarget("handler", 2, False)

    def test_bench_zone(self):
        assert parse_drop_zone_id("bench-cutter-0") == DropTarget("cutter", 0, True)

    @pytest.mark.parametrize("drop_id", [None, "", "pool", "position-handler", "slot-handler-1"])
    def test_not_a_zone(self, drop_id):
        assert parse_drop_zone_id(drop_id) is None

    def test_round_trip_id(self):
        assert DropTarget("receiver", 1, True).drop_id == "bench-receiver-1"


# ── Drops from the pool ──────────────────────────────────────────────

class TestDropPoolPlayer:
    def test_into_empty_roster(self):
        result = apply_drop(
            [], PoolPlayerPayload(PLAYERS["h1"]), DropTarget("handler", 0), RosterConfig()
        )
        assert result == [DraftRosterPlayer("h1", "handler", False, False)]

    def test_onto_bench(self):
        result = apply_drop(
            [], PoolPlayerPayload(PLAYERS["c1"]), DropTarget("cutter", 0, True), RosterConfig()
        )
        assert result == [DraftRosterPlayer("c1", "cutter", True, False)]

    def test_replaces_occupant_and_inherits_captaincy(self):
        roster = make_full_roster(captain="h1")
        result = apply_drop(
            roster, PoolPlayerPayload(PLAYERS["h5"]), DropTarget("handler", 0), RosterConfig()
        )
        assert find_entry(result, "h1") is None
        assert result[0] == DraftRosterPlayer("h5", "handler", False, True)
        assert len(result) == len(roster)

    def test_position_mismatch_rejected(self):
        with pytest.raises(DropRejected, match="Cannot place cutter"):
            apply_drop(
                [], PoolPlayerPayload(PLAYERS["c1"]), DropTarget("handler", 0), RosterConfig()
            )

    def test_full_bench_rejected(self):
        roster = make_full_roster()
        with pytest.raises(DropRejected, match="bench full"):
            apply_drop(
                roster,
                PoolPlayerPayload(PLAYERS["h5"]),
                DropTarget("handler", 1, True),
                RosterConfig(),
            )

    def test_input_not_modified(self):
        roster = make_full_roster()
        before = list(roster)
        apply_drop(roster, PoolPlayerPayload(PLAYERS["h5"]), DropTarget("handler", 0), RosterConfig())
        assert roster == before

    def test_pool_player_already_on_roster_moves(self):
        roster = make_full_roster()[:7]
        result = apply_drop(
            roster, PoolPlayerPayload(PLAYERS["h2"]), DropTarget("handler", 0, True), RosterConfig()
        )
        assert find_entry(result, "h2").is_benched is True
        assert len(result) == 7


# ── Drops of placed players ──────────────────────────────────────────

class TestDropSlotPlayer:
    def test_swap_with_occupant(self):
        roster = make_full_roster()
        payload = _slot_payload(roster, "h4", "bench-handler-0")
        result = apply_drop(roster, payload, DropTarget("handler", 1), RosterConfig())

        assert find_entry(result, "h4") == DraftRosterPlayer("h4", "handler", False, False)
        assert find_entry(result, "h2") == DraftRosterPlayer("h2", "handler", True, False)

    def test_move_to_empty_bench(self):
        roster = make_full_roster()[:7]
        payload = _slot_payload(roster, "r2", "position-receiver-1")
        result = apply_drop(roster, payload, DropTarget("receiver", 0, True), RosterConfig())
        assert find_entry(result, "r2").is_benched is True

    def test_captain_flag_travels_with_player(self):
        roster = make_full_roster(captain="h1")
        payload = _slot_payload(roster, "h1", "position-handler-0")
        result = apply_drop(roster, payload, DropTarget("handler", 0, True), RosterConfig())
        assert find_entry(result, "h1") == DraftRosterPlayer("h1", "handler", True, True)

    def test_drop_on_itself_is_unchanged(self):
        roster = make_full_roster()
        payload = _slot_payload(roster, "h2", "position-handler-1")
        assert apply_drop(roster, payload, DropTarget("handler", 1), RosterConfig()) == roster

    def test_player_no_longer_on_roster(self):
        entry = DraftRosterPlayer("h1", "handler")
        payload = SlotPlayerPayload(PLAYERS["h1"], entry)
        with pytest.raises(DropRejected):
            apply_drop([], payload, DropTarget("handler", 0), RosterConfig())


# ── Explicit edits ───────────────────────────────────────────────────

class TestAddPlayer:
    def test_fills_starting_first(self):
        result = add_player([], PLAYERS["c1"], RosterConfig())
        assert result == [DraftRosterPlayer("c1", "cutter", False, False)]

    def test_falls_back_to_bench(self):
        roster = make_full_roster()[:7]
        result = add_player(roster, PLAYERS["c3"], RosterConfig())
        assert result[-1] == DraftRosterPlayer("c3", "cutter", True, False)

    def test_full_needs_transfer(self):
        with pytest.raises(DropRejected, match="transfer"):
            add_player(make_full_roster(), PLAYERS["c4"], RosterConfig())

    def test_duplicate_rejected(self):
        with pytest.raises(DropRejected, match="already on your team"):
            add_player(make_full_roster(), PLAYERS["h1"], RosterConfig())


class TestOtherEdits:
    def test_remove(self):
        result = remove_player(make_full_roster(), "h1")
        assert find_entry(result, "h1") is None
        assert len(result) == 9

    def test_swap_keeps_placement(self):
        result = swap_players(make_full_roster(captain="h4"), PLAYERS["h6"], "h4")
        assert find_entry(result, "h6") == DraftRosterPlayer("h6", "handler", True, True)
        assert find_entry(result, "h4") is None

    def test_swap_requires_same_position(self):
        with pytest.raises(DropRejected):
            swap_players(make_full_roster(), PLAYERS["c4"], "h1")

    def test_set_captain(self):
        result = set_captain(make_full_roster(captain="h1"), "r1")
        assert [p.player_id for p in result if p.is_captain] == ["r1"]

    def test_set_captain_unknown_player(self):
        with pytest.raises(DropRejected):
            set_captain(make_full_roster(), "nobody")


class TestEnsureSingleCaptain:
    def test_assigns_most_valuable_starter(self):
        values = {p.player_id: 10.0 for p in make_players()}
        values["c2"] = 99.0
        values["h4"] = 500.0  # benched, never chosen
        result = ensure_single_captain(make_full_roster(captain=None), values)
        assert [p.player_id for p in result if p.is_captain] == ["c2"]

    def test_keeps_most_valuable_of_several(self):
        roster = [p.with_captain(p.player_id in ("h1", "r1")) for p in make_full_roster()]
        values = {"h1": 10.0, "r1": 20.0}
        result = ensure_single_captain(roster, values)
        assert [p.player_id for p in result if p.is_captain] == ["r1"]

    def test_single_captain_untouched(self):
        roster = make_full_roster(captain="c1")
        assert ensure_single_captain(roster, {}) == roster

    def test_empty_roster(self):
        assert ensure_single_captain([], {}) == []


class TestSwapCandidates:
    def test_entries_at_position_with_players(self):
        roster = make_full_roster()
        result = swap_candidates(roster, "receiver", PLAYERS)
        assert [(player.player_id, entry.slot) for player, entry in result] == [
            ("r1", "receiver"), ("r2", "receiver"), ("r3", "receiver"),
        ]

    def test_unknown_players_skipped(self):
        roster = [DraftRosterPlayer("ghost", "handler"), DraftRosterPlayer("h1", "handler")]
        assert [p.player_id for p, _ in swap_candidates(roster, "handler", PLAYERS)] == ["h1"]
