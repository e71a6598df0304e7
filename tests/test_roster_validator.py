"""Tests for roster validation."""

import pytest

from conftest import make_full_roster, make_players
from src.team_builder.models import DraftRosterPlayer, RosterConfig
from src.team_builder.roster_validator import (
    RosterValidator,
    ViolationKind,
    build_value_lookup,
    roster_value,
    validate,
)


def _values(value=40.0):
    return {p.player_id: value for p in make_players()}


def _kinds(violations):
    return [v.kind for v in violations]


# ── Valid rosters ────────────────────────────────────────────────────

class TestValidRoster:
    def test_full_roster_is_valid(self):
        assert validate(make_full_roster(), RosterConfig(), _values()) == []

    def test_empty_roster_is_valid(self):
        assert validate([], RosterConfig(), _values()) == []

    def test_deterministic(self):
        roster = make_full_roster(captain=None) + [DraftRosterPlayer("h1", "handler")]
        first = validate(roster, RosterConfig(), _values(100.0))
        second = validate(roster, RosterConfig(), _values(100.0))
        assert first == second


# ── Individual checks ────────────────────────────────────────────────

class TestDuplicatePlayer:
    def test_reports_duplicate_once_per_id(self):
        roster = [
            DraftRosterPlayer("h1", "handler", is_captain=True),
            DraftRosterPlayer("h1", "handler", is_benched=True),
        ]
        violations = validate(roster, RosterConfig(), _values())
        dupes = [v for v in violations if v.kind == ViolationKind.DUPLICATE_PLAYER]
        assert len(dupes) == 1
        assert dupes[0].player_id == "h1"


class TestSlotOverflow:
    def test_too_many_starters(self):
        roster = make_full_roster() + [DraftRosterPlayer("c4", "cutter")]
        violations = validate(roster, RosterConfig(), _values(1.0))
        assert _kinds(violations) == [ViolationKind.SLOT_OVERFLOW]
        assert violations[0].position == "cutter"

    def test_benched_players_do_not_count(self):
        roster = make_full_roster()[:7] + [
            DraftRosterPlayer("h4", "handler", is_benched=True),
            DraftRosterPlayer("h5", "handler", is_benched=True),
        ]
        kinds = _kinds(validate(roster, RosterConfig(), _values(1.0)))
        assert ViolationKind.SLOT_OVERFLOW not in kinds

    def test_unknown_position_has_no_capacity(self):
        roster = [DraftRosterPlayer("x1", "goalie", is_captain=True)]
        violations = validate(roster, RosterConfig(), {})
        assert _kinds(violations) == [ViolationKind.SLOT_OVERFLOW]
        assert violations[0].position == "goalie"


class TestBenchOverflow:
    def test_too_many_on_bench(self):
        roster = make_full_roster() + [DraftRosterPlayer("h5", "handler", is_benched=True)]
        assert _kinds(validate(roster, RosterConfig(), _values(1.0))) == [
            ViolationKind.BENCH_OVERFLOW
        ]


class TestCaptaincy:
    def test_no_captain(self):
        kinds = _kinds(validate(make_full_roster(captain=None), RosterConfig(), _values()))
        assert kinds == [ViolationKind.MISSING_CAPTAIN]

    def test_two_starting_captains(self):
        roster = [
            p.with_captain(True) if p.player_id in ("h1", "c1") else p
            for p in make_full_roster(captain=None)
        ]
        kinds = _kinds(validate(roster, RosterConfig(), _values()))
        assert kinds == [ViolationKind.MULTIPLE_CAPTAINS]

    def test_single_starting_captain(self):
        kinds = _kinds(validate(make_full_roster(captain="r2"), RosterConfig(), _values()))
        assert ViolationKind.MISSING_CAPTAIN not in kinds
        assert ViolationKind.MULTIPLE_CAPTAINS not in kinds

    def test_benched_captain(self):
        kinds = _kinds(validate(make_full_roster(captain="h4"), RosterConfig(), _values()))
        assert kinds == [ViolationKind.MISSING_CAPTAIN, ViolationKind.CAPTAIN_BENCHED]


class TestBudget:
    def test_over_budget(self):
        config = RosterConfig(budget=399.0)
        kinds = _kinds(validate(make_full_roster(), config, _values()))
        assert kinds == [ViolationKind.BUDGET_EXCEEDED]

    def test_exactly_on_budget_is_fine(self):
        config = RosterConfig(budget=400.0)
        assert validate(make_full_roster(), config, _values()) == []

    def test_bench_counts_toward_budget(self):
        roster = make_full_roster()
        values = _values(0.0)
        for p in roster:
            if p.is_benched:
                values[p.player_id] = 200.0
        kinds = _kinds(validate(roster, RosterConfig(budget=450.0), values))
        assert kinds == [ViolationKind.BUDGET_EXCEEDED]

    def test_uses_current_not_starting_value(self):
        players = make_players()  # current 40, starting 30
        lookup = build_value_lookup(players)
        assert roster_value(make_full_roster(), lookup) == pytest.approx(400.0)

    def test_unknown_player_counts_as_zero(self):
        roster = [DraftRosterPlayer("ghost", "handler", is_captain=True)]
        assert roster_value(roster, {}) == 0.0


# ── Ordering ─────────────────────────────────────────────────────────

class TestViolationOrder:
    def test_all_kinds_in_fixed_order(self):
        roster = [
            DraftRosterPlayer("h1", "handler"),
            DraftRosterPlayer("h1", "handler"),
            DraftRosterPlayer("h2", "handler"),
            DraftRosterPlayer("h3", "handler"),
            DraftRosterPlayer("c1", "cutter", is_benched=True, is_captain=True),
            DraftRosterPlayer("c2", "cutter", is_benched=True, is_captain=True),
            DraftRosterPlayer("c3", "cutter", is_benched=True),
            DraftRosterPlayer("c4", "cutter", is_benched=True),
        ]
        kinds = _kinds(validate(roster, RosterConfig(budget=10.0), _values()))
        assert kinds == [
            ViolationKind.DUPLICATE_PLAYER,
            ViolationKind.SLOT_OVERFLOW,
            ViolationKind.BENCH_OVERFLOW,
            ViolationKind.MISSING_CAPTAIN,
            ViolationKind.MULTIPLE_CAPTAINS,
            ViolationKind.CAPTAIN_BENCHED,
            ViolationKind.CAPTAIN_BENCHED,
            ViolationKind.BUDGET_EXCEEDED,
        ]


# ── RosterValidator ──────────────────────────────────────────────────

class TestRosterValidator:
    def test_validate_delegates(self):
        v = RosterValidator(RosterConfig())
        assert v.validate(make_full_roster(), _values()) == []

    def test_summary(self):
        v = RosterValidator(RosterConfig())
        summary = v.get_roster_summary(make_full_roster()[:4])
        assert summary["handler"] == {"filled": 3, "capacity": 3, "remaining": 0}
        assert summary["cutter"] == {"filled": 1, "capacity": 2, "remaining": 1}
        assert summary["bench"] == {"filled": 0, "capacity": 3, "remaining": 3}

    def test_is_position_full(self):
        v = RosterValidator(RosterConfig())
        assert v.is_position_full(make_full_roster(), "handler") is True
        assert v.is_position_full(make_full_roster()[:7], "handler") is False
