"""Shared fixtures and in-memory collaborators for the team builder tests."""

from datetime import datetime, timedelta, timezone

import pytest

from src.team_builder.errors import DataUnavailable, PersistenceFailure
from src.team_builder.models import (
    DraftRosterPlayer,
    Player,
    RosterConfig,
    Snapshot,
    TransferWindowConfig,
)

OPENS_AT = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
CLOSES_AT = datetime(2026, 3, 6, 18, 0, tzinfo=timezone.utc)
INSIDE_WINDOW = OPENS_AT + timedelta(days=1)
AFTER_WINDOW = CLOSES_AT + timedelta(hours=1)


# ------------------------------------------------------------------
# Lightweight factories
# ------------------------------------------------------------------

def make_players():
    """A pool of 6 handlers, 4 cutters and 4 receivers worth 40 each."""
    players = []
    for position, count in (("handler", 6), ("cutter", 4), ("receiver", 4)):
        for i in range(1, count + 1):
            pid = f"{position[0]}{i}"
            players.append(
                Player(
                    player_id=pid,
                    name=f"Player {pid}",
                    position=position,
                    current_value=40.0,
                    team_id="TST",
                    starting_value=30.0,
                )
            )
    return players


def make_full_roster(captain="h1"):
    """A complete valid roster: 3/2/2 starting, one of each on the bench."""
    placements = [
        ("h1", "handler", False), ("h2", "handler", False), ("h3", "handler", False),
        ("c1", "cutter", False), ("c2", "cutter", False),
        ("r1", "receiver", False), ("r2", "receiver", False),
        ("h4", "handler", True), ("c3", "cutter", True), ("r3", "receiver", True),
    ]
    return [
        DraftRosterPlayer(pid, slot, is_benched=benched, is_captain=pid == captain)
        for pid, slot, benched in placements
    ]


def make_snapshot(players, snapshot_id="snap-1", week_id="week-2", team_id="team-1"):
    return Snapshot(
        snapshot_id=snapshot_id,
        week_id=week_id,
        team_id=team_id,
        players=tuple(players),
        created_at="2026-03-01T12:00:00",
    )


# ------------------------------------------------------------------
# In-memory collaborators
# ------------------------------------------------------------------

class FakeLoader:
    def __init__(self, snapshot=None, error=None, previous=None):
        self.snapshot = snapshot
        self.previous = previous
        self.error = error
        self.calls = 0

    async def fetch_snapshot(self, team_id, week_id):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.snapshot

    async def fetch_previous_snapshot(self, team_id, week_id):
        if self.error is not None:
            raise self.error
        return self.previous


class FakeDirectory:
    def __init__(self, players=None, error=None):
        self.players = players if players is not None else make_players()
        self.error = error
        self.requested_weeks = []

    async def fetch_players(self, team_id, week_id):
        self.requested_weeks.append(week_id)
        if self.error is not None:
            raise self.error
        return list(self.players)


class FakePersistence:
    def __init__(self, error=None):
        self.error = error
        self.saved = []

    async def save_roster(self, team_id, week_id, roster, transfers=None, total_value=0.0):
        if self.error is not None:
            raise self.error
        snapshot = Snapshot.create(
            week_id=week_id,
            team_id=team_id,
            players=list(roster),
            transfers_used=transfers.transfers_used if transfers else 0,
            total_value=total_value,
        )
        self.saved.append(snapshot)
        return snapshot


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------

@pytest.fixture
def players():
    return make_players()


@pytest.fixture
def players_by_id(players):
    return {p.player_id: p for p in players}


@pytest.fixture
def roster_config():
    return RosterConfig()


@pytest.fixture
def window_config():
    return TransferWindowConfig(
        opens_at=OPENS_AT,
        closes_at=CLOSES_AT,
        bypass_user_ids=frozenset({"admin-1"}),
    )


@pytest.fixture
def unavailable():
    return DataUnavailable("backend down")


@pytest.fixture
def save_failure():
    return PersistenceFailure("disk full")
