"""Team builder exceptions.

Every failure here is local and recoverable: callers surface the message and
let the user retry or keep editing.
"""

from typing import List


class TeamBuilderError(Exception):
    """Base class for team builder errors."""


class ValidationError(TeamBuilderError):
    """Raised when a roster fails composition or budget rules."""

    def __init__(self, violations: List):
        self.violations = list(violations)
        messages = "; ".join(v.message for v in self.violations)
        super().__init__(f"Roster is invalid: {messages}")


class TransferWindowClosed(TeamBuilderError):
    """Raised when a transfer is attempted outside the window without bypass."""


class TransferLimitExceeded(TeamBuilderError):
    """Raised when a save would use more transfers than allowed this week."""

    def __init__(self, transfers_used: int, max_transfers: int):
        self.transfers_used = transfers_used
        self.max_transfers = max_transfers
        super().__init__(
            f"Maximum {max_transfers} transfers allowed per week, "
            f"roster uses {transfers_used}"
        )


class PersistenceFailure(TeamBuilderError):
    """Raised when saving a roster fails."""


class DataUnavailable(TeamBuilderError):
    """Raised when snapshot or player data cannot be fetched.

    Not raised for a missing snapshot: that is a legitimate new-team state.
    """


class RosterLockedError(TeamBuilderError):
    """Raised when the draft roster is edited while a save is in flight."""


class DropRejected(TeamBuilderError):
    """Raised when a dropped player cannot be placed on the target."""


class SessionClosed(TeamBuilderError):
    """Raised when a torn-down session is used."""
