"""Transfer window policy.

All inputs are explicit: the caller passes the current time and the
allow-list, so results never depend on the wall clock or module state.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from src.team_builder.errors import TransferWindowClosed
from src.team_builder.models import TransferWindowConfig

logger = logging.getLogger(__name__)


def can_bypass_transfer_window(
    user_id: Optional[str], bypass_user_ids: Iterable[str]
) -> bool:
    """True iff user_id is set and on the allow-list. Fails closed."""
    if not user_id:
        return False
    return user_id in frozenset(bypass_user_ids)


def is_window_open(now: datetime, config: TransferWindowConfig) -> bool:
    """Half-open interval: opens_at <= now < closes_at."""
    return config.opens_at <= now < config.closes_at


def is_transfer_permitted(
    now: datetime,
    config: TransferWindowConfig,
    acting_user_id: Optional[str] = None,
) -> bool:
    return is_window_open(now, config) or can_bypass_transfer_window(
        acting_user_id, config.bypass_user_ids
    )


def check_transfer_permitted(
    now: datetime,
    config: TransferWindowConfig,
    acting_user_id: Optional[str] = None,
):
    """Raise TransferWindowClosed unless a transfer is permitted now."""
    if is_window_open(now, config):
        return
    if can_bypass_transfer_window(acting_user_id, config.bypass_user_ids):
        logger.info(
            "User %s bypassed closed transfer window (%s - %s)",
            acting_user_id,
            config.opens_at.isoformat(),
            config.closes_at.isoformat(),
        )
        return

    if now < config.opens_at:
        reason = f"Transfer window opens at {config.opens_at.isoformat()}"
    else:
        reason = f"Transfer window closed at {config.closes_at.isoformat()}"
    logger.warning("Transfer rejected for user %s: %s", acting_user_id, reason)
    raise TransferWindowClosed(reason)


def window_state(now: datetime, config: TransferWindowConfig) -> str:
    """One of "upcoming", "open" or "closed"."""
    if now < config.opens_at:
        return "upcoming"
    if is_window_open(now, config):
        return "open"
    return "closed"
