"""Navigation guard - blocks leaving the page while the roster is dirty."""

import logging
from typing import Callable, Optional

from src.team_builder.roster_manager import RosterStateManager

logger = logging.getLogger(__name__)


class NavigationGuard:
    """Asks for confirmation before navigating away from unsaved changes.

    The guard follows the manager's dirty flag through its dirty_changed
    channel and must be closed when its consumer is torn down.
    """

    def __init__(
        self,
        manager: RosterStateManager,
        navigate: Callable[[str], None],
        on_prompt: Optional[Callable[[str], None]] = None,
    ):
        self.manager = manager
        self._navigate = navigate
        self._on_prompt = on_prompt
        self.pending_path: Optional[str] = None
        self._guarding = manager.has_unsaved_changes
        self._subscription = manager.dirty_changed.subscribe(self, self._on_dirty_changed)

    @property
    def is_guarding(self) -> bool:
        return self._guarding

    @property
    def is_prompting(self) -> bool:
        return self.pending_path is not None

    def request(self, path: str) -> bool:
        """Navigate to path, or hold it for confirmation.

        Returns:
            True if navigation happened, False if the user must confirm.
        """
        if not self._guarding:
            self._navigate(path)
            return True

        self.pending_path = path
        logger.info("Navigation to %s held: roster has unsaved changes", path)
        if self._on_prompt is not None:
            self._on_prompt(path)
        return False

    def confirm(self):
        """Discard the unsaved roster and continue to the pending path."""
        path = self.pending_path
        if path is None:
            return
        self.pending_path = None
        self.manager.reset()
        self._navigate(path)

    def cancel(self):
        """Stay on the page and keep the unsaved roster."""
        self.pending_path = None

    def close(self):
        self._subscription.unsubscribe()
        self.pending_path = None

    def _on_dirty_changed(self, dirty: bool):
        self._guarding = dirty
        if not dirty:
            self.pending_path = None
