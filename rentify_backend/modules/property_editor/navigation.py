"""Guard against leaving the editor with unsaved changes."""

from collections.abc import Callable

DEFAULT_UNSAVED_MESSAGE = "You have unsaved changes. Are you sure you want to leave?"


class UnsavedChangesGuard:
    """Asks before navigating away from a dirty draft.

    ``confirm`` receives the prompt and returns the user's answer;
    ``navigate`` performs the actual move.
    """

    def __init__(
        self,
        has_changes: Callable[[], bool],
        navigate: Callable[[str], None],
        confirm: Callable[[str], bool],
        message: str = DEFAULT_UNSAVED_MESSAGE,
    ):
        self._has_changes = has_changes
        self._navigate = navigate
        self._confirm = confirm
        self.message = message

    def before_unload(self) -> str | None:
        """Prompt to show when the page is closing, None to allow it."""
        return self.message if self._has_changes() else None

    def safe_navigate(self, path: str) -> bool:
        if self._has_changes() and not self._confirm(self.message):
            return False
        self._navigate(path)
        return True

    def force_navigate(self, path: str) -> None:
        """Skip the prompt (after a successful save)."""
        self._navigate(path)
