"""The screens the application can show."""

from enum import Enum, auto


class Screen(Enum):
    """Every screen or popup the application can be on."""

    MAIN = auto()
    SCREEN_SWITCH_MENU = auto()
    NON_WORKTREE_REPO_CREATE = auto()
    NON_WORKTREE_REPO_DELETE = auto()
    WORKTREE_REPO_CREATE = auto()
    WORKTREE_REPO_DELETE = auto()
    WORKTREE_CREATE = auto()
    WORKTREE_DELETE = auto()
    SUMMARY = auto()

    def is_delete(self) -> bool:
        """Whether this screen asks to confirm a deletion."""
        return self in _DELETE_SCREENS

    def is_create(self) -> bool:
        """Whether this screen collects input to create something."""
        return self in _CREATE_SCREENS


_DELETE_SCREENS = frozenset(
    {Screen.NON_WORKTREE_REPO_DELETE, Screen.WORKTREE_REPO_DELETE, Screen.WORKTREE_DELETE}
)
_CREATE_SCREENS = frozenset(
    {Screen.NON_WORKTREE_REPO_CREATE, Screen.WORKTREE_REPO_CREATE, Screen.WORKTREE_CREATE}
)