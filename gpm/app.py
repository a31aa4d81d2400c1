"""Application state and key handling for the project tree browser."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from enum import Enum, auto

from gpm import actions
from gpm.multi_input import DOWN, ENTER, ESC, UP, MultiInputState
from gpm.project_item import ProjectItem, ProjectItemType, TreeItem
from gpm.screen import Screen
from gpm.switch_screen import ScreenSwitcherState, ScreenSwitcherStateBuilder

TreePath = tuple[ProjectItem, ...]

DELETE_LABELS = {
    Screen.NON_WORKTREE_REPO_DELETE: "Non-Worktree Repo",
    Screen.WORKTREE_REPO_DELETE: "Worktree Repo",
    Screen.WORKTREE_DELETE: "Worktree",
}

_INPUT_FORMS = {
    Screen.WORKTREE_CREATE: (
        " Create New Branch as Worktree ",
        ["Branch Name", "Directory Name (blank for default)"],
    ),
    Screen.WORKTREE_REPO_CREATE: (
        " Create new Worktree Branch ",
        ["Repo Link", "Directory Name (blank for default)"],
    ),
    Screen.NON_WORKTREE_REPO_CREATE: (
        " Create Non-Worktree Repo ",
        ["Repo Link", "Directory Name (blank for default)"],
    ),
}

_DELETE_TARGETS = {
    ProjectItemType.WORKTREE: Screen.WORKTREE_DELETE,
    ProjectItemType.WORKTREE_REPO: Screen.WORKTREE_REPO_DELETE,
    ProjectItemType.NON_WORKTREE_REPO: Screen.NON_WORKTREE_REPO_DELETE,
}


class Outcome(Enum):
    """What the main loop should do after an input."""

    CONTINUE = auto()
    EXIT = auto()
    RESTART = auto()


class TreeState:
    """Which tree nodes are open and which one is selected."""

    def __init__(self, forest: Iterable[TreeItem]) -> None:
        self.forest = list(forest)
        self.opened: set[TreePath] = set()
        self._selected: TreePath = ()

    def _iter_visible(
        self, items: list[TreeItem], prefix: TreePath
    ) -> Iterator[tuple[TreePath, TreeItem]]:
        for item in items:
            ident = prefix + (item.identifier,)
            yield ident, item
            if ident in self.opened:
                yield from self._iter_visible(item.children, ident)

    def visible_rows(self) -> list[tuple[TreePath, TreeItem]]:
        """Identifier path and node of every row currently shown, top to bottom."""
        return list(self._iter_visible(self.forest, ()))

    def _select_relative(self, change: Callable[[int | None, int], int]) -> bool:
        rows = self.visible_rows()
        before = self._selected
        if not rows:
            self._selected = ()
            return before != self._selected
        current = next(
            (i for i, (ident, _) in enumerate(rows) if ident == self._selected), None
        )
        new_index = min(change(current, len(rows)), len(rows) - 1)
        self._selected = rows[new_index][0]
        return before != self._selected

    def key_up(self) -> bool:
        """Select the row above, or the last row when nothing is selected."""
        return self._select_relative(
            lambda current, count: count - 1 if current is None else max(current - 1, 0)
        )

    def key_down(self) -> bool:
        """Select the row below, or the first row when nothing is selected."""
        return self._select_relative(
            lambda current, count: 0 if current is None else current + 1
        )

    def toggle_selected(self) -> bool:
        """Open or close the selected node; return whether there was one."""
        if not self._selected:
            return False
        if self._selected in self.opened:
            self.opened.remove(self._selected)
        else:
            self.opened.add(self._selected)
        return True

    def selected(self) -> list[ProjectItem]:
        """Identifiers from the root down to the selected node, empty if none."""
        return list(self._selected)


def _project_menu(project_type: ProjectItemType) -> ScreenSwitcherState:
    if project_type is ProjectItemType.NON_WORKTREE_REPO:
        builder = ScreenSwitcherStateBuilder(" Project Menu ").with_option(
            "Delete Project", Screen.NON_WORKTREE_REPO_DELETE
        )
    elif project_type is ProjectItemType.WORKTREE:
        builder = ScreenSwitcherStateBuilder(" Project Menu ").with_option(
            "Delete Project", Screen.WORKTREE_DELETE
        )
    elif project_type is ProjectItemType.WORKTREE_REPO:
        builder = (
            ScreenSwitcherStateBuilder(" Project Worktree Menu ")
            .with_option("New Branch As Worktree", Screen.WORKTREE_CREATE)
            .with_option("Delete Worktree", Screen.WORKTREE_REPO_DELETE)
        )
    else:
        builder = (
            ScreenSwitcherStateBuilder(" Project Worktree Menu ")
            .with_option("Checkout New Repo - Worktree Mode", Screen.WORKTREE_REPO_CREATE)
            .with_option(
                "Checkout New Repo - Non Worktree Mode", Screen.NON_WORKTREE_REPO_CREATE
            )
        )
    return builder.build()


class App:
    """The project browser: its tree, current screen and popups."""

    def __init__(self, project_tree: Iterable[TreeItem]) -> None:
        self.project_tree = list(project_tree)
        self.tree_state = TreeState(self.project_tree)
        self.app_screen = Screen.MAIN
        self.input_state: MultiInputState | None = None
        self.screen_switch_state: ScreenSwitcherState | None = None
        self.summary_text: list[str] = []
        self._initialise_screen()

    def _initialise_screen(self) -> None:
        if self.app_screen is Screen.MAIN:
            self.input_state = None
            self.screen_switch_state = None
        elif self.app_screen in _INPUT_FORMS and self.input_state is None:
            title, prompts = _INPUT_FORMS[self.app_screen]
            self.input_state = MultiInputState(title, prompts)

    def handle_input(self, key: str) -> Outcome:
        """Process one key press as the main loop does."""
        self._initialise_screen()
        if self.app_screen is Screen.SUMMARY:
            return Outcome.EXIT if key in ("q", ESC) else Outcome.RESTART
        propagate = True if self.input_state is None else self.input_state.handle_key(key)
        if propagate and self.handle_key(key):
            return Outcome.EXIT
        self._initialise_screen()
        return Outcome.CONTINUE

    def _selected_item(self) -> ProjectItem | None:
        selected = self.tree_state.selected()
        return selected[-1] if selected else None

    def _show_summary(self, lines: list[str]) -> None:
        self.summary_text = lines
        self.app_screen = Screen.SUMMARY

    def handle_key(self, key: str) -> bool:
        """Act on a key for the current screen; return True if the app should exit."""
        screen = self.app_screen
        if key in (ESC, "q"):
            if screen is Screen.MAIN:
                return True
            if screen is Screen.SCREEN_SWITCH_MENU:
                self.screen_switch_state = None
            elif key == ESC and screen in (Screen.WORKTREE_REPO_CREATE, Screen.WORKTREE_CREATE):
                self.input_state = None
            self.app_screen = Screen.MAIN
            return False
        if key in ("j", DOWN):
            if screen is Screen.MAIN:
                self.tree_state.key_down()
            elif screen is Screen.SCREEN_SWITCH_MENU and self.screen_switch_state:
                self.screen_switch_state.down()
            return False
        if key in ("k", UP):
            if screen is Screen.MAIN:
                self.tree_state.key_up()
            elif screen is Screen.SCREEN_SWITCH_MENU and self.screen_switch_state:
                self.screen_switch_state.up()
            return False
        if key == " ":
            self.tree_state.toggle_selected()
        elif key == "x":
            item = self._selected_item()
            if item is not None and item.project_type in _DELETE_TARGETS:
                self.app_screen = _DELETE_TARGETS[item.project_type]
        elif key == "y":
            if screen is Screen.WORKTREE_DELETE:
                self._delete_worktree()
            elif screen in (Screen.WORKTREE_REPO_DELETE, Screen.NON_WORKTREE_REPO_DELETE):
                self._delete_repo()
        elif key == "n":
            if screen.is_delete():
                self.app_screen = Screen.MAIN
        elif key == ENTER:
            self._handle_enter()
        return False

    def _handle_enter(self) -> None:
        item = self._selected_item()
        if item is None:
            return
        screen = self.app_screen
        if screen is Screen.MAIN:
            self.screen_switch_state = _project_menu(item.project_type)
            self.app_screen = Screen.SCREEN_SWITCH_MENU
        elif screen is Screen.WORKTREE_CREATE:
            self._checkout_worktree()
        elif screen is Screen.WORKTREE_REPO_CREATE:
            self._checkout_repo(actions.checkout_worktree_repo)
        elif screen is Screen.NON_WORKTREE_REPO_CREATE:
            self._checkout_repo(actions.checkout_non_worktree_repo)
        elif screen is Screen.SCREEN_SWITCH_MENU:
            if self.screen_switch_state is not None:
                self.app_screen = self.screen_switch_state.target_screen()
            self.screen_switch_state = None

    def _delete_worktree(self) -> None:
        item = self._selected_item()
        if item is not None:
            self._show_summary(actions.delete_worktree(item.path))

    def _delete_repo(self) -> None:
        item = self._selected_item()
        if item is not None:
            self._show_summary(actions.delete_repo(item.path))

    def _checkout_repo(self, checkout: Callable[..., list[str]]) -> None:
        if self.input_state is None:
            return
        item = self._selected_item()
        if item is None:
            return
        link = self.input_state.content_at(0)
        dir_name = self.input_state.content_at(1)
        self._show_summary(checkout(item.path, link, dir_name))

    def _checkout_worktree(self) -> None:
        if self.input_state is None:
            return
        item = self._selected_item()
        if item is None:
            return
        branch = self.input_state.content_at(0)
        dir_name = self.input_state.content_at(1)
        self._show_summary(actions.checkout_worktree(item.path, branch, dir_name))