import subprocess
from unittest import mock

import pytest

from gpm.app import App, Outcome, TreeState
from gpm.multi_input import DOWN, ENTER, ESC, TAB, UP
from gpm.project_item import ProjectItem, ProjectItemType, TreeItem
from gpm.screen import Screen


@pytest.fixture
def forest(tmp_path):
    wt = TreeItem.leaf(
        ProjectItem(tmp_path / "proj" / "repo" / "main", ProjectItemType.WORKTREE), "main"
    )
    repo = TreeItem(
        ProjectItem(tmp_path / "proj" / "repo", ProjectItemType.WORKTREE_REPO), "repo", [wt]
    )
    projdir = TreeItem(
        ProjectItem(tmp_path / "proj", ProjectItemType.PROJECT_DIRECTORY), "proj", [repo]
    )
    dots = TreeItem.leaf(
        ProjectItem(tmp_path / "dots", ProjectItemType.NON_WORKTREE_REPO), "dots"
    )
    return [dots, projdir]


def _type(app, text):
    for ch in text:
        app.handle_input(ch)


def _select_repo(app):
    app.handle_input("j")
    app.handle_input("j")
    app.handle_input(" ")
    app.handle_input("j")


def test_key_down_from_nothing_selects_first(forest):
    state = TreeState(forest)
    assert state.selected() == []
    state.key_down()
    assert state.selected() == [forest[0].identifier]


def test_key_up_from_nothing_selects_last(forest):
    state = TreeState(forest)
    state.key_up()
    assert state.selected() == [forest[1].identifier]


def test_key_down_clamps_at_end(forest):
    state = TreeState(forest)
    for _ in range(5):
        state.key_down()
    assert state.selected() == [forest[1].identifier]
    state.key_up()
    state.key_up()
    state.key_up()
    assert state.selected() == [forest[0].identifier]


def test_toggle_opens_and_closes(forest):
    state = TreeState(forest)
    assert len(state.visible_rows()) == 2
    state.key_down()
    state.key_down()
    assert state.toggle_selected() is True
    rows = state.visible_rows()
    assert [item for _, item in rows] == [forest[0], forest[1], forest[1].children[0]]
    state.toggle_selected()
    assert len(state.visible_rows()) == 2


def test_toggle_without_selection(forest):
    state = TreeState(forest)
    assert state.toggle_selected() is False
    assert state.opened == set()


def test_selected_is_path_from_root(forest):
    state = TreeState(forest)
    state.key_down()
    state.key_down()
    state.toggle_selected()
    state.key_down()
    repo = forest[1].children[0]
    assert state.selected() == [forest[1].identifier, repo.identifier]


def test_empty_tree_selects_nothing():
    state = TreeState([])
    state.key_down()
    assert state.selected() == []
    assert state.visible_rows() == []


@pytest.mark.parametrize("key", [ESC, "q"])
def test_exit_keys_on_main(forest, key):
    app = App(forest)
    assert app.handle_input(key) is Outcome.EXIT


def test_arrow_keys_move_selection(forest):
    app = App(forest)
    assert app.handle_input(DOWN) is Outcome.CONTINUE
    app.handle_input(DOWN)
    app.handle_input(UP)
    assert app.tree_state.selected() == [forest[0].identifier]


def test_enter_without_selection_does_nothing(forest):
    app = App(forest)
    app.handle_input(ENTER)
    assert app.app_screen is Screen.MAIN
    assert app.screen_switch_state is None


def test_enter_on_worktree_repo_opens_menu(forest):
    app = App(forest)
    _select_repo(app)
    app.handle_input(ENTER)
    assert app.app_screen is Screen.SCREEN_SWITCH_MENU
    assert app.screen_switch_state.title == " Project Worktree Menu "
    assert app.screen_switch_state.target_screen() is Screen.WORKTREE_CREATE


def test_menu_navigation_wraps(forest):
    app = App(forest)
    _select_repo(app)
    app.handle_input(ENTER)
    app.handle_input("j")
    assert app.screen_switch_state.target_screen() is Screen.WORKTREE_REPO_DELETE
    app.handle_input("k")
    assert app.screen_switch_state.target_screen() is Screen.WORKTREE_CREATE
    # the tree selection is untouched while the menu is open
    assert app.tree_state.selected()[-1] == forest[1].children[0].identifier


def test_menu_q_returns_to_main(forest):
    app = App(forest)
    _select_repo(app)
    app.handle_input(ENTER)
    assert app.handle_input("q") is Outcome.CONTINUE
    assert app.app_screen is Screen.MAIN
    assert app.screen_switch_state is None


def test_menu_enter_opens_input_form(forest):
    app = App(forest)
    _select_repo(app)
    app.handle_input(ENTER)
    app.handle_input(ENTER)
    assert app.app_screen is Screen.WORKTREE_CREATE
    assert app.input_state.title == " Create New Branch as Worktree "
    assert [box.prompt for box in app.input_state.boxes] == [
        "Branch Name",
        "Directory Name (blank for default)",
    ]


def test_typing_goes_into_input_not_tree(forest):
    app = App(forest)
    _select_repo(app)
    app.handle_input(ENTER)
    app.handle_input(ENTER)
    selected = app.tree_state.selected()
    _type(app, "jqx")
    assert app.input_state.content_at(0) == "jqx"
    assert app.app_screen is Screen.WORKTREE_CREATE
    assert app.tree_state.selected() == selected


def test_escape_from_input_returns_to_main(forest):
    app = App(forest)
    _select_repo(app)
    app.handle_input(ENTER)
    app.handle_input(ENTER)
    app.handle_input(ESC)
    assert app.app_screen is Screen.MAIN
    assert app.input_state is None


def test_checkout_worktree_runs_git(forest):
    app = App(forest)
    _select_repo(app)
    app.handle_input(ENTER)
    app.handle_input(ENTER)
    _type(app, "feature/x")
    done = subprocess.CompletedProcess(args=[], returncode=0, stdout=b"", stderr=b"")
    with mock.patch("subprocess.run", return_value=done) as run:
        app.handle_input(ENTER)
    repo_path = forest[1].children[0].identifier.path
    args, kwargs = run.call_args
    assert args[0] == ["git", "worktree", "add", "-b", "feature/x", "feature_x", "--guess-remote"]
    assert kwargs["cwd"] == repo_path
    assert app.app_screen is Screen.SUMMARY
    assert app.summary_text == ["SUCCESS: Checking out new Worktree feature_x in repo repo"]


def test_checkout_worktree_uses_chosen_dir(forest):
    app = App(forest)
    _select_repo(app)
    app.handle_input(ENTER)
    app.handle_input(ENTER)
    _type(app, "fix")
    app.handle_input(TAB)
    _type(app, "dirname")
    done = subprocess.CompletedProcess(args=[], returncode=0, stdout=b"", stderr=b"")
    with mock.patch("subprocess.run", return_value=done) as run:
        outcome = app.handle_input(ENTER)
    assert outcome is Outcome.CONTINUE
    assert run.call_args[0][0][4:6] == ["fix", "dirname"]
    assert app.app_screen is Screen.SUMMARY
    assert app.summary_text == ["SUCCESS: Checking out new Worktree dirname in repo repo"]


def test_bad_link_reports_error(forest):
    app = App(forest)
    app.handle_input("j")
    app.handle_input("j")
    app.handle_input(ENTER)
    app.handle_input(ENTER)
    assert app.app_screen is Screen.WORKTREE_REPO_CREATE
    _type(app, "nolink")
    app.handle_input(ENTER)
    assert app.app_screen is Screen.SUMMARY
    assert app.summary_text == ["Could not interpret 'nolink' as git repository link."]


def test_delete_prompt_and_cancel(forest):
    app = App(forest)
    app.handle_input("j")
    app.handle_input("x")
    assert app.app_screen is Screen.NON_WORKTREE_REPO_DELETE
    app.handle_input("n")
    assert app.app_screen is Screen.MAIN


def test_x_on_project_directory_does_nothing(forest):
    app = App(forest)
    app.handle_input("k")
    app.handle_input("x")
    assert app.app_screen is Screen.MAIN


def test_delete_repo_removes_directory(forest, tmp_path):
    target = tmp_path / "dots"
    target.mkdir()
    (target / "file").write_text("content")
    app = App(forest)
    app.handle_input("j")
    app.handle_input("x")
    app.handle_input("y")
    assert not target.exists()
    assert app.app_screen is Screen.SUMMARY
    assert app.summary_text == ["SUCCESS: Deleting Repo dots"]


def test_summary_keys(forest, tmp_path):
    (tmp_path / "dots").mkdir()
    app = App(forest)
    app.handle_input("j")
    app.handle_input("x")
    app.handle_input("y")
    assert app.handle_input("a") is Outcome.RESTART
    assert app.handle_input("q") is Outcome.EXIT
    assert app.handle_input(ESC) is Outcome.EXIT