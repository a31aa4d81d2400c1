from pathlib import Path

import pytest

from gpm.config import Config, expand_path, load_config
from gpm.project_item import ProjectItemType


@pytest.fixture
def home(tmp_path):
    proj = tmp_path / "proj"
    (proj / "alpha").mkdir(parents=True)
    beta = proj / "beta"
    for name in (".bare", "main", "feature"):
        (beta / name).mkdir(parents=True)
    (beta / ".git").write_text("gitdir: ./.bare")
    (proj / "gamma" / ".bare").mkdir(parents=True)
    (proj / "notes.txt").write_text("x")
    (tmp_path / ".dotfiles").mkdir()
    return tmp_path


def test_default_config():
    config = Config()
    assert config.project_directories == ["~/proj"]
    assert config.standalone_projects == ["~/.dotfiles"]


def test_expand_path_tilde_and_relative():
    home = Path("/home/someone")
    assert expand_path("~/proj", home) == home / "proj"
    assert expand_path("proj", home) == home / "proj"


def test_forest_structure(home):
    forest = Config().to_forest(home)
    standalone, project_dir = forest
    assert standalone.identifier.project_type is ProjectItemType.NON_WORKTREE_REPO
    assert standalone.text == ".dotfiles"
    assert project_dir.identifier.project_type is ProjectItemType.PROJECT_DIRECTORY
    assert project_dir.identifier.path == home / "proj"
    assert [c.text for c in project_dir.children] == ["alpha", "beta", "▶ gamma"]


def test_worktree_repo_children(home):
    project_dir = Config().to_forest(home)[1]
    alpha, beta, gamma = project_dir.children
    assert alpha.identifier.project_type is ProjectItemType.NON_WORKTREE_REPO
    assert beta.identifier.project_type is ProjectItemType.WORKTREE_REPO
    assert [c.text for c in beta.children] == ["feature", "main"]
    assert all(c.identifier.project_type is ProjectItemType.WORKTREE for c in beta.children)
    assert gamma.children == []


def test_missing_project_dir_is_skipped(tmp_path, capsys):
    config = Config(project_directories=["~/nowhere"], standalone_projects=[])
    assert config.to_forest(tmp_path) == []
    assert "was set as a project directory" in capsys.readouterr().err


def test_load_config_creates_default(tmp_path):
    path = tmp_path / "sub" / "config.toml"
    created = load_config(path)
    assert path.exists()
    assert load_config(path) == created == Config()


def test_load_config_reads_values(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('project_directories = ["~/code"]\nstandalone_projects = []\n')
    config = load_config(path)
    assert config.project_directories == ["~/code"]
    assert config.standalone_projects == []


def test_load_config_missing_key(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('project_directories = ["~/code"]\n')
    with pytest.raises(ValueError):
        load_config(path)


def test_load_config_wrong_type(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('project_directories = "x"\nstandalone_projects = []\n')
    with pytest.raises(ValueError):
        load_config(path)