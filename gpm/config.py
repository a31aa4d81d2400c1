"""Configuration loading and building the project tree from it."""

from __future__ import annotations

import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w
from platformdirs import user_config_path

from gpm.project_item import ProjectItem, ProjectItemType, TreeItem


def expand_path(entry: str, home: Path) -> Path:
    """Resolve a configured path against the home directory."""
    home = Path(home)
    if entry.startswith("~/"):
        return home / entry[2:]
    return home / entry


def _by_name(item: TreeItem) -> str:
    return item.identifier.path.name


@dataclass
class Config:
    """Which directories hold projects and which projects stand alone."""

    project_directories: list[str] = field(default_factory=lambda: ["~/proj"])
    standalone_projects: list[str] = field(default_factory=lambda: ["~/.dotfiles"])

    def to_forest(self, home: Path | None = None) -> list[TreeItem]:
        """Scan the configured locations and build the project tree."""
        home = Path.home() if home is None else Path(home)
        forest: list[TreeItem] = []

        for proj in self.standalone_projects:
            path = expand_path(proj, home)
            forest.append(
                TreeItem.leaf(ProjectItem(path, ProjectItemType.NON_WORKTREE_REPO), path.name)
            )

        for project_dir in self.project_directories:
            path = expand_path(project_dir, home)
            try:
                entries = list(path.iterdir())
            except OSError:
                print(
                    f"{path} was set as a project directory but is not a directory. skipping.",
                    file=sys.stderr,
                )
                continue
            children = [
                child for child in map(_scan_subdir, entries) if child is not None
            ]
            children.sort(key=_by_name)
            forest.append(
                TreeItem(ProjectItem(path, ProjectItemType.PROJECT_DIRECTORY), path.name, children)
            )
        return forest


def _scan_subdir(subdir: Path) -> TreeItem | None:
    if not subdir.is_dir():
        return None
    try:
        contents = list(subdir.iterdir())
    except OSError:
        print(f"{subdir} was found as a subdir but is not a directory. skipping.", file=sys.stderr)
        return None

    if not any(entry.name == ".bare" for entry in contents):
        return TreeItem.leaf(ProjectItem(subdir, ProjectItemType.NON_WORKTREE_REPO), subdir.name)

    worktrees = sorted(
        (
            TreeItem.leaf(ProjectItem(entry, ProjectItemType.WORKTREE), entry.name)
            for entry in contents
            if entry.name not in (".bare", ".git")
        ),
        key=_by_name,
    )
    display_name = subdir.name if worktrees else f"▶ {subdir.name}"
    return TreeItem(ProjectItem(subdir, ProjectItemType.WORKTREE_REPO), display_name, worktrees)


def default_config_path() -> Path:
    """Where the configuration file lives by default."""
    return user_config_path("gpm") / "config.toml"


def _string_list(data: dict, key: str) -> list[str]:
    if key not in data:
        raise ValueError(f"config is missing '{key}'")
    value = data[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"config entry '{key}' must be a list of strings")
    return list(value)


def load_config(path: Path | str | None = None) -> Config:
    """Read the configuration, writing the default one first if it is missing."""
    path = default_config_path() if path is None else Path(path)
    if not path.exists():
        config = Config()
        path.parent.mkdir(parents=True, exist_ok=True)
        table = {
            "project_directories": config.project_directories,
            "standalone_projects": config.standalone_projects,
        }
        path.write_text(tomli_w.dumps(table), encoding="utf-8")
        return config
    with path.open("rb") as fh:
        data = tomllib.load(fh)
    return Config(
        project_directories=_string_list(data, "project_directories"),
        standalone_projects=_string_list(data, "standalone_projects"),
    )