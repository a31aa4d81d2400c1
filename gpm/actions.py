"""Git and filesystem operations behind the application's menus.

Each operation returns the lines of a summary to show to the user.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

_GITDIR_CONTENTS = "gitdir: ./.bare"
_FETCH_REFSPEC = "+refs/heads/*:refs/remotes/origin/*"


def sanitise_git_dir_name(name: str) -> str:
    """Make a name safe to use as a project directory."""
    # Slashes would break the directory layout that is scanned for projects,
    # and git dislikes dots in worktree paths.
    return name.replace("/", "_").replace(".", "_")


def repo_name_from_link(link: str) -> str:
    """Default directory name for a repository link: the last path part without its suffix."""
    _, slash, after_slash = link.rpartition("/")
    if not slash:
        raise ValueError(f"Could not interpret '{link}' as git repository link.")
    default_name, dot, _ = after_slash.rpartition(".")
    if not dot:
        raise ValueError(f"Could not interpret '{link}' as git repository link.")
    return default_name


def _decode(stream: bytes | str | None, which: str) -> str:
    if stream is None:
        return ""
    if isinstance(stream, str):
        return stream
    try:
        return stream.decode("utf-8")
    except UnicodeDecodeError:
        return f"couldnt read {which} as utf-8"


def command_summary(description: str, result: subprocess.CompletedProcess) -> list[str]:
    """Summary lines for a finished command."""
    if result.returncode == 0:
        return [f"SUCCESS: {description}"]
    return [
        f"FAILURE: {description}",
        f"STDOUT: {_decode(result.stdout, 'stdout')}",
        f"STDERR: {_decode(result.stderr, 'stderr')}",
    ]


def _run(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(args, cwd=cwd, capture_output=True, check=False)


def _directory_name(chosen: str, fallback: str) -> str:
    return sanitise_git_dir_name(chosen if chosen else fallback)


def delete_worktree(path: Path | str) -> list[str]:
    """Remove a worktree through git from within its repository directory."""
    path = Path(path)
    result = _run(["git", "worktree", "remove", path.name], path.parent)
    return command_summary(f"Deleting Worktree {path.name}", result)


def delete_repo(path: Path | str) -> list[str]:
    """Delete a repository directory and everything in it."""
    path = Path(path)
    description = f"Deleting Repo {path.name}"
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        return [f"FAILURE: {description}", f"Error: {exc}"]
    return [f"SUCCESS: {description}"]


def checkout_worktree_repo(parent: Path | str, link: str, dir_name: str = "") -> list[str]:
    """Clone a repository bare into a new directory laid out for worktrees."""
    parent = Path(parent)
    if dir_name:
        name = sanitise_git_dir_name(dir_name)
    else:
        try:
            name = sanitise_git_dir_name(repo_name_from_link(link))
        except ValueError as exc:
            return [str(exc)]

    repo_path = parent / name
    try:
        repo_path.mkdir()
    except OSError as exc:
        return [f'FAILURE: Mkdir {name} at "{parent}"', f"Error: {exc}"]

    clone = _run(["git", "clone", "--bare", link, ".bare"], repo_path)
    if clone.returncode != 0:
        return command_summary("git clone", clone)

    git_file = repo_path / ".git"
    try:
        git_file.write_text(_GITDIR_CONTENTS, encoding="utf-8")
    except OSError as exc:
        return [f'Failed to write to .git file at "{git_file}"', f"Error: {exc}"]

    config = _run(["git", "config", "remote.origin.fetch", _FETCH_REFSPEC], repo_path)
    if config.returncode != 0:
        return command_summary("git config", config)

    fetch = _run(["git", "fetch", "origin"], repo_path)
    if fetch.returncode != 0:
        return command_summary("git fetch", fetch)

    return [f'Checked out new repo with name {name} "{repo_path}"']


def checkout_non_worktree_repo(parent: Path | str, link: str, dir_name: str = "") -> list[str]:
    """Clone a repository normally into the given directory."""
    parent = Path(parent)
    if dir_name:
        name = sanitise_git_dir_name(dir_name)
    else:
        try:
            name = sanitise_git_dir_name(repo_name_from_link(link))
        except ValueError as exc:
            return [str(exc)]

    result = _run(["git", "clone", link, name], parent)
    return command_summary(f"Checking out new Non-Worktree Repo {name}", result)


def checkout_worktree(repo_path: Path | str, branch: str, dir_name: str = "") -> list[str]:
    """Create a new branch as a worktree inside a worktree repository."""
    repo_path = Path(repo_path)
    name = _directory_name(dir_name, branch)
    result = _run(
        ["git", "worktree", "add", "-b", branch, name, "--guess-remote"], repo_path
    )
    return command_summary(
        f"Checking out new Worktree {name} in repo {repo_path.name}", result
    )