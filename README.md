# gpm

A terminal tool for managing git projects and git worktrees.

gpm shows your projects as a tree. From there you can clone new
repositories, either as a plain checkout or as a bare repository laid out
for worktrees, add new branches as worktrees, and delete worktrees or
whole repositories, all without leaving the terminal.

## Installation

```
pip install .
```

gpm runs the `git` command, so git must be installed and on your `PATH`.
It draws its interface with curses and is meant for POSIX terminals.

## Running

```
gpm
```

To use a configuration file other than the default one:

```
gpm --config path/to/config.toml
```

If the configuration cannot be read, or lacks one of its two lists, gpm
prints `could not load config: ...` and exits with status 1.

## Configuration

By default the configuration is `config.toml` in the `gpm` directory of
your per-user configuration directory. If the file does not exist, gpm
writes it with these defaults and uses them:

```toml
project_directories = ["~/proj"]
standalone_projects = ["~/.dotfiles"]
```

Both keys are required and each must be a list of strings.

- `standalone_projects` are single repositories, shown as leaves at the top
  of the tree.
- `project_directories` are directories whose subdirectories are projects.
  A subdirectory that contains a `.bare` entry is treated as a worktree
  repository, and its other entries (except `.bare` and `.git`) are listed
  beneath it as worktrees. A worktree repository with no worktrees is shown
  with a leading `▶`. Any other subdirectory is a plain repository. Entries
  are sorted by name.

Paths are taken relative to your home directory; a leading `~/` is allowed.
A configured project directory that cannot be listed is skipped with a
warning on standard error.

## Keys

The tree starts collapsed with nothing selected; press `j` or Down to
select the first entry.

| Key | Action |
| --- | --- |
| `j` / Down | move down |
| `k` / Up | move up |
| Space | expand or collapse the selected entry |
| Enter | open the menu for the selected entry |
| `x` | delete the selected repository or worktree (asks first) |
| `q` / Esc | quit |

In a menu, move with `j`/`k` or the arrow keys, choose with Enter and leave
with `q` or Esc. When asked to confirm a deletion, press `y` to go ahead or
`n` to cancel.

In an input form, type into the highlighted box (Left, Right, Home, End,
Backspace and Delete edit the text), press Tab to move to the next box,
Enter to run the action and Esc to cancel.

The menus offered depend on what is selected:

- a project directory: check out a new repository in worktree mode or in
  non-worktree mode;
- a worktree repository: add a new branch as a worktree, or delete the
  whole repository directory;
- a worktree or a plain repository: delete it.

## What the actions do

- **Checkout in worktree mode** creates a new directory in the project
  directory, runs `git clone --bare <link> .bare` inside it, writes a `.git`
  file containing `gitdir: ./.bare`, sets `remote.origin.fetch` to
  `+refs/heads/*:refs/remotes/origin/*` and runs `git fetch origin`.
- **Checkout in non-worktree mode** runs `git clone <link> <name>` in the
  project directory.
- **New branch as worktree** runs
  `git worktree add -b <branch> <name> --guess-remote` in the worktree
  repository.
- **Deleting a worktree** runs `git worktree remove <name>` from its
  repository directory.
- **Deleting a repository** removes its directory and everything in it.

Leaving the directory name blank picks a default: the branch name for a
new worktree, or for a clone the last part of the repository link with its
suffix removed (so `https://example.com/team/tool.git` gives `tool`).
Slashes and dots in directory names are replaced with underscores.

After every action gpm shows a summary, including the command's standard
output and standard error when it failed. Press `q` or Esc there to quit,
or any other key to rescan the projects and carry on.

## Using it from Python

The operations behind the menus are plain functions in `gpm.actions`
(`checkout_worktree_repo`, `checkout_non_worktree_repo`,
`checkout_worktree`, `delete_worktree`, `delete_repo`), each returning the
summary lines shown to the user. `gpm.config.load_config` reads a
configuration and `Config.to_forest` scans it into a tree of `TreeItem`
nodes.

## What gpm does not do

gpm does not open, enter or switch to a project, and it does not show git
status for anything in the tree. Deleting a worktree does not delete its
branch.