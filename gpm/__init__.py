"""Manage git projects and worktrees from a curses terminal interface."""

__version__ = "1.1.0"
__all__ = ["__version__"]