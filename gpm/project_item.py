"""Items shown in the project tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path


class ProjectItemType(Enum):
    """What kind of thing a tree entry stands for."""

    NON_WORKTREE_REPO = auto()
    WORKTREE = auto()
    WORKTREE_REPO = auto()
    PROJECT_DIRECTORY = auto()


@dataclass(frozen=True)
class ProjectItem:
    """A path on disk together with its kind."""

    path: Path
    project_type: ProjectItemType
    dirty: bool = False


@dataclass
class TreeItem:
    """A node of the project tree, identified by its project item."""

    identifier: ProjectItem
    text: str
    children: list[TreeItem] = field(default_factory=list)

    def __post_init__(self) -> None:
        seen: set[ProjectItem] = set()
        for child in self.children:
            if child.identifier in seen:
                raise ValueError(f"duplicate child identifier: {child.identifier.path}")
            seen.add(child.identifier)

    @classmethod
    def leaf(cls, identifier: ProjectItem, text: str) -> TreeItem:
        """Build a node without children."""
        return cls(identifier, text)

    def walk(self) -> Iterator[TreeItem]:
        """Yield this node and then all its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()