"""A small menu that picks the next screen."""

from __future__ import annotations

from dataclasses import dataclass, field

from gpm.screen import Screen


@dataclass
class ScreenSwitcherState:
    """A titled list of options, each leading to a screen, with one selected."""

    title: str
    options: list[tuple[str, Screen]] = field(default_factory=list)
    idx: int = 0

    def up(self) -> None:
        self.idx = (self.idx + 1) % len(self.options)

    def down(self) -> None:
        if self.idx == 0:
            self.idx = len(self.options) - 1
        else:
            self.idx -= 1

    def target_screen(self) -> Screen:
        """The screen of the selected option."""
        return self.options[self.idx][1]

    def formatted_lines(self) -> list[tuple[str, bool]]:
        """Display text of each option and whether it is the highlighted one."""
        return [
            (f">> {text} <<", True) if i == self.idx else (text, False)
            for i, (text, _) in enumerate(self.options)
        ]

    def __len__(self) -> int:
        return len(self.options)


class ScreenSwitcherStateBuilder:
    """Collects options and builds a ScreenSwitcherState."""

    def __init__(self, title: str) -> None:
        self.title = title
        self.options: list[tuple[str, Screen]] = []

    def with_option(self, text: str, target_screen: Screen) -> ScreenSwitcherStateBuilder:
        self.options.append((text, target_screen))
        return self

    def build(self) -> ScreenSwitcherState:
        return ScreenSwitcherState(self.title, list(self.options))