"""Terminal front end: drawing the application with curses and running it."""

from __future__ import annotations

import argparse
import curses
import sys
import tomllib
import unicodedata
from dataclasses import dataclass

from gpm.app import DELETE_LABELS, App, Outcome
from gpm.config import Config, load_config
from gpm.multi_input import (
    BACKSPACE,
    DELETE,
    DOWN,
    END,
    ENTER,
    ESC,
    HOME,
    LEFT,
    RIGHT,
    TAB,
    UP,
)
from gpm.screen import Screen

_SUMMARY_FOOTER = "Press q / Escape to exit, or any other key to continue editing."
_TREE_HIGHLIGHT = ">> "
_NODE_OPEN = "\u25bc "
_NODE_CLOSED = "\u25b6 "
_NODE_LEAF = "  "

_INPUT_PAIR = 1
_HIGHLIGHT_PAIR = 2


@dataclass(frozen=True)
class Rect:
    """A rectangle of terminal cells."""

    x: int
    y: int
    width: int
    height: int

    def inner(self) -> Rect:
        """The area inside a one-cell border."""
        return Rect(
            self.x + 1, self.y + 1, max(self.width - 2, 0), max(self.height - 2, 0)
        )


def _centered(total: int, size: int) -> tuple[int, int]:
    size = max(min(size, total), 0)
    return (total - size) // 2, size


def popup_list(area: Rect, percent_x: int, list_items: int) -> Rect:
    """A centred popup wide enough for percent_x of the area and tall enough for the items."""
    dy, height = _centered(area.height, list_items + 2)
    dx, width = _centered(area.width, area.width * percent_x // 100)
    return Rect(area.x + dx, area.y + dy, width, height)


def popup_inputs(area: Rect, percent_x: int, percent_y: int) -> Rect:
    """A centred popup taking the given percentages of the area."""
    dy, height = _centered(area.height, area.height * percent_y // 100)
    dx, width = _centered(area.width, area.width * percent_x // 100)
    return Rect(area.x + dx, area.y + dy, width, height)


_NAMED_KEYS = {
    curses.KEY_UP: UP,
    curses.KEY_DOWN: DOWN,
    curses.KEY_LEFT: LEFT,
    curses.KEY_RIGHT: RIGHT,
    curses.KEY_HOME: HOME,
    curses.KEY_END: END,
    curses.KEY_DC: DELETE,
    curses.KEY_BACKSPACE: BACKSPACE,
    curses.KEY_ENTER: ENTER,
}

_CONTROL_CHARS = {
    "\x1b": ESC,
    "\n": ENTER,
    "\r": ENTER,
    "\t": TAB,
    "\x7f": BACKSPACE,
    "\x08": BACKSPACE,
}


def translate_key(code: int | str) -> str | None:
    """Turn a curses key (an int or a one-character string) into an application key."""
    if isinstance(code, int):
        if code in _NAMED_KEYS:
            return _NAMED_KEYS[code]
        if not 0 <= code < 256:
            return None
        code = chr(code)
    if len(code) != 1:
        return None
    if code in _CONTROL_CHARS:
        return _CONTROL_CHARS[code]
    return code if code.isprintable() else None


def _cell_width(char: str) -> int:
    if unicodedata.combining(char):
        return 0
    return 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1


def _skip_columns(text: str, columns: int) -> str:
    done = 0
    for i, char in enumerate(text):
        if done >= columns:
            return text[i:]
        done += _cell_width(char)
    return ""


def _color(pair: int, fallback: int) -> int:
    try:
        if curses.has_colors():
            return curses.color_pair(pair)
    except curses.error:
        pass
    return fallback


def _put(win, y: int, x: int, text: str, attr: int = 0, limit: Rect | None = None) -> None:
    """Write text clipped to the window and, if given, to a rectangle."""
    max_y, max_x = win.getmaxyx()
    left, right, top, bottom = 0, max_x, 0, max_y
    if limit is not None:
        left, right = max(left, limit.x), min(right, limit.x + limit.width)
        top, bottom = max(top, limit.y), min(bottom, limit.y + limit.height)
    if not top <= y < bottom:
        return
    if x < left:
        text = text[left - x :]
        x = left
    text = text[: max(right - x, 0)]
    if not text:
        return
    try:
        win.addstr(y, x, text, attr)
    except curses.error:
        # Writing the bottom-right cell moves the cursor off screen; the text is drawn.
        pass


def _box(win, rect: Rect, title: str = "", attr: int = 0) -> None:
    """Clear a rectangle and draw a border with an optional title."""
    if rect.width < 2 or rect.height < 2:
        return
    for row in range(rect.y, rect.y + rect.height):
        _put(win, row, rect.x, " " * rect.width, attr)
    horizontal = "\u2500" * (rect.width - 2)
    _put(win, rect.y, rect.x, f"\u250c{horizontal}\u2510", attr)
    _put(win, rect.y + rect.height - 1, rect.x, f"\u2514{horizontal}\u2518", attr)
    for row in range(rect.y + 1, rect.y + rect.height - 1):
        _put(win, row, rect.x, "\u2502", attr)
        _put(win, row, rect.x + rect.width - 1, "\u2502", attr)
    if title:
        _put(win, rect.y, rect.x + 1, title, attr, limit=rect.inner() if False else Rect(
            rect.x + 1, rect.y, rect.width - 2, 1))


def _centered_line(win, y: int, rect: Rect, text: str, attr: int = 0) -> None:
    x = rect.x + max((rect.width - len(text)) // 2, 0)
    _put(win, y, x, text, attr, limit=rect)


def _draw_summary(win, area: Rect, app: App) -> None:
    popup = popup_inputs(area, 90, 90)
    _box(win, popup)
    inner = popup.inner()
    lines: list[tuple[str, int]] = [("Execution Summary", curses.A_BOLD)]
    for text in app.summary_text:
        lines.append(("", 0))
        lines.append((text, 0))
    lines.append((_SUMMARY_FOOTER, curses.A_BOLD))
    for offset, (text, attr) in enumerate(lines[: inner.height]):
        _centered_line(win, inner.y + offset, inner, text, attr)


def _draw_tree(win, area: Rect, app: App) -> None:
    _box(win, area, "Projects")
    inner = area.inner()
    rows = app.tree_state.visible_rows()
    selected = tuple(app.tree_state.selected())
    selected_index = next((i for i, (ident, _) in enumerate(rows) if ident == selected), 0)
    offset = max(selected_index - inner.height + 1, 0)
    highlight = _color(_HIGHLIGHT_PAIR, curses.A_REVERSE) | curses.A_BOLD
    for line, (ident, item) in enumerate(rows[offset : offset + inner.height]):
        is_selected = ident == selected
        if not item.children:
            symbol = _NODE_LEAF
        elif ident in app.tree_state.opened:
            symbol = _NODE_OPEN
        else:
            symbol = _NODE_CLOSED
        prefix = _TREE_HIGHLIGHT if is_selected else " " * len(_TREE_HIGHLIGHT)
        indent = "  " * (len(ident) - 1)
        text = f"{prefix}{indent}{symbol}{item.text}"
        if is_selected:
            text = text.ljust(inner.width)
        _put(win, inner.y + line, inner.x, text, highlight if is_selected else 0, limit=inner)


def _draw_delete(win, area: Rect, screen: Screen) -> None:
    popup = popup_list(area, 25, 1)
    _box(win, popup)
    inner = popup.inner()
    _centered_line(win, inner.y, inner, f"Delete {DELETE_LABELS[screen]} [Y/n]?")


def _draw_menu(win, area: Rect, app: App) -> None:
    state = app.screen_switch_state
    if state is None:
        return
    popup = popup_list(area, 50, len(state))
    _box(win, popup, state.title)
    inner = popup.inner()
    for offset, (text, highlighted) in enumerate(state.formatted_lines()[: inner.height]):
        _centered_line(win, inner.y + offset, inner, text, curses.A_BOLD if highlighted else 0)


def _draw_inputs(win, area: Rect, app: App) -> None:
    state = app.input_state
    if state is None:
        return
    popup = popup_inputs(area, 50, 20)
    _box(win, popup, state.title)
    column_x = popup.x + 3
    column_width = max(popup.width - 6, 0)
    top = popup.y + max(popup.height - 3 * len(state.boxes), 0) // 2
    width = max(popup.width, 3) - 3
    focused = _color(_INPUT_PAIR, curses.A_BOLD)
    for i, box in enumerate(state.boxes):
        rect = Rect(column_x, top + 3 * i, column_width, 3)
        if rect.y + rect.height > popup.y + popup.height:
            break
        attr = focused if i == state.idx else 0
        _box(win, rect, box.prompt, attr)
        inner = rect.inner()
        shown = _skip_columns(box.value, box.visual_scroll(width))
        _put(win, inner.y, inner.x, shown, attr, limit=inner)


def draw(stdscr, app: App) -> None:
    """Draw the whole application on a curses window."""
    height, width = stdscr.getmaxyx()
    area = Rect(0, 0, width, height)
    stdscr.erase()
    screen = app.app_screen
    if screen is Screen.SUMMARY:
        _draw_summary(stdscr, area, app)
    else:
        _draw_tree(stdscr, area, app)
        if screen.is_delete():
            _draw_delete(stdscr, area, screen)
        elif screen is Screen.SCREEN_SWITCH_MENU:
            _draw_menu(stdscr, area, app)
        elif screen.is_create():
            _draw_inputs(stdscr, area, app)
    stdscr.refresh()


def _setup_terminal(stdscr) -> None:
    stdscr.keypad(True)
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    try:
        if curses.has_colors():
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(_INPUT_PAIR, curses.COLOR_YELLOW, -1)
            curses.init_pair(_HIGHLIGHT_PAIR, curses.COLOR_BLACK, curses.COLOR_GREEN)
    except curses.error:
        pass


def run(stdscr, config: Config) -> None:
    """Run the application until the user exits, rescanning projects after each summary."""
    _setup_terminal(stdscr)
    while True:
        app = App(config.to_forest())
        while True:
            draw(stdscr, app)
            code = stdscr.get_wch()
            if code == curses.KEY_RESIZE:
                continue
            key = translate_key(code)
            if key is None:
                if app.app_screen is Screen.SUMMARY:
                    break
                continue
            outcome = app.handle_input(key)
            if outcome is Outcome.EXIT:
                return
            if outcome is Outcome.RESTART:
                break


def main(argv: list[str] | None = None) -> int:
    """Start the project manager in the terminal."""
    parser = argparse.ArgumentParser(
        prog="gpm", description="Manage git worktrees and projects from the terminal."
    )
    parser.add_argument("--config", help="path of the configuration file")
    args = parser.parse_args(argv)
    try:
        config = load_config(args.config)
    except (OSError, ValueError, tomllib.TOMLDecodeError) as exc:
        print(f"could not load config: {exc}", file=sys.stderr)
        return 1
    curses.wrapper(run, config)
    return 0


if __name__ == "__main__":
    sys.exit(main())