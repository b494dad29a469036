"""Key events to actions, and actions to state transitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

from jqi.state import SessionState

# Returns (total_lines, visible_height) for the content currently shown.
ScrollBounds = Callable[[], tuple[int, int]]


class ActionKind(Enum):
    QUIT = auto()
    INPUT_CHAR = auto()
    BACKSPACE = auto()
    COMMIT = auto()
    SCROLL_UP = auto()
    SCROLL_DOWN = auto()
    ACCEPT_SUGGESTION = auto()
    NO_OP = auto()


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    char: str = ""  # only set for INPUT_CHAR


QUIT = Action(ActionKind.QUIT)
BACKSPACE = Action(ActionKind.BACKSPACE)
COMMIT = Action(ActionKind.COMMIT)
SCROLL_UP = Action(ActionKind.SCROLL_UP)
SCROLL_DOWN = Action(ActionKind.SCROLL_DOWN)
ACCEPT_SUGGESTION = Action(ActionKind.ACCEPT_SUGGESTION)
NO_OP = Action(ActionKind.NO_OP)


def input_char(ch: str) -> Action:
    return Action(ActionKind.INPUT_CHAR, ch)


_KEY_ACTIONS: dict[str, Action] = {
    "escape": QUIT,
    "ctrl+c": QUIT,
    "enter": COMMIT,
    "backspace": BACKSPACE,
    "up": SCROLL_UP,
    "down": SCROLL_DOWN,
    "tab": ACCEPT_SUGGESTION,
}


class ActionDispatcher:
    """Maps Textual-style key events (``key`` / ``character``) to actions."""

    def get_action(self, event) -> Action:
        key = event.key
        char = event.character

        action = _KEY_ACTIONS.get(key)
        if action is not None:
            return action
        if char in ("\n", "\r"):
            return COMMIT
        if char and len(char) == 1 and char.isprintable():
            return input_char(char)
        return NO_OP

    def apply(
        self,
        state: SessionState,
        action: Action,
        bounds: ScrollBounds | None = None,
    ) -> None:
        kind = action.kind

        if kind is ActionKind.QUIT:
            state.set_exit(True)
        elif kind is ActionKind.INPUT_CHAR:
            state.push_char(action.char)
            state.reset_scroll()
        elif kind is ActionKind.BACKSPACE:
            if state.input:
                state.pop_char()
            state.reset_scroll()
        elif kind is ActionKind.COMMIT:
            state.commit()
        elif kind is ActionKind.SCROLL_UP:
            state.scroll_up()
        elif kind is ActionKind.SCROLL_DOWN:
            if bounds is None:
                raise ValueError("SCROLL_DOWN needs the current content bounds")
            total_lines, visible_height = bounds()
            state.scroll_down_bounded(total_lines, visible_height)
        elif kind is ActionKind.ACCEPT_SUGGESTION:
            state.accept_suggestion()
