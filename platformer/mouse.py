"""Window-message driven mouse state tracking with absolute and relative modes."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace

MOUSE_MOVE_ABSOLUTE = 0x01
MOUSE_VIRTUAL_DESKTOP = 0x02
XBUTTON1 = 0x0001
XBUTTON2 = 0x0002

_RAW_ABSOLUTE_RANGE = 65535.0


class PositionMode(enum.Enum):
    """How the reported position is to be read."""

    ABSOLUTE = 0
    RELATIVE = 1


class Message(enum.IntEnum):
    """Window messages the mouse reacts to."""

    ACTIVATEAPP = 0x001C
    INPUT = 0x00FF
    MOUSEMOVE = 0x0200
    LBUTTONDOWN = 0x0201
    LBUTTONUP = 0x0202
    RBUTTONDOWN = 0x0204
    RBUTTONUP = 0x0205
    MBUTTONDOWN = 0x0207
    MBUTTONUP = 0x0208
    MOUSEWHEEL = 0x020A
    XBUTTONDOWN = 0x020B
    XBUTTONUP = 0x020C
    MOUSEHOVER = 0x02A1


@dataclass
class MouseState:
    """Snapshot of buttons, position and wheel."""

    left_button: bool = False
    middle_button: bool = False
    right_button: bool = False
    x_button1: bool = False
    x_button2: bool = False
    x: int = 0
    y: int = 0
    scroll_wheel_value: int = 0
    position_mode: PositionMode = PositionMode.ABSOLUTE


def _signed16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _low_word(value: int) -> int:
    return value & 0xFFFF


def _high_word(value: int) -> int:
    return (value >> 16) & 0xFFFF


_BUTTONS = {
    Message.LBUTTONDOWN: ("left_button", True),
    Message.LBUTTONUP: ("left_button", False),
    Message.RBUTTONDOWN: ("right_button", True),
    Message.RBUTTONUP: ("right_button", False),
    Message.MBUTTONDOWN: ("middle_button", True),
    Message.MBUTTONUP: ("middle_button", False),
}

_X_BUTTONS = {XBUTTON1: "x_button1", XBUTTON2: "x_button2"}


class Mouse:
    """Mouse tracker fed by window messages and raw input.

    Requests from ``set_mode`` and ``reset_scroll_wheel_value`` are queued and
    take effect on the next processed message, one per message.
    """

    def __init__(self, virtual_screen: tuple[int, int]) -> None:
        self.virtual_screen = virtual_screen
        self._state = MouseState()
        self._mode = PositionMode.ABSOLUTE
        self._scroll_reset_pending = False
        self._relative_read = False
        self._absolute_requested = False
        self._relative_requested = False
        self._last_x = 0
        self._last_y = 0
        self._relative_origin: tuple[int, int] | None = None
        self.in_focus = True
        self.cursor_display_count = 0
        self.cursor_clipped = False
        self.cursor_position = (0, 0)

    @property
    def mode(self) -> PositionMode:
        return self._mode

    def get_state(self) -> MouseState:
        """Return a copy of the current state; relative deltas are read once."""
        state = replace(self._state, position_mode=self._mode)
        if self._scroll_reset_pending:
            state.scroll_wheel_value = 0
        if state.position_mode is PositionMode.RELATIVE:
            if self._relative_read:
                state.x = 0
                state.y = 0
            else:
                self._relative_read = True
        return state

    def reset_scroll_wheel_value(self) -> None:
        """Request the accumulated wheel value be cleared."""
        self._scroll_reset_pending = True

    def set_mode(self, mode: PositionMode) -> None:
        """Request a switch of position mode."""
        if self._mode is mode:
            return
        if mode is PositionMode.ABSOLUTE:
            self._absolute_requested = True
        else:
            self._relative_requested = True

    def is_visible(self) -> bool:
        if self._mode is PositionMode.RELATIVE:
            return False
        return self.cursor_display_count >= 0

    def set_visible(self, visible: bool) -> None:
        if self._mode is PositionMode.RELATIVE:
            return
        if self.is_visible() != visible:
            self._show_cursor(visible)

    def _show_cursor(self, show: bool) -> None:
        self.cursor_display_count += 1 if show else -1

    def _drain_one_request(self) -> None:
        if self._scroll_reset_pending:
            self._state.scroll_wheel_value = 0
            self._scroll_reset_pending = False
        elif self._absolute_requested:
            self._absolute_requested = False
            self._mode = PositionMode.ABSOLUTE
            self.cursor_clipped = False
            self._show_cursor(True)
            self.cursor_position = (self._last_x, self._last_y)
            self._state.x = self._last_x
            self._state.y = self._last_y
        elif self._relative_requested:
            self._relative_requested = False
            self._relative_read = False
            self._mode = PositionMode.RELATIVE
            self._state.x = self._state.y = 0
            self._relative_origin = None
            self._show_cursor(False)
            self.cursor_clipped = True

    def process_message(self, message: int, wparam: int, lparam: int) -> None:
        """Handle one window message.

        Raw input data cannot travel in ``lparam`` here; feed it through
        ``process_raw_input`` instead.
        """
        self._drain_one_request()

        if message == Message.ACTIVATEAPP:
            if wparam:
                self.in_focus = True
                if self._mode is PositionMode.RELATIVE:
                    self._state.x = self._state.y = 0
                    self._show_cursor(False)
                    self.cursor_clipped = True
            else:
                wheel = self._state.scroll_wheel_value
                self._state = MouseState(scroll_wheel_value=wheel)
                self.in_focus = False
            return

        if message == Message.INPUT:
            return

        if message == Message.MOUSEWHEEL:
            self._state.scroll_wheel_value += _signed16(_high_word(wparam))
            return

        if message in _BUTTONS:
            name, pressed = _BUTTONS[message]
            setattr(self._state, name, pressed)
        elif message in (Message.XBUTTONDOWN, Message.XBUTTONUP):
            name = _X_BUTTONS.get(_high_word(wparam))
            if name is not None:
                setattr(self._state, name, message == Message.XBUTTONDOWN)
        elif message not in (Message.MOUSEMOVE, Message.MOUSEHOVER):
            return

        if self._mode is PositionMode.ABSOLUTE:
            x = _signed16(_low_word(lparam))
            y = _signed16(_high_word(lparam))
            self._state.x = self._last_x = x
            self._state.y = self._last_y = y

    def process_raw_input(self, flags: int, last_x: int, last_y: int) -> None:
        """Handle a raw mouse input report; only used in relative mode."""
        self._drain_one_request()
        if not (self.in_focus and self._mode is PositionMode.RELATIVE):
            return

        if not flags & MOUSE_MOVE_ABSOLUTE:
            self._state.x = last_x
            self._state.y = last_y
            self._relative_read = False
        elif flags & MOUSE_VIRTUAL_DESKTOP:
            width, height = self.virtual_screen
            x = int((last_x / _RAW_ABSOLUTE_RANGE) * width)
            y = int((last_y / _RAW_ABSOLUTE_RANGE) * height)
            if self._relative_origin is None:
                self._state.x = self._state.y = 0
            else:
                ox, oy = self._relative_origin
                self._state.x = x - ox
                self._state.y = y - oy
            self._relative_origin = (x, y)
            self._relative_read = False