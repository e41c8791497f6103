"""
Keyboard input for game sessions.

This module separates raw key state from the host event source:

- InputState tracks which key codes are held and which were pressed since
  the last simulation tick. It knows nothing about pygame.
- KeyboardInputSource converts pygame KEYDOWN/KEYUP events into KeyEvents
  and fans them out to every subscribed InputState.

Key codes are layout-independent names ('ArrowUp', 'KeyA', 'Digit1',
'Escape', 'Space', ...). A code that was never pressed is simply never down.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import pygame

from retro_arcade.logging import get_logger

log = get_logger('input')


@dataclass(frozen=True)
class KeyEvent:
    """A single key transition reported by an input source.

    Attributes:
        code: Key code name (e.g. 'ArrowUp')
        down: True for key-down, False for key-up
        repeat: True if the source marked this key-down as auto-repeat
    """
    code: str
    down: bool
    repeat: bool = False


class InputState:
    """Held-key state plus single-tick pressed edges.

    ``is_down`` follows the physical key. ``is_pressed`` is true from the
    physical up-to-down transition until the next ``consume_frame()``.
    Pressed is a flag, not a counter: several presses inside one tick are
    reported once. Auto-repeat key-downs never re-arm it.

    Examples:
        >>> state = InputState()
        >>> state.key_down('Space')
        >>> state.is_pressed('Space'), state.is_down('Space')
        (True, True)
        >>> state.consume_frame()
        >>> state.is_pressed('Space'), state.is_down('Space')
        (False, True)
    """

    def __init__(self):
        self._held: Dict[str, bool] = {}
        self._pressed: Dict[str, bool] = {}

    def key_down(self, code: str, repeat: bool = False) -> None:
        """Record a key-down event.

        Args:
            code: Key code name
            repeat: True if this event is an auto-repeat of a held key
        """
        self._held[code] = True
        if not repeat:
            self._pressed[code] = True

    def key_up(self, code: str) -> None:
        """Record a key-up event."""
        self._held[code] = False

    def handle(self, event: KeyEvent) -> None:
        """Apply a KeyEvent."""
        if event.down:
            self.key_down(event.code, repeat=event.repeat)
        else:
            self.key_up(event.code)

    def is_down(self, code: str) -> bool:
        """Return True while the key is physically held."""
        return self._held.get(code, False)

    def is_pressed(self, code: str) -> bool:
        """Return True if the key went down since the last consume_frame()."""
        return self._pressed.get(code, False)

    def consume_frame(self) -> None:
        """Clear all pressed edges. Called once per simulation tick."""
        self._pressed.clear()

    def release_all(self) -> None:
        """Forget every held key and pending edge (focus loss, teardown)."""
        self._held.clear()
        self._pressed.clear()

    @property
    def held_codes(self) -> List[str]:
        """Key codes currently held, in first-press order."""
        return [code for code, held in self._held.items() if held]


# =============================================================================
# pygame key mapping
# =============================================================================

def _build_key_codes() -> Dict[int, str]:
    """Map pygame key constants to key code names."""
    codes = {
        pygame.K_UP: 'ArrowUp',
        pygame.K_DOWN: 'ArrowDown',
        pygame.K_LEFT: 'ArrowLeft',
        pygame.K_RIGHT: 'ArrowRight',
        pygame.K_ESCAPE: 'Escape',
        pygame.K_SPACE: 'Space',
        pygame.K_RETURN: 'Enter',
        pygame.K_KP_ENTER: 'NumpadEnter',
        pygame.K_BACKSPACE: 'Backspace',
        pygame.K_TAB: 'Tab',
        pygame.K_DELETE: 'Delete',
        pygame.K_LSHIFT: 'ShiftLeft',
        pygame.K_RSHIFT: 'ShiftRight',
        pygame.K_LCTRL: 'ControlLeft',
        pygame.K_RCTRL: 'ControlRight',
        pygame.K_LALT: 'AltLeft',
        pygame.K_RALT: 'AltRight',
    }
    for offset in range(26):
        letter = chr(ord('a') + offset)
        codes[getattr(pygame, f'K_{letter}')] = f'Key{letter.upper()}'
    for digit in range(10):
        codes[getattr(pygame, f'K_{digit}')] = f'Digit{digit}'
        codes[getattr(pygame, f'K_KP{digit}')] = f'Numpad{digit}'
    for number in range(1, 13):
        codes[getattr(pygame, f'K_F{number}')] = f'F{number}'
    return codes


KEY_CODES: Dict[int, str] = _build_key_codes()


def key_code_for(key: int) -> Optional[str]:
    """Return the key code name for a pygame key constant, or None."""
    return KEY_CODES.get(key)


class KeyboardInputSource:
    """Translates pygame keyboard events into KeyEvents for subscribers.

    A key-down for a key the source already considers held is marked as a
    repeat, which covers pygame's key repeat (pygame.key.set_repeat) where
    the events carry no repeat flag of their own.

    Examples:
        >>> source = KeyboardInputSource()
        >>> state = InputState()
        >>> source.subscribe(state)
        >>> source.process(pygame.event.get())
    """

    def __init__(self):
        self._subscribers: List[InputState] = []
        self._held: Dict[str, bool] = {}

    def subscribe(self, state: InputState) -> None:
        """Start delivering key events to ``state``."""
        if state not in self._subscribers:
            self._subscribers.append(state)

    def unsubscribe(self, state: InputState) -> None:
        """Stop delivering key events to ``state``. Unknown states are ignored."""
        if state in self._subscribers:
            self._subscribers.remove(state)

    @property
    def subscriber_count(self) -> int:
        """Number of subscribed input states."""
        return len(self._subscribers)

    def dispatch(self, event: KeyEvent) -> None:
        """Deliver one KeyEvent to every subscriber."""
        for state in list(self._subscribers):
            state.handle(event)

    def translate(self, event: pygame.event.Event) -> Optional[KeyEvent]:
        """Convert a pygame event into a KeyEvent, or None if not a known key."""
        if event.type not in (pygame.KEYDOWN, pygame.KEYUP):
            return None

        code = key_code_for(event.key)
        if code is None:
            log.trace("Ignoring unmapped key %s", event.key)
            return None

        if event.type == pygame.KEYDOWN:
            repeat = bool(getattr(event, 'repeat', False)) or self._held.get(code, False)
            self._held[code] = True
            return KeyEvent(code=code, down=True, repeat=repeat)

        self._held[code] = False
        return KeyEvent(code=code, down=False)

    def process(self, events: Iterable[pygame.event.Event]) -> None:
        """Translate and dispatch a batch of pygame events.

        Losing window focus releases every key, since the matching key-up
        events will never arrive.
        """
        for event in events:
            if event.type == pygame.WINDOWFOCUSLOST:
                self._held.clear()
                for state in list(self._subscribers):
                    state.release_all()
                continue

            key_event = self.translate(event)
            if key_event is not None:
                self.dispatch(key_event)
