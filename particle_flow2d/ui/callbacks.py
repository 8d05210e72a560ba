"""
Keyboard callbacks for the flow field application.

Key names are produced by the window layer (e.g. 'space', 'f1', 'plus')
and translated here into InputEvents on the shared InputSource.
"""

from __future__ import annotations

from typing import Callable

from particle_flow2d.ui.input import InputEvent, InputSource


# =============================================================================
# Key Handler
# =============================================================================

class KeyHandler:
    """
    Maps key presses onto simulation events.

    Keys bound to an InputEvent are emitted on the source; the help toggle
    stays local to the UI since it has no simulation counterpart.
    """

    KEY_EVENTS = {
        "s": InputEvent.TOGGLE_SHAPES,
        "m": InputEvent.TOGGLE_FOLLOW,
        "space": InputEvent.TOGGLE_FREEZE,
        "r": InputEvent.RESET,
        "c": InputEvent.TOGGLE_COLLECTIVE,
        "n": InputEvent.CYCLE_CURVE_FAMILY,
    }

    HELP_TEXT = (
        "S shapes | M follow mouse | SPACE freeze | R reset | "
        "C collective shape | N next shape | +/- particle size | F1/TAB help"
    )

    def __init__(
        self,
        source: InputSource,
        *,
        get_help_open: Callable[[], bool],
        set_help_open: Callable[[bool], None],
    ) -> None:
        self._source = source
        self._get_help_open = get_help_open
        self._set_help_open = set_help_open

    def handle_key(self, key: str) -> bool:
        """
        Process a key press event.

        Args:
            key: Key name (e.g., 'space', 'f1', 'plus', 'r')

        Returns:
            True if the key was handled, False otherwise
        """
        if key in ("f1", "tab"):
            self._set_help_open(not self._get_help_open())
            return True

        if key in ("plus", "minus"):
            self._source.emit(InputEvent.NUDGE_SIZE_SCALE, direction=+1 if key == "plus" else -1)
            return True

        event = self.KEY_EVENTS.get(key)
        if event is None:
            return False
        self._source.emit(event)
        return True
