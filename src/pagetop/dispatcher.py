"""Key handling for pagetop."""

import logging
from collections.abc import Callable

from pagetop.pagination import PageCommand

logger = logging.getLogger(__name__)

PAGE_KEYS: dict[str, PageCommand] = {
    "right": PageCommand.NEXT,
    "left": PageCommand.PREV,
}

QUIT_KEYS = frozenset({"ctrl+q", "q"})


class InputDispatcher:
    """
    Translates key presses into pagination commands or a quit request.

    Page commands are only submitted here; they take effect when the engine
    applies them, in order with incoming ticks.
    """

    def __init__(
        self,
        submit: Callable[[PageCommand], object],
        quit: Callable[[str], object],
    ) -> None:
        self._submit = submit
        self._quit = quit

    def dispatch(self, key: str) -> bool:
        """Handle key. Returns False for keys left to the display surface."""
        command = PAGE_KEYS.get(key)
        if command is not None:
            self._submit(command)
            return True
        if key in QUIT_KEYS:
            logger.info("Quit requested with %s", key)
            self._quit("quit")
            return True
        return False
