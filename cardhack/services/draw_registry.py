"""In-memory registry of open draws, keyed by draw id.

Draws are kept in least-recently-used order. When the registry is full,
opening a new draw closes and forgets the draw idle the longest, so
abandoned draw modals cannot accumulate for the life of the process.
"""

import random
import uuid
from collections import OrderedDict
from functools import lru_cache

from cardhack.core.config import DEFAULT_DISPLAY_COUNT, DEFAULT_MAX_OPEN_DRAWS, get_settings
from cardhack.core.logging_config import get_logger
from cardhack.models.deck_models import Deck
from cardhack.services.draw_session import DrawController, InterpretationLoader

logger = get_logger(__name__)


class DrawRegistry:
    """Tracks the controller behind each open draw.

    Args:
        max_open: Maximum number of draws kept at once.
    """

    def __init__(self, max_open: int = DEFAULT_MAX_OPEN_DRAWS):
        if max_open < 1:
            raise ValueError("max_open must be at least 1")
        self.max_open = max_open
        self._draws: OrderedDict[str, DrawController] = OrderedDict()

    def __len__(self) -> int:
        return len(self._draws)

    def open(
        self,
        deck: Deck,
        loader: InterpretationLoader,
        display_count: int = DEFAULT_DISPLAY_COUNT,
        rng: random.Random | None = None,
    ) -> tuple[str, DrawController]:
        """Open a draw on ``deck`` and register it.

        Raises:
            EmptyDeckError: If the deck has no cards; nothing is registered.
        """
        draw_id = uuid.uuid4().hex[:12]
        controller = DrawController(
            deck,
            loader,
            rng=rng,
            display_count=display_count,
            draw_id=draw_id,
        )
        controller.open()

        while len(self._draws) >= self.max_open:
            evicted_id, evicted = self._draws.popitem(last=False)
            evicted.close()
            logger.info(
                f"Evicted idle draw {evicted_id}",
                extra={"extra_data": {"draw_id": evicted_id, "max_open": self.max_open}},
            )

        self._draws[draw_id] = controller
        return draw_id, controller

    def get(self, draw_id: str) -> DrawController | None:
        """Look up a draw and mark it as recently used."""
        controller = self._draws.get(draw_id)
        if controller is not None:
            self._draws.move_to_end(draw_id)
        return controller

    def discard(self, draw_id: str) -> bool:
        """Close and forget a draw. Returns False if it was unknown."""
        controller = self._draws.pop(draw_id, None)
        if controller is None:
            return False
        controller.close()
        return True


@lru_cache(maxsize=1)
def get_draw_registry() -> DrawRegistry:
    """Process-wide registry."""
    return DrawRegistry(max_open=get_settings().max_open_draws)
