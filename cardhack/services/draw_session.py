"""Draw session state machine.

A draw offers a few face-down candidate cards from a deck snapshot. When
one is chosen the session samples an image variant for it right away,
then fetches that image's interpretations and samples one of them. The
phases only ever advance::

    SELECTING -> REVEALING -> RESULT

Redrawing or closing discards the session. Each session carries the
controller generation it was created under; a reveal whose generation is
no longer current is dropped, so a late interpretation response can never
touch a newer session.

Usage:
    controller = DrawController(deck, client.get_interpretations)
    controller.open()
    session = await controller.choose(0)
    print(session.result())
"""

import random
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from cardhack.core.config import DEFAULT_DISPLAY_COUNT
from cardhack.core.logging_config import get_logger
from cardhack.models.deck_models import CardImage, Deck, DeckCard, Interpretation
from cardhack.models.draw_models import (
    CandidateView,
    DrawPhase,
    DrawResult,
    DrawSessionView,
)
from cardhack.services.display_selector import pick_candidates
from cardhack.services.sampler import select_image, select_interpretation

PLACEHOLDER_GLYPH = "✦"
NO_INTERPRETATION_MESSAGE = "This card has no interpretation yet."

InterpretationLoader = Callable[[int], Awaitable[Sequence[Interpretation] | None]]

_TRANSITIONS: dict[DrawPhase, frozenset[DrawPhase]] = {
    DrawPhase.SELECTING: frozenset({DrawPhase.REVEALING}),
    DrawPhase.REVEALING: frozenset({DrawPhase.RESULT}),
    DrawPhase.RESULT: frozenset(),
}


# =============================================================================
# Exceptions
# =============================================================================


class DrawError(Exception):
    """Base exception for draw errors."""

    pass


class EmptyDeckError(DrawError):
    """Raised when opening a draw on a deck with no cards."""

    pass


class InvalidTransitionError(DrawError):
    """Raised when a session is asked to move to a phase it cannot reach."""

    pass


# =============================================================================
# Session
# =============================================================================


@dataclass
class DrawSession:
    """State of a single draw.

    Attributes:
        deck: Snapshot the draw is made from.
        candidates: Deck card indices shown face down.
        generation: Controller generation this session belongs to.
        phase: Current phase.
        selected_candidate: Position in ``candidates`` the user picked.
        resolved_image_index: Index into the picked card's images.
        resolved_interpretation: Sampled interpretation, if any.
        history: Every phase the session has been in, in order.
    """

    deck: Deck
    candidates: tuple[int, ...]
    generation: int
    phase: DrawPhase = DrawPhase.SELECTING
    selected_candidate: int | None = None
    resolved_image_index: int | None = None
    resolved_interpretation: Interpretation | None = None
    history: list[DrawPhase] = field(default_factory=lambda: [DrawPhase.SELECTING])

    def advance(self, phase: DrawPhase) -> None:
        """Move to ``phase``.

        Raises:
            InvalidTransitionError: If ``phase`` is not reachable from the current one.
        """
        if phase not in _TRANSITIONS[self.phase]:
            raise InvalidTransitionError(
                f"Cannot move from {self.phase.value} to {phase.value}"
            )
        self.phase = phase
        self.history.append(phase)

    @property
    def selected_card(self) -> DeckCard | None:
        if self.selected_candidate is None:
            return None
        return self.deck.cards[self.candidates[self.selected_candidate]]

    @property
    def shown_image(self) -> CardImage | None:
        """The sampled image, falling back to the card's first image."""
        card = self.selected_card
        if card is None or not card.images:
            return None
        if self.resolved_image_index is not None:
            return card.images[self.resolved_image_index]
        return card.images[0]

    def result(self) -> DrawResult | None:
        """Render the revealed card, or None before the RESULT phase."""
        if self.phase is not DrawPhase.RESULT:
            return None

        card = self.selected_card
        image = self.shown_image
        image_url = image.url if image and image.url else None
        interpretation = self.resolved_interpretation

        return DrawResult(
            card_id=card.id,
            card_title=card.display_title,
            image_id=image.id if image else None,
            image_url=image_url,
            placeholder=None if image_url else PLACEHOLDER_GLYPH,
            caption=image.caption if image else "",
            interpretation_title=interpretation.title if interpretation else None,
            interpretation_content=interpretation.content if interpretation else None,
            message=None if interpretation else NO_INTERPRETATION_MESSAGE,
        )

    def view(self, draw_id: str, card_back: str) -> DrawSessionView:
        """Describe the session without revealing face-down cards."""
        candidates = []
        for position in range(len(self.candidates)):
            if position == self.selected_candidate:
                image = self.shown_image
                candidates.append(
                    CandidateView(
                        position=position,
                        face_down=False,
                        title=self.selected_card.display_title,
                        image_url=image.url if image and image.url else None,
                    )
                )
            else:
                candidates.append(CandidateView(position=position, face_down=True))

        return DrawSessionView(
            draw_id=draw_id,
            deck_id=self.deck.id,
            deck_name=self.deck.name,
            card_back=self.deck.card_style or card_back,
            phase=self.phase,
            candidates=candidates,
            selected_position=self.selected_candidate,
            loading=self.phase is DrawPhase.REVEALING,
            result=self.result(),
        )


@dataclass(frozen=True)
class PendingReveal:
    """An interpretation fetch addressed to one session generation."""

    session: DrawSession
    generation: int
    image_id: int | None


# =============================================================================
# Controller
# =============================================================================


class DrawController:
    """Owns the current draw session for one deck.

    Args:
        deck: Deck snapshot to draw from.
        loader: Async callable returning an image's interpretations, or
            None when they could not be loaded.
        rng: Random source; pass a seeded ``random.Random`` for repeatable draws.
        display_count: Maximum number of face-down candidates.
        draw_id: Identifier used in log context.
    """

    def __init__(
        self,
        deck: Deck,
        loader: InterpretationLoader,
        rng: random.Random | None = None,
        display_count: int = DEFAULT_DISPLAY_COUNT,
        draw_id: str | None = None,
    ):
        self.deck = deck
        self.loader = loader
        self.rng = rng or random.Random()
        self.display_count = display_count
        self.session: DrawSession | None = None
        self._generation = 0
        self.logger = get_logger(__name__, draw_id=draw_id, deck_id=deck.id)

    def open(self) -> DrawSession:
        """Start a draw with freshly shuffled candidates.

        Raises:
            EmptyDeckError: If the deck has no cards.
        """
        session = self._new_session()
        self.logger.info(f"Draw opened with {len(session.candidates)} candidates")
        return session

    def redraw(self) -> DrawSession:
        """Discard the current session and start a new one."""
        previous = self.session
        session = self._new_session()
        self.logger.info(
            "Redraw",
            extra={
                "extra_data": {
                    "previous_phase": previous.phase.value if previous else None,
                    "generation": session.generation,
                }
            },
        )
        return session

    def close(self) -> None:
        """Discard the current session; pending reveals become stale."""
        self.session = None
        self._generation += 1
        self.logger.info("Draw closed")

    def select(self, position: int) -> PendingReveal | None:
        """Choose a face-down candidate and fix its image variant.

        Moves the session to REVEALING synchronously. When the chosen image
        has no identifier (or the card has no images) there is nothing to
        fetch and the session goes straight on to RESULT.

        Returns:
            The reveal to await, or None when the selection was ignored
            (no session, not SELECTING, or position out of range).
        """
        session = self.session
        if session is None or session.phase is not DrawPhase.SELECTING:
            self.logger.debug(
                f"Ignoring selection of {position}",
                extra={"extra_data": {"phase": session.phase.value if session else None}},
            )
            return None
        if not 0 <= position < len(session.candidates):
            self.logger.warning(f"Selection {position} is out of range")
            return None

        session.selected_candidate = position
        session.advance(DrawPhase.REVEALING)

        card = session.selected_card
        image_id = None
        if card.images:
            session.resolved_image_index = select_image(card.images, self.rng)
            image_id = card.images[session.resolved_image_index].id

        self.logger.info(
            f"Selected candidate {position}",
            extra={
                "extra_data": {
                    "card_id": card.id,
                    "image_index": session.resolved_image_index,
                }
            },
        )

        pending = PendingReveal(session=session, generation=session.generation, image_id=image_id)
        if image_id is None:
            self._apply(pending, None)
        return pending

    async def reveal(self, pending: PendingReveal) -> DrawSession:
        """Fetch interpretations for a pending reveal and resolve the session.

        A loader error is treated like a missing interpretation. A response
        arriving after its session was discarded is dropped.

        Returns:
            The session the reveal was addressed to.
        """
        session = pending.session
        if session.phase is not DrawPhase.REVEALING or not self._is_current(pending):
            return session

        try:
            interpretations = await self.loader(pending.image_id)
        except Exception as e:
            self.logger.warning(
                f"Interpretation load failed for image {pending.image_id}: {e}",
                exc_info=True,
            )
            interpretations = None

        if not self._is_current(pending):
            self.logger.debug(
                f"Dropping stale interpretations for image {pending.image_id}",
                extra={
                    "extra_data": {
                        "generation": pending.generation,
                        "current_generation": self._generation,
                    }
                },
            )
            return session

        chosen = None
        if interpretations:
            chosen = interpretations[select_interpretation(interpretations, self.rng)]
        self._apply(pending, chosen)
        return session

    async def choose(self, position: int) -> DrawSession | None:
        """Select a candidate and wait for it to be revealed.

        Returns:
            The resolved session, or None when the selection was ignored.
        """
        pending = self.select(position)
        if pending is None:
            return None
        return await self.reveal(pending)

    def _new_session(self) -> DrawSession:
        if not self.deck.cards:
            raise EmptyDeckError(f"Deck {self.deck.id} has no cards")
        self._generation += 1
        candidates = pick_candidates(len(self.deck.cards), self.display_count, self.rng)
        self.session = DrawSession(
            deck=self.deck,
            candidates=tuple(candidates),
            generation=self._generation,
        )
        return self.session

    def _is_current(self, pending: PendingReveal) -> bool:
        return self.session is pending.session and pending.generation == self._generation

    def _apply(self, pending: PendingReveal, interpretation: Interpretation | None) -> None:
        session = pending.session
        session.resolved_interpretation = interpretation
        session.advance(DrawPhase.RESULT)
        self.logger.info(
            "Card revealed",
            extra={
                "extra_data": {
                    "image_id": pending.image_id,
                    "interpretation_id": interpretation.id if interpretation else None,
                }
            },
        )
