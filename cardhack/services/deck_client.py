"""HTTP client for the deck content service.

Loads deck snapshots for drawing and, on demand, the interpretations of a
single image. Every failure (transport error, non-2xx status, malformed
envelope, invalid records) is reported to the caller as "no data" and
logged; nothing here raises into the draw engine.

Usage:
    async with DeckContentClient() as client:
        deck = await client.load_snapshot(42)
        interpretations = await client.get_interpretations(7)
"""

import asyncio
from typing import Any

import httpx
from pydantic import ValidationError

from cardhack.core.config import Settings, get_settings
from cardhack.core.logging_config import get_logger
from cardhack.models.deck_models import Deck, DeckCard, Interpretation

logger = get_logger(__name__)

DECK_DETAIL_PATH = "/cardhack/api/decks/{deck_id}/"
DECK_CARDS_PATH = "/cardhack/api/decks/{deck_id}/cards/"
INTERPRETATIONS_PATH = "/cardhack/api/images/{image_id}/interpretations/"


class DeckContentClient:
    """Async client for deck content.

    Args:
        settings: Service settings (defaults to environment settings).
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self._client = httpx.AsyncClient(
            base_url=self.settings.api_base,
            timeout=self.settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "DeckContentClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_data(self, path: str) -> Any | None:
        """GET ``path`` and unwrap the ``{"success": ..., "data": ...}`` envelope.

        Returns:
            The ``data`` payload, or None on any failure.
        """
        params = {}
        if self.settings.client_sid:
            params["client_sid"] = self.settings.client_sid

        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Deck service returned {e.response.status_code} for {path}",
                extra={"extra_data": {"path": path, "status_code": e.response.status_code}},
            )
            return None
        except httpx.HTTPError as e:
            logger.warning(
                f"Deck service request failed for {path}: {e}",
                extra={"extra_data": {"path": path, "error": str(e)}},
            )
            return None
        except ValueError:
            logger.warning(
                f"Deck service returned invalid JSON for {path}",
                extra={"extra_data": {"path": path}},
            )
            return None

        if not isinstance(payload, dict) or not payload.get("success"):
            logger.warning(
                f"Deck service reported failure for {path}",
                extra={"extra_data": {"path": path}},
            )
            return None
        return payload.get("data")

    async def get_deck(self, deck_id: int) -> dict | None:
        """Fetch deck metadata (name, card style)."""
        data = await self._get_data(DECK_DETAIL_PATH.format(deck_id=deck_id))
        return data if isinstance(data, dict) else None

    async def get_deck_cards(self, deck_id: int) -> list[DeckCard]:
        """Fetch a deck's cards with their image variants.

        Invalid card records are skipped. Returns an empty list on failure.
        """
        data = await self._get_data(DECK_CARDS_PATH.format(deck_id=deck_id))
        if isinstance(data, dict):
            data = data.get("cards")
        if not isinstance(data, list):
            return []

        cards = []
        for raw in data:
            try:
                cards.append(DeckCard.model_validate(raw))
            except ValidationError as e:
                logger.warning(
                    f"Skipping invalid card in deck {deck_id}",
                    extra={"extra_data": {"deck_id": deck_id, "error": str(e)}},
                )
        return cards

    async def get_interpretations(self, image_id: int) -> list[Interpretation] | None:
        """Fetch the interpretations attached to an image.

        Returns:
            Interpretations in service order (possibly empty), or None when
            the service could not provide them.
        """
        data = await self._get_data(INTERPRETATIONS_PATH.format(image_id=image_id))
        if not isinstance(data, list):
            return None
        try:
            return [Interpretation.model_validate(raw) for raw in data]
        except ValidationError as e:
            logger.warning(
                f"Invalid interpretations for image {image_id}",
                extra={"extra_data": {"image_id": image_id, "error": str(e)}},
            )
            return None

    async def load_snapshot(self, deck_id: int) -> Deck:
        """Load a deck and its cards as one immutable snapshot.

        Missing metadata degrades to an unnamed deck; missing cards to an
        empty deck, which the draw engine refuses to open.
        """
        detail, cards = await asyncio.gather(
            self.get_deck(deck_id),
            self.get_deck_cards(deck_id),
        )
        detail = detail or {}
        logger.info(
            f"Loaded deck {deck_id} with {len(cards)} cards",
            extra={"extra_data": {"deck_id": deck_id, "card_count": len(cards)}},
        )
        return Deck(
            id=deck_id,
            name=detail.get("name") or "",
            card_style=detail.get("card_style") or None,
            cards=tuple(cards),
        )
