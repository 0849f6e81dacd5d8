"""Draw API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from cardhack.core.config import Settings, get_settings
from cardhack.models.draw_models import DrawSessionView
from cardhack.services.deck_client import DeckContentClient
from cardhack.services.draw_registry import DrawRegistry, get_draw_registry
from cardhack.services.draw_session import DrawController, EmptyDeckError

router = APIRouter()


def get_deck_client(request: Request) -> DeckContentClient:
    """Dependency to get the shared deck content client."""
    client = getattr(request.app.state, "deck_client", None)
    if client is None:
        client = DeckContentClient()
        request.app.state.deck_client = client
    return client


class DrawOpen(BaseModel):
    """Request model for opening a draw."""

    deck_id: int = Field(description="Deck to draw from")


class DrawSelect(BaseModel):
    """Request model for choosing a face-down card."""

    position: int = Field(ge=0, description="Candidate position to flip")


def _get_controller(draw_id: str, registry: DrawRegistry) -> DrawController:
    controller = registry.get(draw_id)
    if controller is None or controller.session is None:
        raise HTTPException(status_code=404, detail="Draw not found")
    return controller


def _view(draw_id: str, controller: DrawController, settings: Settings) -> DrawSessionView:
    return controller.session.view(draw_id, settings.default_card_back)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def open_draw(
    request: DrawOpen,
    client: DeckContentClient = Depends(get_deck_client),
    registry: DrawRegistry = Depends(get_draw_registry),
    settings: Settings = Depends(get_settings),
) -> DrawSessionView:
    """Load a deck and deal face-down candidates."""
    deck = await client.load_snapshot(request.deck_id)
    try:
        draw_id, controller = registry.open(
            deck,
            client.get_interpretations,
            display_count=settings.display_count,
        )
    except EmptyDeckError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _view(draw_id, controller, settings)


@router.get("/{draw_id}")
async def get_draw(
    draw_id: str,
    registry: DrawRegistry = Depends(get_draw_registry),
    settings: Settings = Depends(get_settings),
) -> DrawSessionView:
    """Get the current state of a draw."""
    controller = _get_controller(draw_id, registry)
    return _view(draw_id, controller, settings)


@router.post("/{draw_id}/select")
async def select_card(
    draw_id: str,
    selection: DrawSelect,
    registry: DrawRegistry = Depends(get_draw_registry),
    settings: Settings = Depends(get_settings),
) -> DrawSessionView:
    """Flip a candidate and wait for its interpretation."""
    controller = _get_controller(draw_id, registry)
    session = await controller.choose(selection.position)
    if session is None:
        raise HTTPException(status_code=409, detail="Selection not allowed in this state")
    if controller.session is not session:
        # Redrawn or closed while the interpretation was loading
        raise HTTPException(status_code=409, detail="Draw was reset during reveal")
    return _view(draw_id, controller, settings)


@router.post("/{draw_id}/redraw")
async def redraw(
    draw_id: str,
    registry: DrawRegistry = Depends(get_draw_registry),
    settings: Settings = Depends(get_settings),
) -> DrawSessionView:
    """Reshuffle and deal new face-down candidates."""
    controller = _get_controller(draw_id, registry)
    controller.redraw()
    return _view(draw_id, controller, settings)


@router.delete("/{draw_id}")
async def close_draw(
    draw_id: str,
    registry: DrawRegistry = Depends(get_draw_registry),
):
    """Close a draw."""
    if not registry.discard(draw_id):
        raise HTTPException(status_code=404, detail="Draw not found")
    return {"message": "Draw closed"}
