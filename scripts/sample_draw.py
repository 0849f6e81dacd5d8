#!/usr/bin/env python3
"""CLI tool to perform a test draw against a deck from the deck content service."""

import argparse
import asyncio
import random
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
from cardhack.core.config import get_settings
from cardhack.core.logging_config import setup_logging
from cardhack.models.draw_models import DrawResult
from cardhack.services.deck_client import DeckContentClient
from cardhack.services.draw_session import DrawController, EmptyDeckError


def format_result(result: DrawResult) -> str:
    """Render a revealed card as plain text.

    Args:
        result: The revealed card.

    Returns:
        Multi-line description of the card.
    """
    lines = [f"  {result.card_title}"]
    if result.image_url:
        lines.append(f"  Image: {result.image_url}")
    else:
        lines.append(f"  [{result.placeholder}]")
    if result.caption:
        lines.append(f"  {result.caption}")
    lines.append("")
    if result.interpretation_title or result.interpretation_content:
        if result.interpretation_title:
            lines.append(f"  {result.interpretation_title}")
        if result.interpretation_content:
            lines.append(f"  {result.interpretation_content}")
    else:
        lines.append(f"  {result.message}")
    return "\n".join(lines)


def parse_choice(raw: str, candidate_count: int) -> int | str | None:
    """Interpret a line of user input.

    Returns:
        A zero-based candidate position, "redraw", "quit", or None if invalid.
    """
    raw = raw.strip().lower()
    if raw in ("q", "quit"):
        return "quit"
    if raw in ("r", "redraw"):
        return "redraw"
    if raw.isdigit() and 1 <= int(raw) <= candidate_count:
        return int(raw) - 1
    return None


async def run_draw(deck_id: int, seed: int | None, pick: int | None) -> int:
    """Open a draw on a deck and reveal cards until the user quits.

    Args:
        deck_id: Deck to draw from.
        seed: Optional seed for a repeatable draw.
        pick: Candidate (1-based) to reveal without prompting.

    Returns:
        Process exit code.
    """
    settings = get_settings()
    rng = random.Random(seed) if seed is not None else None

    async with DeckContentClient(settings) as client:
        print(f"Loading deck {deck_id}...")
        deck = await client.load_snapshot(deck_id)
        controller = DrawController(
            deck,
            client.get_interpretations,
            rng=rng,
            display_count=settings.display_count,
        )
        try:
            session = controller.open()
        except EmptyDeckError:
            print("This deck has no cards yet.")
            return 1

        print(f"\n{deck.name or f'Deck {deck_id}'}")
        while True:
            count = len(session.candidates)
            print(f"\n{count} cards lie face down. Choose one to reveal your fate.")
            if pick is not None:
                choice = parse_choice(str(pick), count)
                if choice is None:
                    print(f"Pick must be between 1 and {count}")
                    return 2
            else:
                choice = parse_choice(input(f"[1-{count}] pick, r redraw, q quit: "), count)

            if choice == "quit":
                return 0
            if choice == "redraw":
                session = controller.redraw()
                continue
            if choice is None:
                print("Invalid choice")
                continue

            print("Revealing...")
            session = await controller.choose(choice)
            print("\nYou drew:\n")
            print(format_result(session.result()))

            if pick is not None:
                return 0
            session = controller.redraw()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Perform a test draw from a card deck")
    parser.add_argument("deck_id", type=int, help="Deck identifier")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a repeatable draw",
    )
    parser.add_argument(
        "--pick",
        type=int,
        default=None,
        help="Reveal this candidate (1-based) and exit instead of prompting",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log draw events to the console",
    )

    args = parser.parse_args()
    setup_logging("DEBUG" if args.verbose else "WARNING", enable_file=False)

    sys.exit(asyncio.run(run_draw(args.deck_id, args.seed, args.pick)))


if __name__ == "__main__":
    main()
