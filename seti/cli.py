"""
SETI CLI - Command-line interface for the engine.

Usage:
    seti parse-effect <code>             Parse effect text or codes
    seti load-cards <card_file>          Ingest and check a card file
    seti new-game <name> <name>... [--seed N]   Set up a game and print a summary
    seti serve [--host H] [--port P]     Run the HTTP API (needs uvicorn)
"""

import argparse
import json
import sys

from . import config


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="SETI - Board game rules engine",
        prog="seti",
    )
    parser.add_argument("--log-level", help="Override SETI_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse-effect", help="Parse effect text or codes")
    parse_parser.add_argument("code", help="e.g. 'GAIN_ON_ORBIT:media:2' or '2 Données + 1 Média'")

    # Load command
    load_parser = subparsers.add_parser("load-cards", help="Ingest and check a card file")
    load_parser.add_argument("card_file", help="Path to a ';'-separated card file")

    # New game command
    game_parser = subparsers.add_parser("new-game", help="Set up a game and print a summary")
    game_parser.add_argument("names", nargs="+", help="Player names in seat order (2-4)")
    game_parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible setup")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    config.configure_logging(args.log_level)

    if args.command == "parse-effect":
        cmd_parse_effect(args)
    elif args.command == "load-cards":
        cmd_load_cards(args)
    elif args.command == "new-game":
        cmd_new_game(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_parse_effect(args):
    """Parse effect text and print the effects and misses."""
    from .effects.parser import parse_effect_code

    result = parse_effect_code(args.code)
    print(json.dumps(
        {
            "effects": [e.to_dict() for e in result.effects],
            "misses": [m.value for m in result.misses],
        },
        ensure_ascii=False,
        indent=2,
    ))
    if result.misses:
        sys.exit(1)


def cmd_load_cards(args):
    """Ingest a card file and report what could not be parsed."""
    from .effects.card_loader import CardLoadError, load_cards

    try:
        report = load_cards(args.card_file)
    except CardLoadError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Cards: {len(report.cards)}")
    if report.skipped_rows:
        print(f"Skipped rows: {', '.join(str(n) for n in report.skipped_rows)}")

    if report.misses:
        print("\nUnparsed effects:")
        for card_id, misses in report.misses.items():
            for miss in misses:
                print(f"  - {card_id}: {miss.value}")
        sys.exit(1)


def cmd_new_game(args):
    """Set up a game and print a summary."""
    from .content import create_game

    try:
        game = create_game(args.names, seed=args.seed)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Game: {game.id} (seed {game.seed})")
    print(f"Species: {', '.join(s.name.value for s in game.species)}")
    print(f"Card row: {', '.join(c.name for c in game.decks.card_row)}")
    print("\nPlayers:")
    for player in game.players:
        print(
            f"  {player.id} {player.name}: {player.score} PV, {player.credits} crédits, "
            f"{player.energy} énergie, {player.media} média, {len(player.hand)} cartes"
        )
    print(f"\nFirst player: {game.current_player.name}")


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install 'seti-engine[server]'")
        sys.exit(1)

    uvicorn.run("seti.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
