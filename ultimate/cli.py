"""
Ultimate CLI - Command-line interface for the orchestrator.

Usage:
    ultimate play                  Hot-seat game in the terminal
    ultimate serve [--port 8000]   Run the REST API
"""

import argparse
import asyncio
import logging
import sys

from .config import configure_logging, get_settings

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  <board> <cell>   play cell (0-8) on board (0-8)
  reset            start over
  retry <board>    retry a board that failed
  quit             leave"""


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Ultimate Tic-Tac-Toe orchestrator",
        prog="ultimate",
    )
    parser.add_argument("--log-level", help="Override ULTIMATE_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    subparsers.add_parser("play", help="Play a hot-seat game in the terminal")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    args = parser.parse_args(argv)

    settings = get_settings()
    if args.log_level:
        settings.log_level = args.log_level.upper()

    if args.command == "play":
        # Keep the board readable; engine chatter only on request
        if not args.log_level:
            settings.log_level = "WARNING"
        configure_logging(settings)
        asyncio.run(cmd_play(args))
    elif args.command == "serve":
        configure_logging(settings)
        cmd_serve(args, settings)
    else:
        parser.print_help()
        sys.exit(1)


def render(snapshot: dict) -> str:
    """Render the nine sub-boards as a 9x9 text grid with a status line."""
    boards = snapshot["boards"]
    lines = []
    for meta_row in range(3):
        for cell_row in range(3):
            parts = []
            for meta_col in range(3):
                board = boards[meta_row * 3 + meta_col]
                sub_game = board["sub_game"]
                cells = sub_game["board"] if sub_game else [None] * 9
                row = cells[cell_row * 3:cell_row * 3 + 3]
                marks = " ".join(c or "." for c in row)
                if board["error"]:
                    marks = "! ! !"
                parts.append(f"{'*' if board['is_active'] else ' '}{marks}")
            lines.append(" |".join(parts))
        if meta_row < 2:
            lines.append("-------+-------+-------")

    outcomes = " ".join(o or "." for o in snapshot["outcomes"])
    lines.append("")
    lines.append(f"Meta board: {outcomes}")
    if snapshot["meta_outcome"]:
        lines.append(f"Meta winner: {snapshot['meta_outcome']}")
    else:
        required = snapshot["required_board"]
        where = "any board" if required is None else f"board {required}"
        lines.append(f"Current player: {snapshot['active_player']} ({where})")
    return "\n".join(lines)


async def cmd_play(args):
    """Interactive hot-seat game against the in-memory Board Service."""
    from .session import SessionManager

    manager = SessionManager()
    session = manager.create_session()
    loop = manager.get_loop(session.session_id)
    await loop.start()

    print(HELP_TEXT)
    while True:
        print()
        print(render(session.snapshot()))
        try:
            line = input("> ").strip().lower()
        except EOFError:
            break

        if not line:
            continue
        if line in ("quit", "exit", "q"):
            break
        if line in ("help", "?"):
            print(HELP_TEXT)
            continue
        if line == "reset":
            await loop.reset()
            continue

        parts = line.split()
        try:
            if parts[0] == "retry" and len(parts) == 2:
                result = await loop.retry(int(parts[1]))
            elif len(parts) == 2:
                result = await loop.play(int(parts[0]), int(parts[1]))
            else:
                print("Unknown command. Type 'help'.")
                continue
        except ValueError:
            print("Board and cell must be numbers 0-8.")
            continue

        if not result.success:
            print(f"Not played: {result.message}")

    manager.end_session(session.session_id, reason="user_ended")


def cmd_serve(args, settings):
    """Run the REST API with uvicorn."""
    import uvicorn

    logger.info("Serving on %s:%d", args.host, args.port)
    uvicorn.run(
        "ultimate.api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
