# Area: Shared
"""
fhe_quest.cli — Command-line interface
======================================

Read-only entry points for following a game.

Usage:
    python -m fhe_quest status --config config.json   # Print game status once
    python -m fhe_quest watch --config config.json    # Follow events live

Searching and creating games need an FHE relayer instance and are done
from Python code (see ``QuestRunner.search`` and ``QuestRunner.create_game``).
"""

import argparse
import sys
from typing import List, Optional

from .errors import FheQuestError
from .runner import QuestRunner
from ._runner_config import load_config
from ._shared.formatting import format_address, format_ether, format_time


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="FHE Quest - Encrypted treasure hunt client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fhe_quest status --config config.json
  python -m fhe_quest watch --config config.json
  FHE_QUEST_PRIVATE_KEY=0x... python -m fhe_quest status
        """,
    )

    parser.add_argument(
        "command",
        choices=["status", "watch"],
        help="status: print the current game once; watch: follow events until Ctrl+C",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to JSON config file",
    )

    return parser.parse_args(argv)


def format_status(runner: QuestRunner) -> str:
    """Render the connected game as a short text block."""
    game = runner.game
    store = game.store
    session = store.game
    lines = [f"Player:          {format_address(game.session.account)}"]

    if session is None:
        lines.append("Game:            unknown")
        return "\n".join(lines)

    status = "ACTIVE" if store.is_active else "INACTIVE"
    lines += [
        f"Game #{session.id}:        {status}",
        f"Treasure:        {format_ether(session.treasure_amount)} ETH",
        f"Time remaining:  {format_time(store.remaining_seconds)}",
        f"Attempt fee:     {format_ether(store.attempt_fee)} ETH",
        f"Total attempts:  {session.total_attempts}",
        f"Your wrong tries: {store.displayed_wrong_attempts}",
    ]
    if session.winner:
        lines.append(f"Winner:          {format_address(session.winner)}")
    if store.is_creator:
        lines.append("You are the game creator.")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Set via config file or environment variables.", file=sys.stderr)
        return 1

    runner = QuestRunner(config=config)

    try:
        runner.connect()
        if args.command == "status":
            print(format_status(runner))
        else:
            runner.run()
    except FheQuestError as e:
        print(e.format_error_log(), file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
