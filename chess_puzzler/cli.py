"""
Command-line interface for the chess puzzle generator.

Reads games from a PGN file (or a single move string), generates one puzzle
per game with a Stockfish engine and prints or saves the puzzles.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core.board import ConsistencyFault
from .core.engine import EngineError, SharedEngine, autodetect_stockfish, get_friendly_stockfish_hint
from .core.models import Config, Puzzle, PuzzleLevel
from .core.notation import NotationError
from .puzzle.export import FORMATS, format_puzzles, write_puzzles
from .puzzle.generator import GameTooShortError, PuzzleGenerator
from .puzzle.pgn import GameRecord, filter_games, load_games

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Route log records through rich, DEBUG when verbose."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = RichHandler(console=console, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chess-puzzler",
        description="Generate chess puzzles from recorded games using Stockfish",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One hard puzzle per game in a PGN file
  %(prog)s games.pgn --level hard

  # First 10 puzzles as JSON
  %(prog)s games.pgn --max-puzzles 10 --format json --output puzzles.json

  # A single game given inline
  %(prog)s --moves "1. e4 e5 2. Nf3 d6 3. d4 Bg4 ..."

Environment:
  STOCKFISH_PATH, PUZZLER_LEVEL, PUZZLER_SCAN_DEPTH, PUZZLER_SOLUTION_DEPTH,
  PUZZLER_MIN_GAME_MOVES, PUZZLER_ENGINE_TIMEOUT
        """
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "pgn",
        nargs="?",
        type=Path,
        help="PGN file with one or more games"
    )
    source.add_argument(
        "--moves",
        type=str,
        help="Move text of a single game"
    )

    parser.add_argument(
        "--level",
        choices=[level.value for level in PuzzleLevel],
        help="Puzzle difficulty (default: from environment or medium)"
    )
    parser.add_argument(
        "--max-puzzles",
        type=int,
        help="Stop after this many puzzles"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write puzzles to this file instead of stdout"
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        help="Output format (default: text)"
    )
    parser.add_argument(
        "--stockfish",
        type=str,
        help="Path to the Stockfish executable (auto-detected by default)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds allowed per puzzle before the engine is restarted"
    )
    parser.add_argument(
        "--min-moves",
        type=int,
        help="Skip games with fewer full moves (default: 15)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for the scan window"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging, including engine traffic"
    )

    return parser


def build_config(args: argparse.Namespace, base: Optional[Config] = None) -> Config:
    """Environment configuration overridden by command-line flags."""
    data = (base or Config.from_env()).to_dict()
    overrides = {
        "level": args.level,
        "max_puzzles": args.max_puzzles,
        "output_format": args.format,
        "stockfish_path": args.stockfish,
        "engine_timeout": args.timeout,
        "min_game_moves": args.min_moves,
        "seed": args.seed,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})
    return Config.from_dict(data)


def load_records(args: argparse.Namespace, config: Config) -> List[GameRecord]:
    if args.moves is not None:
        return filter_games([args.moves], min_full_moves=config.min_game_moves)
    return load_games(args.pgn, min_full_moves=config.min_game_moves)


def render_summary(puzzles: List[Puzzle], failures: int) -> Table:
    table = Table(title="Generated puzzles")
    table.add_column("#", justify="right")
    table.add_column("Level")
    table.add_column("Start")
    table.add_column("Blunder")
    table.add_column("Solution")

    for number, puzzle in enumerate(puzzles, start=1):
        table.add_row(
            str(number),
            str(puzzle.level),
            puzzle.start_position,
            str(puzzle.blunder_move),
            " ".join(str(move) for move in puzzle.solution_moves),
        )
    if failures:
        table.caption = f"{failures} game(s) failed"
    return table


async def main_async(args: argparse.Namespace) -> int:
    """Main async entry point."""
    try:
        config = build_config(args)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    stockfish_path = autodetect_stockfish(config.stockfish_path)
    if not stockfish_path:
        console.print(f"[red]{get_friendly_stockfish_hint()}[/red]")
        return 1

    try:
        records = load_records(args, config)
    except OSError as e:
        console.print(f"[red]Could not read games: {e}[/red]")
        return 1

    if not records:
        console.print("[yellow]No usable games found[/yellow]")
        return 1

    puzzles: List[Puzzle] = []
    failures = 0

    with SharedEngine.for_path(stockfish_path) as engine:
        generator = PuzzleGenerator(engine, config)
        with console.status("Generating puzzles...", spinner="dots") as status:
            for record in records:
                if config.max_puzzles is not None and len(puzzles) >= config.max_puzzles:
                    break
                status.update(f"Game {record.index + 1}: analysing {len(record.moves)} moves")
                try:
                    puzzle = await generator.generate_async(record.text)
                except (NotationError, GameTooShortError, EngineError) as e:
                    failures += 1
                    console.print(f"[yellow]Game {record.index + 1} skipped: {e}[/yellow]")
                    continue
                except ConsistencyFault as e:
                    failures += 1
                    logger.error(
                        f"Game {record.index + 1} cannot be replayed: {e}; "
                        f"moves -> {e.moves}"
                    )
                    console.print(f"[yellow]Game {record.index + 1} skipped: {e}[/yellow]")
                    continue
                puzzles.append(puzzle)

    if not puzzles:
        console.print("[bold red]No puzzles generated[/bold red]")
        return 1

    if args.output:
        path = write_puzzles(puzzles, args.output, config.output_format)
        console.print(render_summary(puzzles, failures))
        console.print(f"[bold green]Saved {len(puzzles)} puzzle(s) to {path}[/bold green]")
    else:
        sys.stdout.write(format_puzzles(puzzles, config.output_format))

    return 0


def main() -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        return asyncio.run(main_async(args))
    except KeyboardInterrupt:
        console.print("\n[bold yellow]Interrupted by user[/bold yellow]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
