"""Command line helpers for generating puzzles and inspecting sessions."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Callable, List

from contracts.snapshot import validate_snapshot
from generator import PuzzleGenerator, format_grid, generate
from session import Difficulty, GameSession


class _IdleTicker:
    """Ticker that never fires; snapshots printed by the CLI have no clock."""

    def start(self, callback: Callable[[], None]) -> None:
        return None

    def stop(self) -> None:
        return None


def cmd_generate(args: argparse.Namespace) -> int:
    level = Difficulty.from_value(args.difficulty)
    blanks = args.blanks if args.blanks is not None else level.empty_cells
    puzzle = generate(blanks, seed=args.seed)
    if args.json:
        payload = puzzle.to_payload()
        payload.update({"difficulty": level.value, "requested": blanks, "blanks": puzzle.blank_count})
        print(json.dumps(payload, indent=2, sort_keys=True))
        return 0
    print(f"Puzzle ({puzzle.blank_count} blanks):")
    print(format_grid(puzzle.puzzle))
    print("\nSolution:")
    print(format_grid(puzzle.solution))
    return 0


def cmd_snapshot(args: argparse.Namespace) -> int:
    session = GameSession(
        generator=PuzzleGenerator(seed=args.seed),
        ticker_factory=_IdleTicker,
    )
    with session:
        session.start_new_game(args.difficulty)
        if args.auto_notes:
            session.auto_fill_notes()
        payload = session.state.to_payload()
    validate_snapshot(payload)
    print(json.dumps(payload, indent=2, sort_keys=True))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sudoku session helpers")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    levels = [level.value.lower() for level in Difficulty]

    gen = sub.add_parser("generate", help="Generate a puzzle and its solution")
    gen.add_argument("--difficulty", choices=levels, default="medium")
    gen.add_argument(
        "--blanks",
        type=int,
        default=None,
        help="Override the number of blanks for the chosen difficulty",
    )
    gen.add_argument("--seed", type=int, default=None)
    gen.add_argument("--json", action="store_true", help="Print a JSON document")
    gen.set_defaults(func=cmd_generate)

    snap = sub.add_parser("snapshot", help="Start a session and print its state snapshot")
    snap.add_argument("--difficulty", choices=levels, default="medium")
    snap.add_argument("--seed", type=int, default=None)
    snap.add_argument("--auto-notes", action="store_true", help="Fill candidate notes first")
    snap.set_defaults(func=cmd_snapshot)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
