# Area: Shared
"""
roping_engine.cli — Command-line interface
==========================================

Provides the ``roping-engine`` entry point for operating on a
tournament database.

Usage:
    roping-engine init-db
    roping-engine draw --event 1 --round 2
    roping-engine draw-batch --event 1 --rounds 3 --shuffle
    roping-engine record-run --event 1 --team 4 --round 1 --position 2 --time 7.4
    roping-engine standings --event 1
    roping-engine payout --event 1
    roping-engine lock-event --event 1

Settings come from --config, then environment variables
(ROPING_DB_PATH, ROPING_LOG_FILE, ROPING_LOG_LEVEL, ROPING_DRAW_SEED).
Results are printed to stdout as JSON.
"""

import argparse
import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from ._config import load_config, log_level_value
from ._shared.logging_config import log_operation_error, setup_logging
from ._store.database import init_database
from .errors import RopingError
from .service import TournamentService


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="roping-engine",
        description="Team-roping tournament draw, run-state and settlement engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  roping-engine --db jackpot.db init-db
  roping-engine draw --event 1 --round 1 --keep-order
  roping-engine record-run --event 1 --team 3 --round 1 --position 1 --dq
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--db", type=str, help="Database path (overrides config)")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the database schema")

    draw = sub.add_parser("draw", help="Generate the draw of one round")
    draw.add_argument("--event", type=int, required=True)
    draw.add_argument("--round", type=int, required=True)
    draw.add_argument(
        "--keep-order", action="store_true",
        help="Do not shuffle; draw teams in id order",
    )
    draw.add_argument(
        "--no-runs", action="store_true",
        help="Write the draw only, without pending runs",
    )

    batch = sub.add_parser("draw-batch", help="Generate draws for rounds 1..N")
    batch.add_argument("--event", type=int, required=True)
    batch.add_argument("--rounds", type=int, required=True)
    batch.add_argument(
        "--shuffle", action="store_true",
        help="Shuffle and space teams sharing a roper",
    )

    run = sub.add_parser("record-run", help="Record a captured result")
    run.add_argument("--event", type=int, required=True)
    run.add_argument("--team", type=int, required=True)
    run.add_argument("--round", type=int, required=True)
    run.add_argument("--position", type=int, required=True)
    run.add_argument("--time", type=float, help="Raw time in seconds")
    run.add_argument("--penalty", type=float, default=0.0)
    run.add_argument("--no-time", action="store_true", help="Mark as no time (NT)")
    run.add_argument("--dq", action="store_true", help="Mark as disqualified")

    standings = sub.add_parser("standings", help="Print the ranked standings")
    standings.add_argument("--event", type=int, required=True)

    payout = sub.add_parser("payout", help="Print the payout breakdown")
    payout.add_argument("--event", type=int, required=True)

    lock = sub.add_parser("lock-event", help="Lock an event against changes")
    lock.add_argument("--event", type=int, required=True)

    return parser


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def _standings_rows(rows: List[Any]) -> List[Dict[str, Any]]:
    return [asdict(row) for row in rows]


def run_command(args: argparse.Namespace, service: TournamentService) -> Any:
    """Dispatch a parsed command. Returns the JSON-ready result."""
    if args.command == "draw":
        count = service.generate_round_draw(
            args.event, args.round,
            reseed=not args.keep_order, seed_runs=not args.no_runs,
        )
        return {"teams_drawn": count, "draw": service.get_draw(args.event, args.round)}

    if args.command == "draw-batch":
        total = service.generate_batch_draw(args.event, args.rounds, shuffle=args.shuffle)
        return {"assignments": total}

    if args.command == "record-run":
        run_id = service.record_run({
            "event_id": args.event,
            "team_id": args.team,
            "round": args.round,
            "position": args.position,
            "time_sec": args.time,
            "penalty": args.penalty,
            "no_time": args.no_time,
            "dq": args.dq,
        })
        return {"run_id": run_id}

    if args.command == "standings":
        return _standings_rows(service.get_standings(args.event))

    if args.command == "payout":
        return service.get_payout_breakdown(args.event).to_dict()

    if args.command == "lock-event":
        service.lock_event(args.event)
        return {"event_id": args.event, "status": "locked"}

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.db:
        config["db_path"] = args.db

    setup_logging(config["log_file"], log_level_value(config))

    if args.command == "init-db":
        init_database(config["db_path"])
        _print_json({"db_path": config["db_path"]})
        return 0

    service = TournamentService.from_config(config)
    try:
        result = run_command(args, service)
    except RopingError as e:
        log_operation_error(e)
        return 1

    _print_json(result)
    return 0
