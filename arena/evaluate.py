"""
Snapshot Evaluation Script.

Evaluates a progression rule once against a saved end-of-round snapshot.
"""

import json
import sys
from typing import Dict, Optional

from arena.logger import OutcomeLogger
from arena.outcome import Advance, GameOver, Outcome
from arena.progression import DEFAULT_RULE, PROGRESSION_REGISTRY, progression_from_config
from arena.state import Snapshot, create_simple_snapshot, load_snapshot


def evaluate_snapshot(
    snapshot: Snapshot,
    config: Optional[Dict] = None,
    logger: OutcomeLogger = None
) -> Outcome:
    """
    Evaluate a configured progression rule against a snapshot.

    Args:
        snapshot: Roster, map and history to evaluate
        config: Progression config (see progression_from_config)
        logger: Optional outcome logger

    Returns:
        The outcome of the rule
    """
    config = config or {}
    progression_fn = progression_from_config(config)

    outcome = progression_fn(snapshot.roster, snapshot.map, snapshot.history)

    if logger:
        logger.start_run(rule=config.get("rule") or DEFAULT_RULE)
        logger.log_evaluation(snapshot.roster, snapshot.history, outcome)
        logger.end_run({"round_limit": config.get("round_limit")})

    return outcome


def format_outcome(outcome: Outcome) -> str:
    if isinstance(outcome, Advance):
        return "ADVANCE: " + ", ".join(w.name for w in outcome.roster)
    if isinstance(outcome, GameOver):
        return "GAME OVER"
    return "UNDECIDED"


def main(argv=None) -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Evaluate a progression rule against a snapshot")
    parser.add_argument("snapshot", nargs="?", default=None, help="Path to snapshot JSON")
    parser.add_argument("--rule", type=str, default=DEFAULT_RULE,
                        choices=sorted(PROGRESSION_REGISTRY), help="Progression rule")
    parser.add_argument("--round-limit", type=int, default=None, help="Rounds before forced game over")
    parser.add_argument("--log-dir", type=str, default=None, help="Write a JSONL outcome log here")
    parser.add_argument("--demo", action="store_true", help="Evaluate a generated demo snapshot")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    if args.demo:
        snapshot = create_simple_snapshot()
    elif args.snapshot:
        try:
            snapshot = load_snapshot(args.snapshot)
        except (OSError, json.JSONDecodeError, ValueError, TypeError, AttributeError) as e:
            print(f"Error: could not load snapshot {args.snapshot}: {e}", file=sys.stderr)
            return 1
    else:
        parser.error("a snapshot path or --demo is required")

    config = {"rule": args.rule, "round_limit": args.round_limit}
    logger = OutcomeLogger(log_dir=args.log_dir) if args.log_dir else None

    if args.verbose:
        print("=" * 60)
        print(f"Rule: {args.rule}  Round limit: {args.round_limit}")
        print(f"Rounds played: {snapshot.history.rounds_played()}")
        print("Roster:")
        for w in snapshot.roster:
            status = "ALIVE" if w.alive() else "DOWN"
            tile = snapshot.map.look_down(w)
            print(f"  {w.name}: HP {w.hp}/{w.max_hp} at ({w.pos.x},{w.pos.y}) on {tile.kind} [{status}]")
        print("=" * 60)

    try:
        outcome = evaluate_snapshot(snapshot, config, logger=logger)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_outcome(outcome))
    return 0


if __name__ == "__main__":
    sys.exit(main())
