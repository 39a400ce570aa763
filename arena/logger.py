"""
JSONL Outcome Logger.

Logs roster -> round -> outcome records for each progression evaluation
of a run.
"""

import json
import os
from datetime import datetime
from typing import Dict, Optional, Sequence

import numpy as np

from arena.outcome import Advance, Outcome, outcome_to_dict
from arena.state import History, Warrior


def convert_numpy(obj):
    """Convert numpy types to Python native types for JSON serialization."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, dict):
        return {k: convert_numpy(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_numpy(v) for v in obj]
    return obj


class OutcomeLogger:
    """
    Logger for progression outcomes in JSONL format.
    """

    def __init__(self, log_dir: str = None, enabled: bool = True):
        """
        Initialize outcome logger.

        Args:
            log_dir: Directory to write logs. Defaults to data/arena/outcome_logs/
            enabled: Whether logging is active
        """
        self.enabled = enabled

        if log_dir is None:
            base_path = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
            log_dir = os.path.join(base_path, "data", "arena", "outcome_logs")

        self.log_dir = log_dir
        self.current_file = None
        self.current_run_id = None
        self.rule = None
        self.eval_idx = 0

        if self.enabled:
            os.makedirs(self.log_dir, exist_ok=True)

    def start_run(self, run_id: str = None, rule: str = None):
        """Start a new run."""
        if not self.enabled:
            return

        self.rule = rule
        self.eval_idx = 0

        if run_id is None:
            run_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.current_run_id = run_id
        self.current_file = os.path.join(self.log_dir, f"outcomes_{run_id}.jsonl")

    def log_evaluation(
        self,
        roster: Sequence[Warrior],
        history: History,
        outcome: Outcome,
        extra: Optional[Dict] = None
    ):
        """
        Log a single progression evaluation.

        Args:
            roster: Roster the rule was evaluated against
            history: History at the time of evaluation
            outcome: Outcome returned by the rule
            extra: Additional fields to attach
        """
        if not self.enabled or self.current_file is None:
            return

        outcome_entry = outcome_to_dict(outcome)
        if isinstance(outcome, Advance):
            outcome_entry["roster"] = [w.name for w in outcome.roster]

        entry = {
            "timestamp": datetime.now().isoformat(),
            "run_id": self.current_run_id,
            "eval_idx": self.eval_idx,
            "round": history.rounds_played(),
            "rule": self.rule,
            "roster": [{"name": w.name, "alive": w.alive()} for w in roster],
            "outcome": outcome_entry,
        }
        if extra:
            entry["extra"] = convert_numpy(extra)

        self._write(entry)
        self.eval_idx += 1

    def end_run(self, final_info: Dict = None):
        """End current run."""
        if not self.enabled:
            return

        if self.current_file:
            entry = {
                "timestamp": datetime.now().isoformat(),
                "run_id": self.current_run_id,
                "type": "run_end",
                "total_evaluations": self.eval_idx,
                "final_info": convert_numpy(final_info or {}),
            }
            self._write(entry)

        self.current_run_id = None
        self.current_file = None
        self.eval_idx = 0

    def _write(self, entry: Dict):
        try:
            with open(self.current_file, "a") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            print(f"Warning: Failed to write log entry: {e}")
