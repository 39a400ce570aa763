"""
Progression Outcomes.

The result of evaluating end-of-round state: advance the roster, end the
run, or keep playing the current round.
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Union

from arena.state import Warrior


@dataclass(frozen=True)
class Advance:
    """The listed warriors proceed to the next map (or win if none remain)."""
    roster: Tuple[Warrior, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "roster", tuple(self.roster))


@dataclass(frozen=True)
class GameOver:
    """The run ended in defeat."""


@dataclass(frozen=True)
class Undecided:
    """No decision yet; the current round continues."""


Outcome = Union[Advance, GameOver, Undecided]

GAME_OVER = GameOver()
UNDECIDED = Undecided()


def is_decided(outcome: Outcome) -> bool:
    return not isinstance(outcome, Undecided)


def outcome_to_dict(outcome: Outcome) -> Dict:
    """Convert an outcome to a JSON-friendly dict."""
    if isinstance(outcome, Advance):
        return {"type": "advance", "roster": [w.to_dict() for w in outcome.roster]}
    if isinstance(outcome, GameOver):
        return {"type": "game_over"}
    return {"type": "undecided"}


def outcome_from_dict(d: Dict) -> Outcome:
    outcome_type = d.get("type")
    if outcome_type == "advance":
        return Advance([Warrior.from_dict(w) for w in d.get("roster", [])])
    if outcome_type == "game_over":
        return GAME_OVER
    if outcome_type == "undecided":
        return UNDECIDED
    raise ValueError(f"Unknown outcome type: {outcome_type!r}")
