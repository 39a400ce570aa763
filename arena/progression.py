"""
Progression Rules.

A progression function is evaluated once at the end of every round and
decides whether the roster advances to the next map, the run is over, or
play continues. Every rule here is a pure function of
``(roster, game_map, history)`` so rules can be passed around and wrapped
freely. None of them mutate their inputs.

The only collaborator queries used are ``game_map.look_down(warrior)``,
``tile.is_exit()``, ``warrior.alive()`` and ``history.rounds_played()``.
"""

from typing import Callable, Dict, Optional, Sequence

from arena.outcome import Advance, Outcome, Undecided, GAME_OVER, UNDECIDED
from arena.state import History, Map, Warrior


ProgressionFn = Callable[[Sequence[Warrior], Map, History], Outcome]

DEFAULT_RULE = "reach_exit"


def reach_exit(roster: Sequence[Warrior], game_map: Map, history: History) -> Outcome:
    """
    Advance everyone once any warrior stands on an exit tile.

    The whole roster advances, dead warriors included. Reaching the exit is
    checked before the all-dead check, so a warrior on the exit always wins
    the level for the team.

    Returns:
        Advance(roster) if anyone is on an exit, GameOver if nobody is
        alive (including an empty roster), otherwise Undecided.
    """
    anyone_reached_exit = any(game_map.look_down(w).is_exit() for w in roster)
    if anyone_reached_exit:
        return Advance(tuple(roster))

    all_dead = not any(w.alive() for w in roster)
    if all_dead:
        return GAME_OVER

    return UNDECIDED


def last_standing(roster: Sequence[Warrior], game_map: Map, history: History) -> Outcome:
    """Advance the sole remaining warrior; only the roster size is considered."""
    if len(roster) == 1:
        return Advance((roster[0],))
    if len(roster) == 0:
        return GAME_OVER
    return UNDECIDED


def with_round_limit(round_limit: int, progression_fn: ProgressionFn) -> ProgressionFn:
    """
    Wrap a progression function with a round limit.

    Once ``history.rounds_played()`` reaches ``round_limit`` an Undecided
    result becomes GameOver. Advance and GameOver from the wrapped function
    are returned unchanged.

    Args:
        round_limit: Non-negative number of rounds allowed
        progression_fn: Progression function to wrap

    Returns:
        A new progression function
    """
    def limited(roster: Sequence[Warrior], game_map: Map, history: History) -> Outcome:
        outcome = progression_fn(roster, game_map, history)
        if isinstance(outcome, Undecided) and history.rounds_played() >= round_limit:
            return GAME_OVER
        return outcome

    return limited


PROGRESSION_REGISTRY: Dict[str, ProgressionFn] = {
    "reach_exit": reach_exit,
    "last_standing": last_standing,
}


def progression_from_config(config: Optional[Dict] = None) -> ProgressionFn:
    """
    Build a progression function from a config dict.

    Args:
        config: {"rule": name in PROGRESSION_REGISTRY, "round_limit": int or None}

    Returns:
        The configured progression function
    """
    config = config or {}
    rule = config.get("rule") or DEFAULT_RULE
    if rule not in PROGRESSION_REGISTRY:
        known = ", ".join(sorted(PROGRESSION_REGISTRY))
        raise ValueError(f"Unknown progression rule {rule!r} (known: {known})")

    progression_fn = PROGRESSION_REGISTRY[rule]

    round_limit = config.get("round_limit")
    if round_limit is None:
        return progression_fn
    if isinstance(round_limit, bool) or not isinstance(round_limit, int) or round_limit < 0:
        raise ValueError(f"round_limit must be a non-negative integer, got {round_limit!r}")

    return with_round_limit(round_limit, progression_fn)
