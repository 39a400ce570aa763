# Progression engine for the warrior arena
# This module provides:
# - state.py: map, warrior and history containers
# - outcome.py: Advance / GameOver / Undecided outcome values
# - progression.py: progression rules and the round-limit wrapper
# - logger.py: JSONL outcome logging
# - evaluate.py: one-shot snapshot evaluation CLI

__version__ = "0.1.0"
