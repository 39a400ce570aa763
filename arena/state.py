"""
Pure Python Arena State Container.

This module defines the map, warriors and move history that the
progression rules read at the end of every round.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import json

import numpy as np


# Tile definitions
TILES = {
    "floor": {"glyph": ".", "blocked": False, "exit": False},
    "wall": {"glyph": "#", "blocked": True, "exit": False},
    "exit": {"glyph": ">", "blocked": False, "exit": True},
}

GLYPHS = {info["glyph"]: kind for kind, info in TILES.items()}


def _int(value, default: int) -> int:
    """Read an int field, falling back to the default when it is missing or null."""
    return default if value is None else int(value)


@dataclass
class Position:
    """Grid position."""
    x: int = 0
    y: int = 0

    def to_dict(self) -> Dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, d: Dict) -> "Position":
        return cls(x=_int(d.get("x"), 0), y=_int(d.get("y"), 0))


@dataclass(frozen=True)
class Tile:
    """A single map tile, identified by its kind."""
    kind: str = "floor"

    def is_exit(self) -> bool:
        return TILES.get(self.kind, TILES["floor"])["exit"]

    def is_blocked(self) -> bool:
        return TILES.get(self.kind, TILES["floor"])["blocked"]


@dataclass
class Warrior:
    """A warrior taking part in a run."""
    name: str = "Warrior"
    hp: int = 20
    max_hp: int = 20
    pos: Position = field(default_factory=Position)

    def alive(self) -> bool:
        return self.hp > 0

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "pos": self.pos.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "Warrior":
        hp = _int(d.get("hp"), 20)
        return cls(
            name=d.get("name") or "Warrior",
            hp=hp,
            max_hp=_int(d.get("max_hp"), hp),
            pos=Position.from_dict(d.get("pos") or {}),
        )


class Map:
    """
    Tile map for one level of a run.

    Tiles are stored as a 2D array of tile kinds indexed ``tiles[y, x]``.
    """

    def __init__(self, width: int = 10, height: int = 10, tiles: Optional[np.ndarray] = None):
        if tiles is None:
            tiles = np.full((height, width), "floor", dtype=object)
        # Size always follows the tile array
        self.height, self.width = tiles.shape
        self.tiles = tiles

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def tile_at(self, pos: Position) -> Tile:
        """Get the tile at a position. Anything outside the map reads as wall."""
        if not self.in_bounds(pos):
            return Tile("wall")
        return Tile(str(self.tiles[pos.y, pos.x]))

    def look_down(self, warrior: Warrior) -> Tile:
        """Get the tile beneath a warrior."""
        return self.tile_at(warrior.pos)

    def exit_positions(self) -> List[Position]:
        return [Position(x=int(x), y=int(y)) for y, x in np.argwhere(self.tiles == "exit")]

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Map":
        """
        Build a map from ASCII rows.

        Args:
            rows: One string per row using the glyphs in TILES ('.', '#', '>').
                  Short rows are padded with wall.

        Returns:
            Map instance
        """
        height = len(rows)
        width = max((len(r) for r in rows), default=0)
        tiles = np.full((height, width), "wall", dtype=object)

        for y, row in enumerate(rows):
            for x, glyph in enumerate(row):
                if glyph not in GLYPHS:
                    raise ValueError(f"Unknown map glyph {glyph!r} at ({x},{y})")
                tiles[y, x] = GLYPHS[glyph]

        return cls(width=width, height=height, tiles=tiles)

    def to_rows(self) -> List[str]:
        return [
            "".join(TILES.get(str(kind), TILES["floor"])["glyph"] for kind in row)
            for row in self.tiles
        ]

    def to_dict(self) -> Dict:
        return {
            "width": self.width,
            "height": self.height,
            "rows": self.to_rows(),
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "Map":
        rows = d.get("rows") or []
        if rows:
            return cls.from_rows(rows)
        return cls(width=_int(d.get("width"), 10), height=_int(d.get("height"), 10))


@dataclass
class HistoryEntry:
    """One recorded turn."""
    round: int = 1
    warrior: str = ""
    action: str = ""
    detail: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "round": self.round,
            "warrior": self.warrior,
            "action": self.action,
            "detail": self.detail,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "HistoryEntry":
        return cls(
            round=_int(d.get("round"), 1),
            warrior=d.get("warrior") or "",
            action=d.get("action") or "",
            detail=d.get("detail"),
        )


@dataclass
class History:
    """Append-only log of turns for the current map run."""
    entries: List[HistoryEntry] = field(default_factory=list)
    rounds_completed: int = 0

    def record(self, warrior: str, action: str, detail: Optional[str] = None) -> HistoryEntry:
        """Record a turn in the round currently being played."""
        entry = HistoryEntry(
            round=self.rounds_completed + 1,
            warrior=warrior,
            action=action,
            detail=detail,
        )
        self.entries.append(entry)
        return entry

    def end_round(self):
        self.rounds_completed += 1

    def rounds_played(self) -> int:
        return self.rounds_completed

    def entries_for_round(self, round_number: int) -> List[HistoryEntry]:
        return [e for e in self.entries if e.round == round_number]

    def to_dict(self) -> Dict:
        return {
            "rounds_completed": self.rounds_completed,
            "entries": [e.to_dict() for e in self.entries],
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "History":
        return cls(
            entries=[HistoryEntry.from_dict(e) for e in d.get("entries") or []],
            rounds_completed=max(0, _int(d.get("rounds_completed"), 0)),
        )


@dataclass
class Snapshot:
    """End-of-round inputs for one progression evaluation."""
    roster: List[Warrior] = field(default_factory=list)
    map: Map = field(default_factory=Map)
    history: History = field(default_factory=History)

    def to_dict(self) -> Dict:
        return {
            "roster": [w.to_dict() for w in self.roster],
            "map": self.map.to_dict(),
            "history": self.history.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "Snapshot":
        return cls(
            roster=[Warrior.from_dict(w) for w in d.get("roster") or []],
            map=Map.from_dict(d.get("map") or {}),
            history=History.from_dict(d.get("history") or {}),
        )


def load_snapshot(path: str) -> Snapshot:
    """Load a snapshot from a JSON file."""
    with open(path, "r") as f:
        return Snapshot.from_dict(json.load(f))


def save_snapshot(snapshot: Snapshot, path: str):
    with open(path, "w") as f:
        json.dump(snapshot.to_dict(), f, indent=2)


def create_simple_snapshot(
    num_warriors: int = 2,
    width: int = 10,
    height: int = 5
) -> Snapshot:
    """
    Create a simple snapshot for testing.

    A walled room with warriors lined up on the left and a single exit
    cut into the middle of the right wall.
    """
    rows = []
    for y in range(height):
        if y == 0 or y == height - 1:
            rows.append("#" * width)
        else:
            rows.append("#" + "." * (width - 2) + "#")

    mid = height // 2
    rows[mid] = rows[mid][:-1] + ">"
    game_map = Map.from_rows(rows)

    roster = []
    for i in range(num_warriors):
        roster.append(Warrior(
            name=f"Warrior {i+1}",
            hp=20,
            max_hp=20,
            pos=Position(x=1, y=1 + i % max(1, height - 2)),
        ))

    return Snapshot(roster=roster, map=game_map, history=History())
