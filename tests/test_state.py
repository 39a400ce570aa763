"""Unit tests for arena.state: map parsing, tiles, warriors, history, snapshots."""

import json

import numpy as np
import pytest

from arena.state import (
    History,
    Map,
    Position,
    Snapshot,
    Tile,
    Warrior,
    create_simple_snapshot,
    load_snapshot,
    save_snapshot,
)


ROWS = [
    "######",
    "#....>",
    "#.##.#",
    "######",
]


def test_tile_classification():
    assert Tile("exit").is_exit()
    assert not Tile("floor").is_exit()
    assert not Tile("wall").is_exit()
    assert Tile("wall").is_blocked()
    # Unknown kinds behave like floor
    assert not Tile("lava").is_exit()
    assert not Tile("lava").is_blocked()


def test_warrior_alive():
    assert Warrior(hp=1).alive()
    assert not Warrior(hp=0).alive()
    assert not Warrior(hp=-3).alive()


def test_map_from_rows_and_look_down():
    game_map = Map.from_rows(ROWS)
    assert (game_map.width, game_map.height) == (6, 4)
    assert game_map.look_down(Warrior(pos=Position(5, 1))).is_exit()
    assert game_map.look_down(Warrior(pos=Position(1, 1))).kind == "floor"
    assert game_map.look_down(Warrior(pos=Position(2, 2))).kind == "wall"


def test_map_off_map_reads_as_wall():
    game_map = Map.from_rows(ROWS)
    assert game_map.look_down(Warrior(pos=Position(-1, 0))).kind == "wall"
    assert game_map.look_down(Warrior(pos=Position(6, 1))).kind == "wall"


def test_map_short_rows_padded_with_wall():
    game_map = Map.from_rows(["#>", "#"])
    assert game_map.width == 2
    assert game_map.tile_at(Position(1, 1)).kind == "wall"


def test_map_unknown_glyph_raises():
    with pytest.raises(ValueError, match="Unknown map glyph"):
        Map.from_rows(["#?#"])


def test_map_exit_positions():
    game_map = Map.from_rows(["#>#", ">.#"])
    assert game_map.exit_positions() == [Position(1, 0), Position(0, 1)]


def test_map_rows_and_dict():
    game_map = Map.from_rows(ROWS)
    assert game_map.to_rows() == ROWS
    restored = Map.from_dict(game_map.to_dict())
    assert restored.to_rows() == ROWS


def test_default_map_is_all_floor():
    game_map = Map(width=3, height=2)
    assert game_map.to_rows() == ["...", "..."]
    assert game_map.exit_positions() == []


def test_history_counts_rounds():
    history = History()
    assert history.rounds_played() == 0
    history.record("A", "walk", "east")
    history.record("B", "attack", "A")
    history.end_round()
    history.record("A", "rest")
    assert history.rounds_played() == 1
    assert [e.warrior for e in history.entries_for_round(1)] == ["A", "B"]
    assert history.entries_for_round(2)[0].action == "rest"
    history.end_round()
    assert history.rounds_played() == 2


def test_history_from_dict_clamps_negative_rounds():
    history = History.from_dict({"rounds_completed": -4})
    assert history.rounds_played() == 0


def test_warrior_from_dict_defaults():
    w = Warrior.from_dict({"name": "Ash", "hp": 5})
    assert w.max_hp == 5
    assert w.pos == Position(0, 0)


def test_create_simple_snapshot():
    snapshot = create_simple_snapshot(num_warriors=3, width=8, height=5)
    assert len(snapshot.roster) == 3
    assert snapshot.map.exit_positions() == [Position(7, 2)]
    assert all(w.alive() for w in snapshot.roster)
    assert not any(snapshot.map.look_down(w).is_exit() for w in snapshot.roster)
    assert snapshot.history.rounds_played() == 0


def test_snapshot_save_and_load(tmp_path):
    snapshot = create_simple_snapshot()
    snapshot.roster[0].hp = 0
    snapshot.history.record("Warrior 1", "walk", "east")
    snapshot.history.end_round()

    path = tmp_path / "snapshot.json"
    save_snapshot(snapshot, str(path))
    loaded = load_snapshot(str(path))

    assert loaded.roster == snapshot.roster
    assert loaded.map.to_rows() == snapshot.map.to_rows()
    assert loaded.history == snapshot.history

    data = json.loads(path.read_text())
    assert set(data) == {"roster", "map", "history"}


def test_snapshot_from_partial_dict():
    snapshot = Snapshot.from_dict({"roster": [{"name": "Solo"}]})
    assert [w.name for w in snapshot.roster] == ["Solo"]
    assert snapshot.history.rounds_played() == 0
    assert snapshot.map.width == 10


def test_map_size_follows_tile_array():
    tiles = np.full((2, 3), "exit", dtype=object)
    game_map = Map(tiles=tiles)
    assert (game_map.width, game_map.height) == (3, 2)
    assert game_map.look_down(Warrior(pos=Position(2, 1))).is_exit()
    # Outside the array reads as wall even though the default size is larger
    assert game_map.look_down(Warrior(pos=Position(5, 5))).kind == "wall"
    assert game_map.to_dict()["rows"] == [">>>", ">>>"]


def test_map_size_ignores_conflicting_arguments():
    game_map = Map(width=10, height=10, tiles=np.full((2, 2), "floor", dtype=object))
    assert (game_map.width, game_map.height) == (2, 2)
    assert not game_map.in_bounds(Position(2, 0))


def test_from_dict_null_fields_fall_back_to_defaults():
    w = Warrior.from_dict({"name": None, "hp": None, "max_hp": None, "pos": None})
    assert (w.name, w.hp, w.max_hp, w.pos) == ("Warrior", 20, 20, Position(0, 0))
    assert Position.from_dict({"x": None, "y": 4}) == Position(0, 4)

    history = History.from_dict({"entries": None, "rounds_completed": None})
    assert history == History()

    snapshot = Snapshot.from_dict({"roster": None, "map": None, "history": None})
    assert snapshot.roster == []
    assert snapshot.map.width == 10
    assert snapshot.history.rounds_played() == 0
