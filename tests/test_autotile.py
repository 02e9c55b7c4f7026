from __future__ import annotations

import itertools

from tileworld.core.autotile import EDGES, SURROUNDED, resolve_autotile
from tileworld.core.tiles import AIR, STONE

from conftest import grid_world


def lookup_for(occupied):
    cells = set(occupied)
    return lambda x, y: STONE if (x, y) in cells else AIR


def neighbours(*names):
    offsets = {
        "up": (0, -1), "down": (0, 1), "left": (-1, 0), "right": (1, 0),
        "nw": (-1, -1), "ne": (1, -1), "sw": (-1, 1), "se": (1, 1),
    }
    return [offsets[n] for n in names]


def test_isolated_tile():
    assert resolve_autotile(lookup_for([]), 0, 0) == (0, 0)


def test_fully_surrounded():
    lookup = lookup_for(neighbours("up", "down", "left", "right", "nw", "ne", "sw", "se"))
    assert resolve_autotile(lookup, 0, 0) == (2, 2)


def test_cardinal_patterns():
    assert resolve_autotile(lookup_for(neighbours("right")), 0, 0) == (1, 0)
    assert resolve_autotile(lookup_for(neighbours("left", "right")), 0, 0) == (2, 0)
    assert resolve_autotile(lookup_for(neighbours("down", "left", "right")), 0, 0) == (2, 1)
    assert resolve_autotile(lookup_for(neighbours("up", "down")), 0, 0) == (0, 2)


def test_surrounded_without_diagonals():
    lookup = lookup_for(neighbours("up", "down", "left", "right"))
    assert resolve_autotile(lookup, 0, 0) == (4, 3)


def test_open_side_with_bottom_diagonals():
    right_open = lookup_for(neighbours("up", "down", "right", "sw", "se"))
    left_open = lookup_for(neighbours("up", "down", "left", "sw", "se"))
    assert resolve_autotile(right_open, 0, 0) == (4, 0)
    assert resolve_autotile(left_open, 0, 0) == (5, 0)


def test_every_neighbourhood_resolves_to_a_table_cell():
    cells = set(SURROUNDED.values()) | set(EDGES.values()) | {(4, 0), (5, 0)}
    names = ("up", "down", "left", "right", "nw", "ne", "sw", "se")
    for mask in itertools.product((False, True), repeat=8):
        chosen = [n for n, on in zip(names, mask) if on]
        offset = resolve_autotile(lookup_for(neighbours(*chosen)), 0, 0)
        assert offset in cells
        assert resolve_autotile(lookup_for(neighbours(*chosen)), 0, 0) == offset


def test_world_offsets_follow_edits():
    rows = [[AIR] * 5 for _ in range(3)] + [[STONE] * 5 for _ in range(2)]
    world = grid_world(rows)
    assert world.get_autotile_offset(2, 3) == (2, 1)
    world.set_tile_at(2, 2, STONE)
    assert world.get_autotile_offset(2, 3) == (4, 3)
    assert world.get_autotile_offset(2, 2) == (0, 1)
