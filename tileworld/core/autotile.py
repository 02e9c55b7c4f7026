from __future__ import annotations
from typing import Callable, Dict, Tuple

from .tiles import TileId, AIR

Offset = Tuple[int, int]
TileLookup = Callable[[int, int], TileId]

# (nw, ne, sw, se) -> atlas cell, used when all four cardinals are occupied
SURROUNDED: Dict[Tuple[bool, bool, bool, bool], Offset] = {
    (True, True, True, True): (2, 2),
    (False, True, True, True): (5, 1),
    (True, False, True, True): (4, 1),
    (False, False, True, True): (4, 3),
    (True, True, False, True): (2, 2),
    (False, True, False, True): (2, 2),
    (True, False, True, False): (6, 1),
    (True, True, True, False): (2, 2),
    (False, False, False, True): (4, 2),
    (True, False, False, True): (5, 2),
    (False, True, True, False): (6, 2),
    (False, True, False, False): (7, 2),
    (True, True, False, False): (3, 2),
    (False, False, True, False): (5, 3),
    (False, False, False, False): (4, 3),
    (True, False, False, False): (7, 3),
}

# (up, down, left, right) -> atlas cell for every other cardinal pattern
EDGES: Dict[Tuple[bool, bool, bool, bool], Offset] = {
    (False, False, False, False): (0, 0),
    (False, False, False, True): (1, 0),
    (False, False, True, True): (2, 0),
    (False, False, True, False): (3, 0),
    (False, True, False, False): (0, 1),
    (False, True, False, True): (1, 1),
    (False, True, True, True): (2, 1),
    (False, True, True, False): (3, 1),
    (True, True, False, False): (0, 2),
    (True, True, False, True): (1, 2),
    (True, True, True, False): (3, 2),
    (True, False, False, False): (0, 3),
    (True, False, False, True): (1, 3),
    (True, False, True, True): (2, 3),
    (True, False, True, False): (3, 3),
}

FULLY_SURROUNDED: Offset = (2, 2)


def resolve_autotile(lookup: TileLookup, x: int, y: int) -> Offset:
    """
    Tileset cell for the tile at (x, y) from which of its 8 neighbours are occupied.
    Any non-air tile counts as occupied.
    """

    def occupied(tx: int, ty: int) -> bool:
        return lookup(tx, ty) != AIR

    up = occupied(x, y - 1)
    down = occupied(x, y + 1)
    left = occupied(x - 1, y)
    right = occupied(x + 1, y)

    nw = occupied(x - 1, y - 1)
    ne = occupied(x + 1, y - 1)
    sw = occupied(x - 1, y + 1)
    se = occupied(x + 1, y + 1)

    if up and down and left and right:
        return SURROUNDED.get((nw, ne, sw, se), FULLY_SURROUNDED)

    # open on one side, both top diagonals missing, bottom diagonals present
    if up and down and sw and se and not nw and not ne:
        if right and not left:
            return (4, 0)
        if left and not right:
            return (5, 0)

    return EDGES.get((up, down, left, right), (0, 0))
