from typing import Optional

from typing_extensions import Self

TILES: list[Optional['Tile']] = [None] * 256
TILES_BY_NAME: dict[str, 'Tile'] = {}


def get_tile_by_id(id: int) -> Optional['Tile']:
    return TILES[id]


def get_tile_by_name(name: str) -> 'Tile':
    try:
        return TILES_BY_NAME[name]
    except KeyError:
        raise KeyError(f'No tile named {name!r}') from None


class Tile:
    id: int
    name: str
    collidable: bool
    unbreakable: bool = False

    def __init__(self, id: int, name: str) -> None:
        if TILES[id] is not None:
            raise ValueError(f'Tile id {id} is already taken by {TILES[id]!r}')
        self.id = id
        self.name = name
        self.collidable = True
        TILES[id] = self
        TILES_BY_NAME[name] = self

    def set_collidable(self, collidable: bool) -> Self:
        self.collidable = collidable
        return self

    def set_unbreakable(self, unbreakable: bool) -> Self:
        self.unbreakable = unbreakable
        return self

    def __repr__(self) -> str:
        return f'<Tile {self.name} id={self.id}>'


GRASS = [Tile(1 + i, f'grass_{i}') for i in range(4)]
GRASS_EDGE_LEFT  = Tile(5, 'grass_edge_left')
GRASS_EDGE_RIGHT = Tile(6, 'grass_edge_right')
GRASS_EDGE_BOTH  = Tile(7, 'grass_edge_both')
DIRT = [Tile(8 + i, f'dirt_{i}') for i in range(4)]
# Indexed by neighbour bitmask; mask 15 is the interior and uses DIRT
DIRT_EDGES = [Tile(12 + mask, f'dirt_edge_{mask}') for mask in range(15)]
ROCK = [
    Tile(27 + slot, f'rock_{name}')
    for (slot, name) in enumerate((
        'fill', 'top_left', 'top', 'top_right', 'left',
        'right', 'bottom_left', 'bottom', 'bottom_right', 'spare',
    ))
]
LEAVES = [
    Tile(37 + slot, f'leaves_{name}').set_collidable(False)
    for (slot, name) in enumerate((
        'fill', 'left', 'right', 'apex', 'bottom_left',
        'bottom_right', 'bottom_fill', 'fill_alt_a', 'fill_alt_b', 'spare',
    ))
]
TRUNK  = Tile(47, 'trunk').set_collidable(False)
WALL   = Tile(48, 'wall').set_collidable(False)
BEDROCK = Tile(49, 'bedrock').set_unbreakable(True)
