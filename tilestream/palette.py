import enum
import logging
from typing import Iterable, Mapping, Optional, Sequence, Union

from tilestream import tiles
from tilestream.tiles import Tile, get_tile_by_name
from tilestream.utils import autoslots
from tilestream.world_gen.hashing import RandomStream, coord_hash

TileSeq = Sequence[Optional[Tile]]

GRASS_EDGE_SLOTS = 3
DIRT_EDGE_SLOTS = 15
ROCK_SLOTS = 10
LEAF_SLOTS = 10


class GrassEdgeSlot(enum.IntEnum):
    LEFT = 0
    RIGHT = 1
    BOTH = 2


class RockSlot(enum.IntEnum):
    FILL = 0
    TOP_LEFT = 1
    TOP = 2
    TOP_RIGHT = 3
    LEFT = 4
    RIGHT = 5
    BOTTOM_LEFT = 6
    BOTTOM = 7
    BOTTOM_RIGHT = 8
    SPARE = 9


class LeafSlot(enum.IntEnum):
    FILL = 0
    LEFT = 1
    RIGHT = 2
    APEX = 3
    BOTTOM_LEFT = 4
    BOTTOM_RIGHT = 5
    BOTTOM_FILL = 6
    FILL_ALT_A = 7
    FILL_ALT_B = 8
    SPARE = 9


LEAF_FILL_SLOTS = (LeafSlot.FILL, LeafSlot.FILL_ALT_A, LeafSlot.FILL_ALT_B)

ROLE_NAMES = ('grass', 'grass_edges', 'dirt', 'dirt_edges', 'rock', 'leaves', 'trunk', 'wall', 'world_bottom')


@autoslots
class TilePalette:
    grass: tuple[Optional[Tile], ...]
    grass_edges: tuple[Optional[Tile], ...]
    dirt: tuple[Optional[Tile], ...]
    dirt_edges: tuple[Optional[Tile], ...]
    rock: tuple[Optional[Tile], ...]
    leaves: tuple[Optional[Tile], ...]
    trunk: Optional[Tile]
    wall: Optional[Tile]
    world_bottom: Optional[Tile]

    def __init__(
        self,
        grass: TileSeq = (),
        grass_edges: TileSeq = (),
        dirt: TileSeq = (),
        dirt_edges: TileSeq = (),
        rock: TileSeq = (),
        leaves: TileSeq = (),
        trunk: Optional[Tile] = None,
        wall: Optional[Tile] = None,
        world_bottom: Optional[Tile] = None,
    ) -> None:
        self.grass = tuple(grass)
        self.grass_edges = tuple(grass_edges)
        self.dirt = tuple(dirt)
        self.dirt_edges = tuple(dirt_edges)
        self.rock = tuple(rock)
        self.leaves = tuple(leaves)
        self.trunk = trunk
        self.wall = wall
        self.world_bottom = world_bottom

    @classmethod
    def from_names(cls, names: Mapping[str, Union[str, Iterable[Optional[str]], None]]) -> 'TilePalette':
        kwargs: dict = {}
        for (role, value) in names.items():
            if role not in ROLE_NAMES:
                raise KeyError(f'Unknown palette role {role!r}')
            if value is None or isinstance(value, str):
                kwargs[role] = None if value is None else get_tile_by_name(value)
            else:
                kwargs[role] = [None if name is None else get_tile_by_name(name) for name in value]
        return cls(**kwargs)

    def to_names(self) -> dict[str, Union[str, list[Optional[str]], None]]:
        result: dict[str, Union[str, list[Optional[str]], None]] = {}
        for role in ROLE_NAMES:
            value = getattr(self, role)
            if value is None or isinstance(value, Tile):
                result[role] = None if value is None else value.name
            else:
                result[role] = [None if tile is None else tile.name for tile in value]
        return result

    def check(self) -> list[str]:
        "Logs and returns the roles whose features will be skipped"
        defects: list[str] = []
        if not self.grass:
            defects.append('grass')
        if len(self.grass_edges) < GRASS_EDGE_SLOTS:
            defects.append('grass_edges')
        if not self.dirt:
            defects.append('dirt')
        if len(self.dirt_edges) < DIRT_EDGE_SLOTS:
            defects.append('dirt_edges')
        if len(self.rock) < ROCK_SLOTS:
            defects.append('rock')
        if len(self.leaves) < LEAF_SLOTS or self.trunk is None:
            defects.append('trees')
        for defect in defects:
            logging.warning('Tile palette is missing tiles for %s; that feature will be skipped', defect)
        return defects

    def variant(self, variants: TileSeq, x: int, y: int, seed: int, stream: int = RandomStream.TILE_VARIANT) -> Optional[Tile]:
        if not variants:
            return None
        return variants[coord_hash(x, y, seed, stream) % len(variants)]

    @staticmethod
    def slot(variants: TileSeq, slot: int) -> Optional[Tile]:
        if slot >= len(variants):
            return None
        return variants[slot]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TilePalette):
            return NotImplemented
        return all(getattr(self, role) == getattr(other, role) for role in ROLE_NAMES)

    def __repr__(self) -> str:
        return f'<TilePalette grass={len(self.grass)} dirt={len(self.dirt)} rock={len(self.rock)} leaves={len(self.leaves)}>'


DEFAULT_PALETTE = TilePalette(
    grass=tiles.GRASS,
    grass_edges=(tiles.GRASS_EDGE_LEFT, tiles.GRASS_EDGE_RIGHT, tiles.GRASS_EDGE_BOTH),
    dirt=tiles.DIRT,
    dirt_edges=tiles.DIRT_EDGES,
    rock=tiles.ROCK,
    leaves=tiles.LEAVES,
    trunk=tiles.TRUNK,
    wall=tiles.WALL,
    world_bottom=tiles.BEDROCK,
)
