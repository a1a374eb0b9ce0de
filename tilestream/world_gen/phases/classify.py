from typing import TYPE_CHECKING, Optional

from tilestream.grid import Layer
from tilestream.palette import DIRT_EDGE_SLOTS, GRASS_EDGE_SLOTS, GrassEdgeSlot
from tilestream.tiles import Tile
from tilestream.world_gen.phase import AbstractPhase

if TYPE_CHECKING:
    from tilestream.world_gen.chunk import ChunkBuffer

MASK_LEFT = 1
MASK_RIGHT = 2
MASK_ABOVE = 4
MASK_BELOW = 8
MASK_INTERIOR = MASK_LEFT | MASK_RIGHT | MASK_ABOVE | MASK_BELOW
# Shading reaches its floor this many rows above the bottom of the fill
SHADE_BOTTOM_MARGIN = 5


def neighbour_mask(chunk: 'ChunkBuffer', x: int, y: int) -> int:
    mask = 0
    if chunk.is_solid(x - 1, y):
        mask |= MASK_LEFT
    if chunk.is_solid(x + 1, y):
        mask |= MASK_RIGHT
    if chunk.is_solid(x, y + 1):
        mask |= MASK_ABOVE
    if chunk.is_solid(x, y - 1):
        mask |= MASK_BELOW
    return mask


class ClassifyPhase(AbstractPhase):
    """
    Second pass: edge and corner variants plus depth shading.

    Neighbour occupancy comes from the chunk's pure predicates rather than from
    tiles already in the world, so a chunk's edge columns classify the same
    way whether or not the neighbouring chunk exists yet.
    """

    def shade(self, depth: int) -> float:
        config = self.config
        if not config.depth_shading or depth <= 0:
            return 1.0
        span = max(1, config.fill_depth - SHADE_BOTTOM_MARGIN)
        return max(config.shade_floor, 1.0 - (1.0 - config.shade_floor) * depth / span)

    def surface_variant(self, chunk: 'ChunkBuffer', x: int, y: int) -> Optional[Tile]:
        edges = self.generator.palette.grass_edges
        if len(edges) < GRASS_EDGE_SLOTS:
            return None
        left_open = not chunk.is_solid(x - 1, y)
        right_open = not chunk.is_solid(x + 1, y)
        if left_open and right_open:
            return edges[GrassEdgeSlot.BOTH]
        if left_open:
            return edges[GrassEdgeSlot.LEFT]
        if right_open:
            return edges[GrassEdgeSlot.RIGHT]
        return None

    def dirt_variant(self, chunk: 'ChunkBuffer', x: int, y: int) -> Optional[Tile]:
        edges = self.generator.palette.dirt_edges
        if len(edges) < DIRT_EDGE_SLOTS:
            return None
        mask = neighbour_mask(chunk, x, y)
        if mask == MASK_INTERIOR:
            return None
        return edges[mask]

    def generate_chunk(self, chunk: 'ChunkBuffer') -> None:
        grid = chunk.grid
        fill_depth = self.config.fill_depth
        for x in range(chunk.start_x, chunk.end_x):
            surface_y = chunk.surface(x)
            if grid.has_tile(Layer.GROUND, x, surface_y):
                edge = self.surface_variant(chunk, x, surface_y)
                if edge is not None:
                    grid.set_tile(Layer.GROUND, x, surface_y, edge)
            for y in range(surface_y - 1, surface_y - fill_depth - 1, -1):
                if (x, y) not in chunk.dirt_cells:
                    continue
                edge = self.dirt_variant(chunk, x, y)
                if edge is not None:
                    grid.set_tile(Layer.GROUND, x, y, edge)
            if self.config.depth_shading:
                for y in range(surface_y, surface_y - fill_depth - 2, -1):
                    tint = self.shade(surface_y - y)
                    grid.set_tint(Layer.GROUND, x, y, tint)
                    grid.set_tint(Layer.WALL, x, y, tint)
