from typing import TYPE_CHECKING

from tilestream.grid import Layer
from tilestream.palette import LEAF_FILL_SLOTS, LEAF_SLOTS, LeafSlot
from tilestream.world_gen.hashing import RandomStream, bernoulli, coord_hash
from tilestream.world_gen.phase import AbstractPhase

if TYPE_CHECKING:
    from tilestream.world_gen.chunk import ChunkBuffer

CANOPY_BOTTOM_TINT = 0.85
# Rows below each neighbour's surface that must be free of entrance cells
ENTRANCE_CLEARANCE = 2


class TreeDecorationPhase(AbstractPhase):
    def is_candidate(self, x: int) -> bool:
        config = self.config
        if config.tree_chance <= 0:
            return False
        height = self.generator.surface_height
        h = height(x)
        if abs(h - height(x - 1)) > config.tree_max_slope or abs(h - height(x + 1)) > config.tree_max_slope:
            return False
        return bernoulli(x, 0, self.generator.seed, RandomStream.TREE_TRIAL, config.tree_chance)

    def has_tree(self, x: int) -> bool:
        # Neighbours are re-rolled rather than read back, so this never
        # depends on what has been placed already
        return self.is_candidate(x) and not self.is_candidate(x - 1) and not self.is_candidate(x + 1)

    def shape(self, x: int) -> tuple[int, int]:
        config = self.config
        seed = self.generator.seed
        trunk_span = config.tree_max_trunk_height - config.tree_min_trunk_height + 1
        radius_span = config.tree_max_canopy_radius - config.tree_min_canopy_radius + 1
        trunk = config.tree_min_trunk_height + coord_hash(x, 0, seed, RandomStream.TREE_TRUNK) % trunk_span
        radius = config.tree_min_canopy_radius + coord_hash(x, 0, seed, RandomStream.TREE_CANOPY) % radius_span
        return trunk, radius

    def is_excluded(self, chunk: 'ChunkBuffer', x: int) -> bool:
        for cx in range(x - 1, x + 2):
            surface_y = chunk.surface(cx)
            for cy in range(surface_y - ENTRANCE_CLEARANCE, surface_y + 1):
                if (cx, cy) in chunk.carved:
                    return True
        return False

    def leaf_slot(self, x: int, y: int, dx: int, half_width: int, row: int, radius: int) -> LeafSlot:
        if row == radius:
            return LeafSlot.APEX
        if row == 0:
            if dx == -half_width:
                return LeafSlot.BOTTOM_LEFT
            if dx == half_width:
                return LeafSlot.BOTTOM_RIGHT
            return LeafSlot.BOTTOM_FILL
        if dx == -half_width:
            return LeafSlot.LEFT
        if dx == half_width:
            return LeafSlot.RIGHT
        return LEAF_FILL_SLOTS[coord_hash(x, y, self.generator.seed, RandomStream.LEAF_VARIANT) % len(LEAF_FILL_SLOTS)]

    def place_tree(self, chunk: 'ChunkBuffer', x: int) -> None:
        palette = self.generator.palette
        grid = chunk.grid
        surface_y = chunk.surface(x)
        trunk, radius = self.shape(x)
        if chunk.contains(x):
            for y in range(surface_y + 1, surface_y + trunk + 1):
                grid.set_tile(Layer.DECORATION, x, y, palette.trunk)
        canopy_y = surface_y + trunk + 1
        for row in range(radius + 1):
            y = canopy_y + row
            half_width = radius - row
            tint = CANOPY_BOTTOM_TINT + (1 - CANOPY_BOTTOM_TINT) * row / radius if radius else 1.0
            for dx in range(-half_width, half_width + 1):
                cx = x + dx
                if not chunk.contains(cx) or chunk.is_solid(cx, y):
                    continue
                if grid.get_tile(Layer.DECORATION, cx, y) is palette.trunk:
                    continue
                leaf = palette.slot(palette.leaves, self.leaf_slot(cx, y, dx, half_width, row, radius))
                if leaf is not None:
                    grid.set_tile(Layer.DECORATION, cx, y, leaf, tint)

    def generate_chunk(self, chunk: 'ChunkBuffer') -> None:
        palette = self.generator.palette
        if palette.trunk is None or len(palette.leaves) < LEAF_SLOTS:
            return
        reach = self.config.tree_max_canopy_radius
        # Trees just outside the chunk can still hang leaves into it
        for x in range(chunk.start_x - reach, chunk.end_x + reach):
            if self.has_tree(x) and not self.is_excluded(chunk, x):
                self.place_tree(chunk, x)
