import logging
from typing import TYPE_CHECKING, Optional

from tilestream.grid import Layer
from tilestream.palette import ROCK_SLOTS, RockSlot
from tilestream.world_gen.hashing import RandomStream, bernoulli, coord_hash
from tilestream.world_gen.phase import AbstractPhase

if TYPE_CHECKING:
    from tilestream.world_gen.chunk import ChunkBuffer


def rock_slot(dx: int, dy: int, size: int) -> RockSlot:
    "dx grows right and dy grows down from the top-left corner"
    last = size - 1
    if dy == 0:
        if dx == 0:
            return RockSlot.TOP_LEFT
        if dx == last:
            return RockSlot.TOP_RIGHT
        return RockSlot.TOP
    if dy == last:
        if dx == 0:
            return RockSlot.BOTTOM_LEFT
        if dx == last:
            return RockSlot.BOTTOM_RIGHT
        return RockSlot.BOTTOM
    if dx == 0:
        return RockSlot.LEFT
    if dx == last:
        return RockSlot.RIGHT
    return RockSlot.FILL


class RockPhase(AbstractPhase):
    def anchor(self, x: int) -> Optional[tuple[int, int]]:
        "The top-left cell and size of the rock anchored in column x, if any"
        config = self.config
        if config.rock_chance <= 0:
            return None
        seed = self.generator.seed
        depth_span = config.rock_max_depth - config.rock_min_depth + 1
        size_span = config.rock_max_size - config.rock_min_size + 1
        depth = config.rock_min_depth + coord_hash(x, 0, seed, RandomStream.ROCK_DEPTH) % depth_span
        size = config.rock_min_size + coord_hash(x, 0, seed, RandomStream.ROCK_SIZE) % size_span
        # Bigger rocks are rarer
        if not bernoulli(x, depth, seed, RandomStream.ROCK_TRIAL, config.rock_chance / size):
            return None
        return self.generator.surface_height(x) - depth, size

    def try_place_rock(self, chunk: 'ChunkBuffer', x: int, y: int, size: int) -> bool:
        palette = self.generator.palette
        rock = palette.rock
        if size < 1:
            return False
        if size == 1:
            if palette.slot(rock, RockSlot.FILL) is None:
                return False
        elif len(rock) < ROCK_SLOTS or any(tile is None for tile in rock[:RockSlot.SPARE]):
            return False
        for dx in range(size):
            for dy in range(size):
                if not chunk.is_dirt_bearing(x + dx, y - dy):
                    return False
        for cx in range(x - 1, x + size + 1):
            for cy in range(y - size, y + 2):
                if (cx, cy) in chunk.carved:
                    return False
        for dx in range(size):
            cx = x + dx
            if not chunk.contains(cx):
                continue
            for dy in range(size):
                slot = RockSlot.FILL if size == 1 else rock_slot(dx, dy, size)
                chunk.grid.set_tile(Layer.GROUND, cx, y - dy, palette.slot(rock, slot))
                chunk.dirt_cells.discard((cx, y - dy))
        return True

    def generate_chunk(self, chunk: 'ChunkBuffer') -> None:
        placed = 0
        for x in range(chunk.start_x - self.config.rock_max_size + 1, chunk.end_x):
            anchor = self.anchor(x)
            if anchor is None:
                continue
            y, size = anchor
            if x + size <= chunk.start_x:
                continue
            if self.try_place_rock(chunk, x, y, size):
                placed += 1
        if placed:
            logging.debug('Placed %i rocks touching chunk %i', placed, chunk.index)
