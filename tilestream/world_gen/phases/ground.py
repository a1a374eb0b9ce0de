from typing import TYPE_CHECKING

from tilestream.grid import Layer
from tilestream.utils import autoslots
from tilestream.world_gen.perlin import PerlinNoise
from tilestream.world_gen.phase import HeightmappedPhase

if TYPE_CHECKING:
    from tilestream.world_gen.chunk import ChunkBuffer
    from tilestream.world_gen.core import WorldGenerator


@autoslots
class GroundPhase(HeightmappedPhase):
    perlin: PerlinNoise

    def __init__(self, generator: 'WorldGenerator') -> None:
        super().__init__(generator)
        self.perlin = PerlinNoise(generator.seed)

    def _get_height(self, x: int) -> int:
        config = self.config
        n = self.perlin.noise01_1d((x + config.seed) * config.noise_frequency)
        return config.base_height + round((n - 0.5) * 2 * config.height_scale)

    def generate_chunk(self, chunk: 'ChunkBuffer') -> None:
        palette = self.generator.palette
        seed = self.generator.seed
        fill_depth = self.config.fill_depth
        grid = chunk.grid
        for x in range(chunk.start_x, chunk.end_x):
            surface_y = self.get_height(x)
            if (x, surface_y) in chunk.carved:
                # Entrance mouth
                grid.set_tile(Layer.WALL, x, surface_y, palette.wall)
            else:
                grid.set_tile(Layer.GROUND, x, surface_y, palette.variant(palette.grass, x, surface_y, seed))
            for y in range(surface_y - 1, surface_y - fill_depth - 1, -1):
                grid.set_tile(Layer.WALL, x, y, palette.wall)
                if chunk.is_open(x, y):
                    continue
                dirt = palette.variant(palette.dirt, x, y, seed)
                if dirt is not None:
                    grid.set_tile(Layer.GROUND, x, y, dirt)
                    chunk.dirt_cells.add((x, y))
            grid.set_tile(Layer.GROUND, x, surface_y - fill_depth - 1, palette.world_bottom)
