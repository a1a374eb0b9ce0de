from typing import TYPE_CHECKING

from opensimplex import OpenSimplex

from tilestream.utils import autoslots, clamp, lerp
from tilestream.world_gen.perlin import PerlinNoise
from tilestream.world_gen.phase import AbstractPhase

if TYPE_CHECKING:
    from tilestream.world_gen.chunk import ChunkBuffer
    from tilestream.world_gen.core import WorldGenerator

FLIP_CONSTANT = 8112343193046603085

# Threshold offsets at the top and bottom of the cave band
SHALLOW_THRESHOLD_OFFSET = 0.08
DEEP_THRESHOLD_OFFSET = -0.05
# Decorrelates the two warp axes
WARP_Y_OFFSET = (31.7, 47.3)


@autoslots
class CavePhase(AbstractPhase):
    simplex: OpenSimplex
    warp: PerlinNoise

    def __init__(self, generator: 'WorldGenerator') -> None:
        super().__init__(generator)
        self.simplex = OpenSimplex(generator.seed)
        self.warp = PerlinNoise(generator.seed ^ FLIP_CONSTANT)

    def noise(self, x: float, y: float) -> float:
        total = 0.0
        norm = 0.0
        amplitude = 1.0
        frequency = 1.0
        for _ in range(self.config.cave_octaves):
            total += amplitude * (self.simplex.noise2(x * frequency, y * frequency) + 1) * 0.5
            norm += amplitude
            amplitude *= 0.5
            frequency *= 2.0
        return total / norm

    def threshold(self, depth: int) -> float:
        config = self.config
        span = config.fill_depth - config.surface_buffer
        t = 0.0 if span <= 0 else clamp((depth - config.surface_buffer) / span, 0.0, 1.0)
        return lerp(
            config.cave_threshold + SHALLOW_THRESHOLD_OFFSET,
            config.cave_threshold + DEEP_THRESHOLD_OFFSET,
            t
        )

    def is_cave(self, x: int, y: int) -> bool:
        config = self.config
        if not config.generate_caves:
            return False
        depth = self.generator.surface_height(x) - y
        if depth < 1 or depth < config.surface_buffer or depth > config.fill_depth:
            return False
        sx = float(x)
        sy = float(y)
        if config.domain_warp and config.warp_amplitude > 0:
            wf = config.warp_frequency
            sx += (self.warp.noise01_2d(x * wf, y * wf) - 0.5) * config.warp_amplitude
            sy += (self.warp.noise01_2d(x * wf + WARP_Y_OFFSET[0], y * wf + WARP_Y_OFFSET[1]) - 0.5) * config.warp_amplitude
        frequency = config.cave_frequency
        return self.noise(sx * frequency, sy * frequency) > self.threshold(depth)

    def generate_chunk(self, chunk: 'ChunkBuffer') -> None:
        # Sample the chunk's columns plus one on each side, which is everything
        # the fill and classification passes read
        fill_depth = self.config.fill_depth
        for x in range(chunk.start_x - 1, chunk.end_x + 1):
            surface_y = chunk.surface(x)
            for y in range(surface_y - 1, surface_y - fill_depth - 1, -1):
                chunk.mark_open(x, y, self.is_cave(x, y))
