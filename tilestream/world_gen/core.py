import logging
import math
import time

from tilestream.config import WorldConfig
from tilestream.palette import TilePalette
from tilestream.utils import autoslots
from tilestream.world_gen.chunk import ChunkBuffer
from tilestream.world_gen.phase import AbstractPhase
from tilestream.world_gen.phases.caves import CavePhase
from tilestream.world_gen.phases.classify import ClassifyPhase
from tilestream.world_gen.phases.decorations import TreeDecorationPhase
from tilestream.world_gen.phases.entrances import EntrancePhase
from tilestream.world_gen.phases.ground import GroundPhase
from tilestream.world_gen.phases.rocks import RockPhase

# Extra rows kept above the tallest possible tree and below the world bottom
VERTICAL_SLACK = 8


@autoslots
class WorldGenerator:
    config: WorldConfig
    palette: TilePalette
    seed: int
    ground: GroundPhase
    caves: CavePhase
    entrances: EntrancePhase
    rocks: RockPhase
    trees: TreeDecorationPhase
    classify: ClassifyPhase
    phases: list[AbstractPhase]

    def __init__(self, config: WorldConfig) -> None:
        config.validate()
        self.config = config.copy()
        self.palette = self.config.palette
        self.palette.check()
        self.seed = self.config.seed
        self.ground = GroundPhase(self)
        self.caves = CavePhase(self)
        self.entrances = EntrancePhase(self)
        self.rocks = RockPhase(self)
        self.trees = TreeDecorationPhase(self)
        self.classify = ClassifyPhase(self)
        self.phases = [
            self.entrances,
            self.caves,
            self.ground,
            self.rocks,
            self.trees,
            self.classify,
        ]

    def surface_height(self, x: int) -> int:
        return self.ground.get_height(x)

    def is_cave(self, x: int, y: int) -> bool:
        return self.caves.is_cave(x, y)

    def has_entrance(self, x: int) -> bool:
        return self.entrances.has_entrance(x)

    def entrance_path(self, x: int) -> frozenset[tuple[int, int]]:
        return self.entrances.entrance_path(x)

    def carve_set(self, start_x: int, end_x: int) -> set[tuple[int, int]]:
        return self.entrances.carve_set(start_x, end_x)

    def has_tree(self, x: int) -> bool:
        return self.trees.has_tree(x)

    def chunk_index(self, x: float) -> int:
        return math.floor(x) // self.config.chunk_width

    def chunk_range(self, index: int) -> tuple[int, int]:
        start_x = index * self.config.chunk_width
        return start_x, start_x + self.config.chunk_width

    def working_padding(self) -> int:
        config = self.config
        return max(config.rock_max_size, config.tree_max_canopy_radius) + 2

    def vertical_bounds(self) -> tuple[int, int]:
        config = self.config
        min_y = config.base_height - config.height_scale - config.fill_depth - VERTICAL_SLACK
        max_y = (
            config.base_height + config.height_scale
            + config.tree_max_trunk_height + config.tree_max_canopy_radius + 1
            + VERTICAL_SLACK
        )
        return min_y, max_y

    def generate_chunk(self, index: int) -> ChunkBuffer:
        start = time.perf_counter()
        chunk = ChunkBuffer(self, index)
        for phase in self.phases:
            phase.generate_chunk(chunk)
        end = time.perf_counter()
        logging.debug('Generated chunk %i in %f seconds', index, end - start)
        return chunk

    def __repr__(self) -> str:
        return f'<WorldGenerator seed={self.seed} chunk_width={self.config.chunk_width}>'

