import enum
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from tilestream.config import WorldConfig
from tilestream.grid import Layer, TileGrid
from tilestream.tiles import Tile
from tilestream.utils import autoslots
from tilestream.world_gen.chunk import ChunkBuffer
from tilestream.world_gen.core import WorldGenerator


class ChunkState(enum.IntEnum):
    UNLOADED = 0
    GENERATING = 1
    ACTIVE = 2


@autoslots
class WorldStreamer:
    """
    Keeps the chunks around the viewer generated and everything else cleared.

    Edits made through set_tile, mine_tile and place_tile are not remembered:
    they last until the owning chunk is evicted or regenerated.
    """
    generator: WorldGenerator
    grid: TileGrid
    chunks: dict[int, ChunkState]
    viewer_x: float
    viewer_y: float

    def __init__(self, config: Optional[WorldConfig] = None) -> None:
        self.generator = WorldGenerator(WorldConfig() if config is None else config)
        self.grid = TileGrid()
        self.chunks = {}
        self.viewer_x = 0.0
        self.viewer_y = 0.0

    @property
    def config(self) -> WorldConfig:
        return self.generator.config

    def chunk_state(self, index: int) -> ChunkState:
        return self.chunks.get(index, ChunkState.UNLOADED)

    def active_chunks(self) -> list[int]:
        return sorted(i for (i, state) in self.chunks.items() if state == ChunkState.ACTIVE)

    def required_window(self, viewer_x: float) -> range:
        center = self.generator.chunk_index(viewer_x)
        distance = self.config.render_distance_in_chunks
        return range(center - distance, center + distance + 1)

    def tick(self, viewer_x: float, viewer_y: float = 0.0, force: bool = False) -> tuple[list[int], list[int]]:
        "Returns the chunk indices that were (re)generated and the ones that were evicted"
        self.viewer_x = viewer_x
        self.viewer_y = viewer_y
        required = self.required_window(viewer_x)
        to_generate = [i for i in required if force or i not in self.chunks]
        to_unload = [i for i in self.chunks if i not in required]
        for index in to_unload:
            self.unload_chunk(index)
        if to_generate:
            self.generate_chunks(to_generate)
        if to_generate or to_unload:
            logging.debug(
                'Tick at x=%s: generated %i chunks, unloaded %i chunks',
                viewer_x, len(to_generate), len(to_unload)
            )
        return to_generate, to_unload

    def generate_chunks(self, indices: list[int]) -> None:
        for index in indices:
            self.chunks[index] = ChunkState.GENERATING
        workers = self.config.generation_workers
        start = time.perf_counter()
        if workers > 1 and len(indices) > 1:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='ChunkGen') as executor:
                results = list(executor.map(self.generator.generate_chunk, indices))
        else:
            results = [self.generator.generate_chunk(index) for index in indices]
        for chunk in results:
            self.apply_chunk(chunk)
        end = time.perf_counter()
        logging.debug('Generated %i chunks in %f seconds', len(indices), end - start)

    def apply_chunk(self, chunk: ChunkBuffer) -> None:
        self.grid.clear_columns(chunk.start_x, chunk.end_x)
        self.grid.update(chunk.grid)
        self.chunks[chunk.index] = ChunkState.ACTIVE

    def unload_chunk(self, index: int) -> None:
        start_x, end_x = self.generator.chunk_range(index)
        self.grid.clear_columns(start_x, end_x)
        self.chunks.pop(index, None)

    def reset_world(self) -> None:
        logging.info('Resetting world around x=%s', self.viewer_x)
        self.grid.clear()
        self.chunks.clear()
        self.tick(self.viewer_x, self.viewer_y, force=True)

    def apply_config(self, config: WorldConfig, regenerate: bool = False) -> None:
        old_width = self.config.chunk_width
        self.generator = WorldGenerator(config)
        logging.info('Applied new world config (seed %i)', self.config.seed)
        if regenerate or self.config.chunk_width != old_width:
            self.reset_world()

    def is_loaded(self, x: int) -> bool:
        return self.chunk_state(self.generator.chunk_index(x)) == ChunkState.ACTIVE

    def get_tile(self, layer: Layer, x: int, y: int) -> Optional[Tile]:
        return self.grid.get_tile(layer, x, y)

    def set_tile(self, layer: Layer, x: int, y: int, tile: Optional[Tile]) -> bool:
        if not self.is_loaded(x):
            return False
        self.grid.set_tile(layer, x, y, tile)
        return True

    def mine_tile(self, x: int, y: int, include_wall: bool = False) -> bool:
        tile = self.grid.get_tile(Layer.GROUND, x, y)
        if tile is None or tile.unbreakable:
            return False
        if not self.set_tile(Layer.GROUND, x, y, None):
            return False
        if include_wall:
            self.grid.set_tile(Layer.WALL, x, y, None)
        return True

    def place_tile(self, x: int, y: int, tile: Tile) -> bool:
        if self.grid.has_tile(Layer.GROUND, x, y):
            return False
        if not self.grid.has_tile(Layer.GROUND, x, y - 1):
            return False
        return self.set_tile(Layer.GROUND, x, y, tile)

    def __repr__(self) -> str:
        return f'<WorldStreamer viewer_x={self.viewer_x} active={len(self.chunks)} {self.grid!r}>'
