from typing import TYPE_CHECKING

from tilestream.grid import TileGrid
from tilestream.utils import autoslots

if TYPE_CHECKING:
    from tilestream.world_gen.core import WorldGenerator


@autoslots
class ChunkBuffer:
    """
    The complete output of one chunk generation, built off to the side and
    applied to the world grid in one step.

    Predicates (is_open, is_solid, ...) are pure functions of the seed and the
    config, so they give the same answer for a neighbour column as that
    neighbour's own chunk would. They are only exact inside the working range
    [work_start, work_end), which is as far as the carve set reaches.
    """
    generator: 'WorldGenerator'
    index: int
    start_x: int
    end_x: int
    work_start: int
    work_end: int
    fill_depth: int
    grid: TileGrid
    carved: set[tuple[int, int]]
    dirt_cells: set[tuple[int, int]]
    _open: dict[tuple[int, int], bool]

    def __init__(self, generator: 'WorldGenerator', index: int) -> None:
        self.generator = generator
        self.index = index
        self.start_x, self.end_x = generator.chunk_range(index)
        padding = generator.working_padding()
        self.work_start = self.start_x - padding
        self.work_end = self.end_x + padding
        self.fill_depth = generator.config.fill_depth
        self.grid = TileGrid()
        self.carved = set()
        self.dirt_cells = set()
        self._open = {}

    def contains(self, x: int) -> bool:
        return self.start_x <= x < self.end_x

    def surface(self, x: int) -> int:
        return self.generator.surface_height(x)

    def is_open(self, x: int, y: int) -> bool:
        "Whether an underground cell was carved by an entrance or a cave"
        if (x, y) in self.carved:
            return True
        result = self._open.get((x, y))
        if result is None:
            result = self._open[(x, y)] = self.generator.is_cave(x, y)
        return result

    def mark_open(self, x: int, y: int, is_open: bool) -> None:
        self._open[(x, y)] = is_open

    def is_solid(self, x: int, y: int) -> bool:
        s = self.surface(x)
        if y > s:
            return False
        if y == s:
            return (x, y) not in self.carved
        if y < s - self.fill_depth:
            return True # World bottom
        return not self.is_open(x, y)

    def is_dirt_bearing(self, x: int, y: int) -> bool:
        s = self.surface(x)
        return s - self.fill_depth <= y < s and not self.is_open(x, y)

    def __repr__(self) -> str:
        return f'<ChunkBuffer index={self.index} range=[{self.start_x}, {self.end_x}) {self.grid!r}>'
