from typing import TYPE_CHECKING

from tilestream.world_gen.hashing import RandomStream, XorShiftRandom, bernoulli, coord_hash
from tilestream.world_gen.phase import AbstractPhase

if TYPE_CHECKING:
    from tilestream.world_gen.chunk import ChunkBuffer

# Cumulative probability, dx, dy. Down is -y.
DIRECTIONS = (
    (0.50, 0, -1),
    (0.70, -1, -1),
    (0.90, 1, -1),
    (0.95, -1, 0),
    (1.00, 1, 0),
)
LEVEL_STEPS_BEFORE_NUDGE = 2


def pick_direction(roll: float) -> tuple[int, int]:
    for (cumulative, dx, dy) in DIRECTIONS:
        if roll < cumulative:
            return dx, dy
    return DIRECTIONS[-1][1:]


class EntrancePhase(AbstractPhase):
    """
    Entrance tunnels. Whether a column starts an entrance, and the exact path
    of its tunnel, are replayed from the seed every time they are needed.
    """

    def margin(self) -> int:
        config = self.config
        radius = max(config.entrance_mouth_radius, config.entrance_tunnel_radius)
        return config.entrance_max_horizontal_drift + radius + 2

    def is_candidate(self, x: int) -> bool:
        config = self.config
        if config.entrance_chance <= 0:
            return False
        height = self.generator.surface_height
        h = height(x)
        if abs(h - height(x - 1)) > config.entrance_max_slope or abs(h - height(x + 1)) > config.entrance_max_slope:
            return False
        return bernoulli(x, 0, self.generator.seed, RandomStream.ENTRANCE_TRIAL, config.entrance_chance)

    def has_entrance(self, x: int) -> bool:
        return self.is_candidate(x) and not self.is_candidate(x - 1) and not self.is_candidate(x + 1)

    def walk(self, start_x: int) -> frozenset[tuple[int, int]]:
        config = self.config
        start_y = self.generator.surface_height(start_x)
        rand = XorShiftRandom(coord_hash(start_x, start_y, self.generator.seed, RandomStream.ENTRANCE_WALK))
        steps = rand.randint(config.entrance_min_steps, config.entrance_max_steps)
        min_x = start_x - config.entrance_max_horizontal_drift
        max_x = start_x + config.entrance_max_horizontal_drift
        cells: set[tuple[int, int]] = set()
        x = start_x
        y = start_y
        level_steps = 0
        for step in range(steps):
            if step < config.entrance_mouth_steps:
                radius = config.entrance_mouth_radius
            else:
                radius = config.entrance_tunnel_radius
            self._carve_diamond(cells, x, y, radius, min_x, max_x)
            dx, dy = pick_direction(rand.next_float())
            early = step < config.entrance_early_steps
            if early and level_steps >= LEVEL_STEPS_BEFORE_NUDGE:
                dy = -1
            if early and dy == 0:
                level_steps += 1
            else:
                level_steps = 0
            x = min(max(x + dx, min_x), max_x)
            y += dy
            if start_y - y > config.fill_depth:
                break
        return frozenset(cells)

    def _carve_diamond(
        self, cells: set[tuple[int, int]], cx: int, cy: int, radius: int, min_x: int, max_x: int
    ) -> None:
        for dx in range(-radius, radius + 1):
            x = cx + dx
            if x < min_x or x > max_x:
                continue
            reach = radius - abs(dx)
            for dy in range(-reach, reach + 1):
                cells.add((x, cy + dy))

    def entrance_path(self, x: int) -> frozenset[tuple[int, int]]:
        if not self.has_entrance(x):
            return frozenset()
        return self.walk(x)

    def carve_set(self, start_x: int, end_x: int) -> set[tuple[int, int]]:
        margin = self.margin()
        result: set[tuple[int, int]] = set()
        for x in range(start_x - margin, end_x + margin):
            if not self.has_entrance(x):
                continue
            result.update(cell for cell in self.walk(x) if start_x <= cell[0] < end_x)
        return result

    def generate_chunk(self, chunk: 'ChunkBuffer') -> None:
        chunk.carved = self.carve_set(chunk.work_start, chunk.work_end)
