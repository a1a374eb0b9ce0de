from typing import Any

from tilestream import tiles
from tilestream.grid import Layer
from tilestream.palette import DEFAULT_PALETTE, ROLE_NAMES, LeafSlot, RockSlot, TilePalette
from tilestream.world_gen.chunk import ChunkBuffer
from tilestream.world_gen.core import WorldGenerator
from tilestream.world_gen.phases.decorations import CANOPY_BOTTOM_TINT
from tilestream.world_gen.phases.rocks import rock_slot


def palette_with(**overrides: Any) -> TilePalette:
    roles = {role: getattr(DEFAULT_PALETTE, role) for role in ROLE_NAMES}
    roles.update(overrides)
    return TilePalette(**roles)


def quiet_config(make_config, **overrides: Any):
    values = {
        'generate_caves': False,
        'entrance_chance': 0.0,
        'tree_chance': 0.0,
        'rock_chance': 0.0,
    }
    values.update(overrides)
    return make_config(**values)


def test_no_adjacent_trees(make_config) -> None:
    generator = WorldGenerator(make_config(tree_chance=0.6))
    trees = [x for x in range(-500, 500) if generator.has_tree(x)]
    assert trees
    for x in trees:
        assert not generator.has_tree(x + 1)


def test_zero_tree_chance_places_nothing(make_config) -> None:
    generator = WorldGenerator(make_config(generate_caves=False, tree_chance=0.0))
    for index in range(63):
        chunk = generator.generate_chunk(index)
        assert chunk.grid.count(Layer.DECORATION) == 0


def test_tree_shape(make_config) -> None:
    config = make_config(tree_chance=0.5)
    generator = WorldGenerator(config)
    for x in range(200):
        trunk, radius = generator.trees.shape(x)
        assert config.tree_min_trunk_height <= trunk <= config.tree_max_trunk_height
        assert config.tree_min_canopy_radius <= radius <= config.tree_max_canopy_radius


def test_trees_grow_from_the_surface(make_config) -> None:
    config = quiet_config(make_config, tree_chance=0.5)
    generator = WorldGenerator(config)
    trunk_tile = generator.palette.trunk
    placed = 0
    for index in range(4):
        chunk = generator.generate_chunk(index)
        for x in range(chunk.start_x, chunk.end_x):
            if not generator.has_tree(x):
                continue
            placed += 1
            surface_y = generator.surface_height(x)
            trunk, _ = generator.trees.shape(x)
            for y in range(surface_y + 1, surface_y + trunk + 1):
                assert chunk.grid.get_tile(Layer.DECORATION, x, y) is trunk_tile
    assert placed


def test_leaves_never_overlap_solid_cells(make_config) -> None:
    generator = WorldGenerator(make_config(tree_chance=0.5, entrance_chance=0.2))
    leaves = set(tiles.LEAVES)
    found = 0
    for index in range(-3, 3):
        chunk = generator.generate_chunk(index)
        for (x, y, cell) in chunk.grid.cells(Layer.DECORATION):
            assert chunk.contains(x)
            assert not chunk.is_solid(x, y)
            if cell.tile in leaves:
                found += 1
                assert CANOPY_BOTTOM_TINT <= cell.tint <= 1.0
    assert found


def test_entrance_excludes_tree(make_config) -> None:
    generator = WorldGenerator(quiet_config(make_config))
    chunk = ChunkBuffer(generator, 0)
    x = 5
    assert not generator.trees.is_excluded(chunk, x)
    chunk.carved.add((x + 1, generator.surface_height(x + 1) - 1))
    assert generator.trees.is_excluded(chunk, x)


def test_trees_skipped_without_trunk(make_config) -> None:
    config = make_config(tree_chance=0.5, palette=palette_with(trunk=None))
    generator = WorldGenerator(config)
    for index in range(3):
        assert generator.generate_chunk(index).grid.count(Layer.DECORATION) == 0


def test_rock_slots() -> None:
    assert rock_slot(0, 0, 2) == RockSlot.TOP_LEFT
    assert rock_slot(1, 0, 2) == RockSlot.TOP_RIGHT
    assert rock_slot(0, 1, 2) == RockSlot.BOTTOM_LEFT
    assert rock_slot(1, 1, 2) == RockSlot.BOTTOM_RIGHT
    assert rock_slot(1, 0, 3) == RockSlot.TOP
    assert rock_slot(0, 1, 3) == RockSlot.LEFT
    assert rock_slot(2, 1, 3) == RockSlot.RIGHT
    assert rock_slot(1, 2, 3) == RockSlot.BOTTOM
    assert rock_slot(1, 1, 3) == RockSlot.FILL


def test_short_rock_palette_writes_nothing(make_config) -> None:
    config = quiet_config(make_config, palette=palette_with(rock=tiles.ROCK[:9]))
    generator = WorldGenerator(config)
    chunk = generator.generate_chunk(0)
    before = chunk.grid.snapshot(chunk.start_x, chunk.end_x)
    y = generator.surface_height(2) - 5
    assert not generator.rocks.try_place_rock(chunk, 2, y, 2)
    assert chunk.grid.snapshot(chunk.start_x, chunk.end_x) == before
    # Single cell rocks only need the fill slot
    assert generator.rocks.try_place_rock(chunk, 2, y, 1)
    assert chunk.grid.get_tile(Layer.GROUND, 2, y) is tiles.ROCK[RockSlot.FILL]


def test_short_rock_palette_skips_large_rocks(make_config) -> None:
    config = make_config(
        rock_chance=1.0, rock_min_size=2, rock_max_size=3,
        palette=palette_with(rock=tiles.ROCK[:9]),
    )
    generator = WorldGenerator(config)
    rocks = set(tiles.ROCK)
    for index in range(4):
        chunk = generator.generate_chunk(index)
        assert not any(cell.tile in rocks for (_, _, cell) in chunk.grid.cells(Layer.GROUND))


def test_place_rock(make_config) -> None:
    generator = WorldGenerator(quiet_config(make_config))
    chunk = generator.generate_chunk(0)
    y = generator.surface_height(2) - 5
    assert generator.rocks.try_place_rock(chunk, 2, y, 2)
    grid = chunk.grid
    assert grid.get_tile(Layer.GROUND, 2, y) is tiles.ROCK[RockSlot.TOP_LEFT]
    assert grid.get_tile(Layer.GROUND, 3, y) is tiles.ROCK[RockSlot.TOP_RIGHT]
    assert grid.get_tile(Layer.GROUND, 2, y - 1) is tiles.ROCK[RockSlot.BOTTOM_LEFT]
    assert grid.get_tile(Layer.GROUND, 3, y - 1) is tiles.ROCK[RockSlot.BOTTOM_RIGHT]
    assert (2, y) not in chunk.dirt_cells


def test_rock_clipped_to_chunk(make_config) -> None:
    generator = WorldGenerator(quiet_config(make_config))
    chunk = generator.generate_chunk(0)
    y = generator.surface_height(15) - 5
    assert generator.rocks.try_place_rock(chunk, 15, y, 2)
    assert grid_has(chunk, 15, y)
    assert not grid_has(chunk, 16, y)


def grid_has(chunk: ChunkBuffer, x: int, y: int) -> bool:
    return chunk.grid.get_tile(Layer.GROUND, x, y) in set(tiles.ROCK)


def test_rock_refuses_carved_border(make_config) -> None:
    generator = WorldGenerator(quiet_config(make_config))
    chunk = generator.generate_chunk(0)
    y = generator.surface_height(4) - 5
    chunk.carved.add((3, y))
    assert not generator.rocks.try_place_rock(chunk, 4, y, 2)
    assert not grid_has(chunk, 4, y)


def test_rock_refuses_surface(make_config) -> None:
    generator = WorldGenerator(quiet_config(make_config))
    chunk = generator.generate_chunk(0)
    assert not generator.rocks.try_place_rock(chunk, 4, generator.surface_height(4), 1)


def test_rocks_only_replace_dirt(make_config) -> None:
    config = make_config(rock_chance=1.0, entrance_chance=0.2)
    generator = WorldGenerator(config)
    rocks = set(tiles.ROCK)
    placed = 0
    for index in range(-2, 3):
        chunk = generator.generate_chunk(index)
        carved = generator.carve_set(chunk.start_x, chunk.end_x)
        for (x, y, cell) in chunk.grid.cells(Layer.GROUND):
            if cell.tile not in rocks:
                continue
            placed += 1
            surface_y = generator.surface_height(x)
            assert surface_y - config.fill_depth <= y < surface_y
            assert not generator.is_cave(x, y)
            assert (x, y) not in carved
    assert placed


def test_empty_fill_slot_refuses_small_rock(make_config) -> None:
    rock = [None] + tiles.ROCK[1:]
    generator = WorldGenerator(quiet_config(make_config, palette=palette_with(rock=rock)))
    chunk = generator.generate_chunk(0)
    y = generator.surface_height(2) - 5
    assert not generator.rocks.try_place_rock(chunk, 2, y, 1)
    assert chunk.grid.get_tile(Layer.GROUND, 2, y) in set(tiles.DIRT) | set(tiles.DIRT_EDGES)


def test_empty_leaf_slot_leaves_gap(make_config) -> None:
    leaves = list(tiles.LEAVES)
    leaves[LeafSlot.APEX] = None
    generator = WorldGenerator(quiet_config(make_config, tree_chance=0.5, palette=palette_with(leaves=leaves)))
    placed = set()
    for index in range(4):
        chunk = generator.generate_chunk(index)
        placed.update(cell.tile for (_, _, cell) in chunk.grid.cells(Layer.DECORATION))
    assert tiles.LEAVES[LeafSlot.APEX] not in placed
    assert tiles.LEAVES[LeafSlot.BOTTOM_LEFT] in placed
