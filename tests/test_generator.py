from tilestream import tiles
from tilestream.grid import Layer
from tilestream.palette import TilePalette
from tilestream.world import WorldStreamer
from tilestream.world_gen.core import WorldGenerator
from tilestream.world_gen.phases.classify import MASK_INTERIOR, neighbour_mask


def test_chunk_regeneration_is_identical(make_config) -> None:
    config = make_config(entrance_chance=0.2, tree_chance=0.3, rock_chance=0.3)
    generator = WorldGenerator(config)
    first = generator.generate_chunk(3)
    second = generator.generate_chunk(3)
    third = WorldGenerator(config).generate_chunk(3)
    start_x, end_x = first.start_x, first.end_x
    snapshot = first.grid.snapshot(start_x, end_x)
    assert snapshot
    assert second.grid.snapshot(start_x, end_x) == snapshot
    assert third.grid.snapshot(start_x, end_x) == snapshot


def test_chunk_output_stays_in_its_columns(make_config) -> None:
    generator = WorldGenerator(make_config(entrance_chance=0.2, tree_chance=0.5, rock_chance=0.5))
    for index in (-2, 0, 5):
        chunk = generator.generate_chunk(index)
        for layer in Layer:
            assert all(chunk.contains(x) for x in chunk.grid.columns(layer))


def test_fill_layout(make_config) -> None:
    config = make_config(entrance_chance=0.0, generate_caves=False, rock_chance=0.0)
    generator = WorldGenerator(config)
    chunk = generator.generate_chunk(0)
    grass = set(tiles.GRASS) | {tiles.GRASS_EDGE_LEFT, tiles.GRASS_EDGE_RIGHT, tiles.GRASS_EDGE_BOTH}
    dirt = set(tiles.DIRT) | set(tiles.DIRT_EDGES)
    for x in range(chunk.start_x, chunk.end_x):
        surface_y = generator.surface_height(x)
        assert chunk.grid.get_tile(Layer.GROUND, x, surface_y) in grass
        for y in range(surface_y - config.fill_depth, surface_y):
            assert chunk.grid.get_tile(Layer.GROUND, x, y) in dirt
            assert chunk.grid.get_tile(Layer.WALL, x, y) is tiles.WALL
        assert chunk.grid.get_tile(Layer.GROUND, x, surface_y - config.fill_depth - 1) is tiles.BEDROCK
        assert chunk.grid.get_tile(Layer.GROUND, x, surface_y - config.fill_depth - 2) is None


def test_cave_cells_keep_their_wall(make_config) -> None:
    generator = WorldGenerator(make_config(cave_threshold=0.3, surface_buffer=2))
    chunk = generator.generate_chunk(1)
    open_cells = 0
    for x in range(chunk.start_x, chunk.end_x):
        surface_y = generator.surface_height(x)
        for y in range(surface_y - 14, surface_y):
            if generator.is_cave(x, y):
                open_cells += 1
                assert chunk.grid.get_tile(Layer.GROUND, x, y) is None
                assert chunk.grid.get_tile(Layer.WALL, x, y) is tiles.WALL
    assert open_cells


def test_dirt_edges_match_neighbours(make_config) -> None:
    generator = WorldGenerator(make_config(cave_threshold=0.45, entrance_chance=0.2, rock_chance=0.0))
    for index in (0, 1):
        chunk = generator.generate_chunk(index)
        for (x, y, cell) in chunk.grid.cells(Layer.GROUND):
            if cell.tile in tiles.DIRT_EDGES:
                assert tiles.DIRT_EDGES.index(cell.tile) == neighbour_mask(chunk, x, y)
            elif cell.tile in tiles.DIRT:
                assert neighbour_mask(chunk, x, y) == MASK_INTERIOR


def test_depth_shading(make_config) -> None:
    config = make_config(shade_floor=0.5)
    chunk = WorldGenerator(config).generate_chunk(0)
    for layer in (Layer.GROUND, Layer.WALL):
        for (x, y, cell) in chunk.grid.cells(layer):
            assert 0.5 <= cell.tint <= 1.0
            if y == chunk.surface(x):
                assert cell.tint == 1.0
    for x in range(chunk.start_x, chunk.end_x):
        bottom = chunk.grid.get_cell(Layer.GROUND, x, chunk.surface(x) - config.fill_depth - 1)
        assert bottom is not None and bottom.tint == 0.5


def test_shading_off(make_config) -> None:
    chunk = WorldGenerator(make_config(depth_shading=False)).generate_chunk(0)
    for layer in (Layer.GROUND, Layer.WALL):
        assert all(cell.tint == 1.0 for (_, _, cell) in chunk.grid.cells(layer))


def test_shade_curve(make_config) -> None:
    generator = WorldGenerator(make_config(fill_depth=15, shade_floor=0.4))
    shade = generator.classify.shade
    assert shade(0) == 1.0
    assert shade(5) > shade(6)
    assert abs(shade(5) - 0.7) < 1e-9
    assert abs(shade(10) - 0.4) < 1e-9
    assert shade(100) == 0.4


def test_parallel_generation_matches_serial(make_config) -> None:
    config = make_config(render_distance_in_chunks=2, entrance_chance=0.2, tree_chance=0.3, rock_chance=0.2)
    serial = WorldStreamer(config)
    serial.tick(0.0)
    config.set_value('generation_workers', 4)
    parallel = WorldStreamer(config)
    parallel.tick(0.0)
    assert parallel.active_chunks() == serial.active_chunks()
    assert parallel.grid.snapshot(-40, 40) == serial.grid.snapshot(-40, 40)


def test_empty_palette_skips_everything(make_config) -> None:
    generator = WorldGenerator(make_config(palette=TilePalette(), tree_chance=0.5, rock_chance=0.5))
    for index in range(3):
        assert generator.generate_chunk(index).grid.count() == 0


def test_chunk_index_floors(make_config) -> None:
    generator = WorldGenerator(make_config(chunk_width=16))
    assert generator.chunk_index(0) == 0
    assert generator.chunk_index(15.9) == 0
    assert generator.chunk_index(16) == 1
    assert generator.chunk_index(-0.5) == -1
    assert generator.chunk_index(-16) == -1
    assert generator.chunk_index(-17) == -2
    assert generator.chunk_range(-1) == (-16, 0)


def test_vertical_bounds_cover_the_world(make_config) -> None:
    config = make_config(entrance_chance=0.0, tree_chance=0.5)
    generator = WorldGenerator(config)
    min_y, max_y = generator.vertical_bounds()
    chunk = generator.generate_chunk(0)
    for layer in Layer:
        for (_, y, _) in chunk.grid.cells(layer):
            assert min_y <= y <= max_y
