from tilestream import tiles
from tilestream.grid import TileCell
from tilestream.preview import cell_char, render_rows
from tilestream.world import WorldStreamer


def test_cell_chars() -> None:
    assert cell_char(None, False) == ' '
    assert cell_char(TileCell(tiles.GRASS_EDGE_LEFT), False) == '"'
    assert cell_char(TileCell(tiles.DIRT_EDGES[3]), False) == '#'
    assert cell_char(TileCell(tiles.BEDROCK), False) == '='
    assert cell_char(TileCell(tiles.TRUNK), False) == '|'
    assert cell_char(TileCell(tiles.WALL, 0.5), True).endswith('.' + '\033[0m')


def test_render_rows(make_config) -> None:
    streamer = WorldStreamer(make_config(chunk_width=8, generate_caves=False, entrance_chance=0.0))
    streamer.tick(0.0)
    rows = render_rows(streamer, -8, 16, use_color=False)
    assert rows
    assert all(len(row) == 24 for row in rows)
    assert '=' in rows[-1]
    assert set(rows[-1]) <= {'=', ' '}
