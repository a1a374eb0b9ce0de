import logging
import sys
from typing import Optional

import colorama
from colorama import Fore, Style

from tilestream.config import ConfigManager, WorldConfig
from tilestream.grid import Layer, TileCell
from tilestream.utils import get_opt, init_logger
from tilestream.world import WorldStreamer

# Checked in order against the tile name
TILE_CHARS = (
    ('grass', '"', Fore.GREEN),
    ('dirt', '#', Fore.YELLOW),
    ('rock', 'o', Fore.WHITE),
    ('leaves', '*', Fore.GREEN),
    ('trunk', '|', Fore.RED),
    ('bedrock', '=', Fore.MAGENTA),
    ('wall', '.', Fore.BLUE),
)
DIM_BELOW_TINT = 0.7


def cell_char(cell: Optional[TileCell], use_color: bool) -> str:
    if cell is None:
        return ' '
    for (prefix, char, color) in TILE_CHARS:
        if cell.tile.name.startswith(prefix):
            break
    else:
        char, color = '?', Fore.RED
    if not use_color:
        return char
    style = Style.DIM if cell.tint < DIM_BELOW_TINT else Style.NORMAL
    return style + color + char + Style.RESET_ALL


def render_rows(streamer: WorldStreamer, start_x: int, end_x: int, use_color: bool = True) -> list[str]:
    grid = streamer.grid
    min_y, max_y = streamer.generator.vertical_bounds()
    rows: list[str] = []
    for y in range(max_y, min_y - 1, -1):
        row = []
        for x in range(start_x, end_x):
            cell = (
                grid.get_cell(Layer.DECORATION, x, y)
                or grid.get_cell(Layer.GROUND, x, y)
                or grid.get_cell(Layer.WALL, x, y)
            )
            row.append(cell_char(cell, use_color))
        line = ''.join(row)
        if line.strip():
            rows.append(line)
    return rows


def option(name: str) -> Optional[str]:
    if name not in sys.argv:
        return None
    return get_opt(name)


def load_config() -> WorldConfig:
    config_path = option('--config')
    config = WorldConfig() if config_path is None else ConfigManager(config_path).load()
    seed = option('--seed')
    if seed is not None:
        config.set_value('seed', int(seed))
    chunks = option('--chunks')
    if chunks is not None:
        config.set_value('render_distance_in_chunks', int(chunks))
    return config


def main() -> None:
    init_logger(None if '--no-log' in sys.argv else 'preview.log')
    use_color = '--no-color' not in sys.argv
    with colorama.colorama_text():
        config = load_config()
        viewer_x = float(option('--x') or 0.0)
        logging.info('Generating world with seed %i around x=%s', config.seed, viewer_x)
        streamer = WorldStreamer(config)
        streamer.tick(viewer_x)
        active = streamer.active_chunks()
        start_x = streamer.generator.chunk_range(active[0])[0]
        end_x = streamer.generator.chunk_range(active[-1])[1]
        for line in render_rows(streamer, start_x, end_x, use_color):
            print(line)
        logging.info('Rendered columns [%i, %i) from %i chunks', start_x, end_x, len(active))
        save_path = option('--save-config')
        if save_path is not None:
            ConfigManager(save_path).save(streamer.config)


if __name__ == '__main__':
    main()
