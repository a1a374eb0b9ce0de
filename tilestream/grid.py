import enum
from typing import Iterator, NamedTuple, Optional

from tilestream.tiles import Tile
from tilestream.utils import autoslots


class Layer(enum.IntEnum):
    GROUND = 0
    DECORATION = 1
    WALL = 2


class TileCell(NamedTuple):
    tile: Tile
    tint: float = 1.0


@autoslots
class TileGrid:
    """
    Sparse tile storage. Each layer maps x -> y -> TileCell, so a whole column
    range can be dropped without knowing its vertical extent. Unset cells are
    empty.
    """
    layers: tuple[dict[int, dict[int, TileCell]], ...]

    def __init__(self) -> None:
        self.layers = tuple({} for _ in Layer)

    def get_cell(self, layer: Layer, x: int, y: int) -> Optional[TileCell]:
        column = self.layers[layer].get(x)
        if column is None:
            return None
        return column.get(y)

    def get_tile(self, layer: Layer, x: int, y: int) -> Optional[Tile]:
        cell = self.get_cell(layer, x, y)
        return None if cell is None else cell.tile

    def has_tile(self, layer: Layer, x: int, y: int) -> bool:
        return self.get_cell(layer, x, y) is not None

    def set_tile(self, layer: Layer, x: int, y: int, tile: Optional[Tile], tint: float = 1.0) -> None:
        columns = self.layers[layer]
        if tile is None:
            column = columns.get(x)
            if column is not None:
                column.pop(y, None)
                if not column:
                    del columns[x]
            return
        columns.setdefault(x, {})[y] = TileCell(tile, tint)

    def set_tint(self, layer: Layer, x: int, y: int, tint: float) -> None:
        cell = self.get_cell(layer, x, y)
        if cell is not None:
            self.layers[layer][x][y] = cell._replace(tint=tint)

    def clear_columns(self, start_x: int, end_x: int) -> None:
        for columns in self.layers:
            for x in range(start_x, end_x):
                columns.pop(x, None)

    def clear(self) -> None:
        for columns in self.layers:
            columns.clear()

    def update(self, other: 'TileGrid') -> None:
        for (columns, other_columns) in zip(self.layers, other.layers):
            for (x, column) in other_columns.items():
                columns.setdefault(x, {}).update(column)

    def columns(self, layer: Layer) -> list[int]:
        return sorted(self.layers[layer])

    def cells(self, layer: Layer) -> Iterator[tuple[int, int, TileCell]]:
        for (x, column) in sorted(self.layers[layer].items()):
            for (y, cell) in sorted(column.items()):
                yield x, y, cell

    def snapshot(self, start_x: int, end_x: int) -> dict[tuple[Layer, int, int], TileCell]:
        result: dict[tuple[Layer, int, int], TileCell] = {}
        for layer in Layer:
            columns = self.layers[layer]
            for x in range(start_x, end_x):
                for (y, cell) in columns.get(x, {}).items():
                    result[(layer, x, y)] = cell
        return result

    def count(self, layer: Optional[Layer] = None) -> int:
        layers = Layer if layer is None else (layer,)
        return sum(len(column) for l in layers for column in self.layers[l].values())

    def __repr__(self) -> str:
        return f'<TileGrid ground={self.count(Layer.GROUND)} decoration={self.count(Layer.DECORATION)} wall={self.count(Layer.WALL)}>'
