import abc
from functools import lru_cache
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from tilestream.config import WorldConfig
    from tilestream.world_gen.chunk import ChunkBuffer
    from tilestream.world_gen.core import WorldGenerator

HEIGHTMAP_CACHE_SIZE = 4096


class AbstractPhase(abc.ABC):
    generator: 'WorldGenerator'

    def __init__(self, generator: 'WorldGenerator') -> None:
        self.generator = generator

    @property
    def config(self) -> 'WorldConfig':
        return self.generator.config

    @abc.abstractmethod
    def generate_chunk(self, chunk: 'ChunkBuffer') -> None:
        raise NotImplementedError


class HeightmappedPhase(AbstractPhase):
    _cached_height: Callable[[int], int]

    def __init__(self, generator: 'WorldGenerator') -> None:
        super().__init__(generator)
        # Heights are a pure function of x, so the memo never goes stale
        self._cached_height = lru_cache(maxsize=HEIGHTMAP_CACHE_SIZE)(self._get_height)

    @abc.abstractmethod
    def _get_height(self, x: int) -> int:
        raise NotImplementedError

    def get_height(self, x: int) -> int:
        return self._cached_height(x)
