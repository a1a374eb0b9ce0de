import sys
from pathlib import Path
from typing import Any, Callable

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tilestream.config import WorldConfig

SMALL_WORLD = {
    'chunk_width': 16,
    'render_distance_in_chunks': 1,
    'fill_depth': 14,
    'rock_max_depth': 12,
}


@pytest.fixture
def make_config() -> Callable[..., WorldConfig]:
    def factory(**overrides: Any) -> WorldConfig:
        values = dict(SMALL_WORLD)
        values.update(overrides)
        return WorldConfig(**values)
    return factory
