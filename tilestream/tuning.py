import logging
import random
from typing import Any, Optional

from tilestream.config import CONFIG_FIELDS, ConfigError, ConfigField, WorldConfig, get_field
from tilestream.utils import autoslots
from tilestream.world import WorldStreamer


@autoslots
class WorldTuner:
    """
    Edit-then-apply access to a streamer's config for tuning panels. Values are
    checked against their ConfigField as they are set, but nothing reaches the
    streamer until apply().
    """
    streamer: WorldStreamer
    pending: dict[str, Any]

    def __init__(self, streamer: WorldStreamer) -> None:
        self.streamer = streamer
        self.pending = {}
        self.reload()

    def fields(self) -> tuple[ConfigField, ...]:
        return CONFIG_FIELDS

    def headers(self) -> list[str]:
        result: list[str] = []
        for field in CONFIG_FIELDS:
            if field.header not in result:
                result.append(field.header)
        return result

    def get(self, name: str) -> Any:
        get_field(name)
        return self.pending[name]

    def set(self, name: str, value: Any) -> None:
        self.pending[name] = get_field(name).coerce(value)

    def is_dirty(self) -> bool:
        return self.pending != self.streamer.config.to_dict()

    def reload(self) -> None:
        self.pending = self.streamer.config.to_dict()

    def randomize_seed(self, rand: Optional[random.Random] = None) -> int:
        if rand is None:
            rand = random.Random()
        field = get_field('seed')
        if field.minimum is None or field.maximum is None:
            raise ConfigError('The seed field has no range to pick from')
        seed = rand.randint(int(field.minimum) // 2, int(field.maximum) // 2)
        self.pending['seed'] = seed
        return seed

    def build_config(self) -> WorldConfig:
        config = WorldConfig(self.streamer.config.palette, **self.pending)
        config.validate()
        return config

    def apply(self, regenerate: bool = False) -> WorldConfig:
        config = self.build_config()
        logging.info('Applying tuned config%s', ' and regenerating' if regenerate else '')
        self.streamer.apply_config(config, regenerate)
        self.reload()
        return config
