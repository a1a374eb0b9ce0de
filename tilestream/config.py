import json
import logging
from pathlib import Path
from typing import Any, Optional, TypedDict, Union

from tilestream.palette import DEFAULT_PALETTE, TilePalette
from tilestream.utils import autoslots

CONFIG_VERSION = 1
INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1


class ConfigError(ValueError):
    pass


class _Config(TypedDict):
    seed: int
    chunk_width: int
    render_distance_in_chunks: int
    base_height: int
    height_scale: int
    noise_frequency: float
    fill_depth: int
    generate_caves: bool
    cave_frequency: float
    cave_threshold: float
    cave_octaves: int
    surface_buffer: int
    domain_warp: bool
    warp_frequency: float
    warp_amplitude: float
    entrance_chance: float
    entrance_max_slope: int
    entrance_min_steps: int
    entrance_max_steps: int
    entrance_mouth_steps: int
    entrance_early_steps: int
    entrance_mouth_radius: int
    entrance_tunnel_radius: int
    entrance_max_horizontal_drift: int
    tree_chance: float
    tree_max_slope: int
    tree_min_trunk_height: int
    tree_max_trunk_height: int
    tree_min_canopy_radius: int
    tree_max_canopy_radius: int
    rock_chance: float
    rock_min_depth: int
    rock_max_depth: int
    rock_min_size: int
    rock_max_size: int
    depth_shading: bool
    shade_floor: float
    generation_workers: int


DEFAULT_CONFIG: _Config = {
    'seed': 12345,
    'chunk_width': 16,
    'render_distance_in_chunks': 6,
    'base_height': 8,
    'height_scale': 6,
    'noise_frequency': 0.05,
    'fill_depth': 40,
    'generate_caves': True,
    'cave_frequency': 0.08,
    'cave_threshold': 0.6,
    'cave_octaves': 3,
    'surface_buffer': 4,
    'domain_warp': True,
    'warp_frequency': 0.03,
    'warp_amplitude': 6.0,
    'entrance_chance': 0.04,
    'entrance_max_slope': 1,
    'entrance_min_steps': 12,
    'entrance_max_steps': 28,
    'entrance_mouth_steps': 3,
    'entrance_early_steps': 6,
    'entrance_mouth_radius': 2,
    'entrance_tunnel_radius': 1,
    'entrance_max_horizontal_drift': 8,
    'tree_chance': 0.12,
    'tree_max_slope': 1,
    'tree_min_trunk_height': 3,
    'tree_max_trunk_height': 6,
    'tree_min_canopy_radius': 1,
    'tree_max_canopy_radius': 3,
    'rock_chance': 0.05,
    'rock_min_depth': 3,
    'rock_max_depth': 30,
    'rock_min_size': 1,
    'rock_max_size': 3,
    'depth_shading': True,
    'shade_floor': 0.4,
    'generation_workers': 0,
}


@autoslots
class ConfigField:
    name: str
    type: type
    minimum: Optional[float]
    maximum: Optional[float]
    header: str

    def __init__(
        self, name: str, type: type, minimum: Optional[float], maximum: Optional[float], header: str
    ) -> None:
        self.name = name
        self.type = type
        self.minimum = minimum
        self.maximum = maximum
        self.header = header

    @property
    def label(self) -> str:
        return self.name.replace('_', ' ').capitalize()

    def coerce(self, value: Any) -> Any:
        if self.type is bool:
            if not isinstance(value, bool):
                raise ConfigError(f'{self.name} must be a bool, not {value!r}')
            return value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f'{self.name} must be a number, not {value!r}')
        if self.type is int:
            if isinstance(value, float) and not value.is_integer():
                raise ConfigError(f'{self.name} must be an integer, not {value!r}')
            value = int(value)
        else:
            value = float(value)
        if self.minimum is not None and value < self.minimum:
            raise ConfigError(f'{self.name} must be at least {self.minimum} (got {value})')
        if self.maximum is not None and value > self.maximum:
            raise ConfigError(f'{self.name} must be at most {self.maximum} (got {value})')
        return value

    def __repr__(self) -> str:
        return f'<ConfigField {self.name} {self.type.__name__} [{self.minimum}, {self.maximum}]>'


CONFIG_FIELDS: tuple[ConfigField, ...] = (
    ConfigField('seed', int, INT32_MIN, INT32_MAX, 'World'),
    ConfigField('chunk_width', int, 1, 256, 'World'),
    ConfigField('render_distance_in_chunks', int, 1, 64, 'World'),
    ConfigField('base_height', int, -4096, 4096, 'World'),
    ConfigField('height_scale', int, 0, 256, 'World'),
    ConfigField('noise_frequency', float, 0.0, 1.0, 'World'),
    ConfigField('fill_depth', int, 1, 1024, 'World'),
    ConfigField('generate_caves', bool, None, None, 'Caves'),
    ConfigField('cave_frequency', float, 0.0, 1.0, 'Caves'),
    ConfigField('cave_threshold', float, 0.0, 1.0, 'Caves'),
    ConfigField('cave_octaves', int, 1, 8, 'Caves'),
    ConfigField('surface_buffer', int, 0, 1024, 'Caves'),
    ConfigField('domain_warp', bool, None, None, 'Caves'),
    ConfigField('warp_frequency', float, 0.0, 1.0, 'Caves'),
    ConfigField('warp_amplitude', float, 0.0, 64.0, 'Caves'),
    ConfigField('entrance_chance', float, 0.0, 1.0, 'Entrances'),
    ConfigField('entrance_max_slope', int, 0, 64, 'Entrances'),
    ConfigField('entrance_min_steps', int, 1, 512, 'Entrances'),
    ConfigField('entrance_max_steps', int, 1, 512, 'Entrances'),
    ConfigField('entrance_mouth_steps', int, 0, 512, 'Entrances'),
    ConfigField('entrance_early_steps', int, 0, 512, 'Entrances'),
    ConfigField('entrance_mouth_radius', int, 0, 16, 'Entrances'),
    ConfigField('entrance_tunnel_radius', int, 0, 16, 'Entrances'),
    ConfigField('entrance_max_horizontal_drift', int, 0, 128, 'Entrances'),
    ConfigField('tree_chance', float, 0.0, 1.0, 'Trees'),
    ConfigField('tree_max_slope', int, 0, 64, 'Trees'),
    ConfigField('tree_min_trunk_height', int, 1, 64, 'Trees'),
    ConfigField('tree_max_trunk_height', int, 1, 64, 'Trees'),
    ConfigField('tree_min_canopy_radius', int, 0, 16, 'Trees'),
    ConfigField('tree_max_canopy_radius', int, 0, 16, 'Trees'),
    ConfigField('rock_chance', float, 0.0, 1.0, 'Rocks'),
    ConfigField('rock_min_depth', int, 1, 1024, 'Rocks'),
    ConfigField('rock_max_depth', int, 1, 1024, 'Rocks'),
    ConfigField('rock_min_size', int, 1, 16, 'Rocks'),
    ConfigField('rock_max_size', int, 1, 16, 'Rocks'),
    ConfigField('depth_shading', bool, None, None, 'Shading'),
    ConfigField('shade_floor', float, 0.35, 1.0, 'Shading'),
    ConfigField('generation_workers', int, 0, 64, 'Streaming'),
)
FIELDS_BY_NAME = {field.name: field for field in CONFIG_FIELDS}

# (minimum, maximum) pairs that must be ordered
_ORDERED_PAIRS = (
    ('entrance_min_steps', 'entrance_max_steps'),
    ('tree_min_trunk_height', 'tree_max_trunk_height'),
    ('tree_min_canopy_radius', 'tree_max_canopy_radius'),
    ('rock_min_depth', 'rock_max_depth'),
    ('rock_min_size', 'rock_max_size'),
)


def get_field(name: str) -> ConfigField:
    try:
        return FIELDS_BY_NAME[name]
    except KeyError:
        raise ConfigError(f'Unknown config field {name!r}') from None


class WorldConfig:
    seed: int
    chunk_width: int
    render_distance_in_chunks: int
    base_height: int
    height_scale: int
    noise_frequency: float
    fill_depth: int
    generate_caves: bool
    cave_frequency: float
    cave_threshold: float
    cave_octaves: int
    surface_buffer: int
    domain_warp: bool
    warp_frequency: float
    warp_amplitude: float
    entrance_chance: float
    entrance_max_slope: int
    entrance_min_steps: int
    entrance_max_steps: int
    entrance_mouth_steps: int
    entrance_early_steps: int
    entrance_mouth_radius: int
    entrance_tunnel_radius: int
    entrance_max_horizontal_drift: int
    tree_chance: float
    tree_max_slope: int
    tree_min_trunk_height: int
    tree_max_trunk_height: int
    tree_min_canopy_radius: int
    tree_max_canopy_radius: int
    rock_chance: float
    rock_min_depth: int
    rock_max_depth: int
    rock_min_size: int
    rock_max_size: int
    depth_shading: bool
    shade_floor: float
    generation_workers: int

    version: int
    palette: TilePalette

    def __init__(self, palette: Optional[TilePalette] = None, **overrides: Any) -> None:
        self.version = CONFIG_VERSION
        self.palette = DEFAULT_PALETTE if palette is None else palette
        for (name, value) in DEFAULT_CONFIG.items():
            setattr(self, name, value)
        for (name, value) in overrides.items():
            self.set_value(name, value)

    def get_value(self, name: str) -> Any:
        return getattr(self, get_field(name).name)

    def set_value(self, name: str, value: Any) -> None:
        setattr(self, name, get_field(name).coerce(value))

    def validate(self) -> None:
        if self.chunk_width <= 0:
            raise ConfigError(f'chunk_width must be positive (got {self.chunk_width})')
        if self.render_distance_in_chunks <= 0:
            raise ConfigError(f'render_distance_in_chunks must be positive (got {self.render_distance_in_chunks})')
        if self.fill_depth <= 0:
            raise ConfigError(f'fill_depth must be positive (got {self.fill_depth})')
        for field in CONFIG_FIELDS:
            field.coerce(getattr(self, field.name))
        for (low_name, high_name) in _ORDERED_PAIRS:
            low = getattr(self, low_name)
            high = getattr(self, high_name)
            if low > high:
                raise ConfigError(f'{low_name} ({low}) must not exceed {high_name} ({high})')

    def copy(self) -> 'WorldConfig':
        return WorldConfig(self.palette, **self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        return {field.name: getattr(self, field.name) for field in CONFIG_FIELDS}

    @classmethod
    def from_dict(cls, data: dict[str, Any], palette: Optional[TilePalette] = None) -> 'WorldConfig':
        data = dict(data)
        version = data.pop('version', CONFIG_VERSION)
        if not isinstance(version, int) or version > CONFIG_VERSION:
            raise ConfigError(f'Config version too new! ({version} > {CONFIG_VERSION})')
        palette_names = data.pop('palette', None)
        if palette is None and palette_names is not None:
            try:
                palette = TilePalette.from_names(palette_names)
            except KeyError as e:
                raise ConfigError(f'Invalid palette: {e.args[0]}') from e
        unknown = [name for name in data if name not in FIELDS_BY_NAME]
        for name in unknown:
            logging.warning('Ignoring unknown config field %r', name)
            del data[name]
        config = cls(palette, **data)
        config.validate()
        return config

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WorldConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict() and self.palette == other.palette

    def __repr__(self) -> str:
        return f'<WorldConfig seed={self.seed} chunk_width={self.chunk_width} version={self.version}>'


class ConfigManager:
    path: Path
    config: WorldConfig

    def __init__(self, path: Union[str, Path] = 'world_config.json') -> None:
        self.path = Path(path)
        self.config = WorldConfig()

    def load(self) -> WorldConfig:
        logging.info('Loading config...')
        try:
            with open(self.path, encoding='utf-8') as fp:
                data = json.load(fp)
        except (OSError, json.JSONDecodeError):
            logging.warning('Unable to load config. Loading default config...', exc_info=True)
            self.config = WorldConfig()
            return self.config
        if not isinstance(data, dict):
            logging.warning('Config file does not contain an object. Loading default config...')
            self.config = WorldConfig()
            return self.config
        self.config = WorldConfig.from_dict(data)
        logging.info('Loaded config')
        return self.config

    def save(self, config: Optional[WorldConfig] = None) -> bool:
        if config is not None:
            self.config = config
        logging.info('Saving config...')
        data: dict[str, Any] = {'version': CONFIG_VERSION}
        data.update(self.config.to_dict())
        data['palette'] = self.config.palette.to_names()
        try:
            with open(self.path, 'w', encoding='utf-8') as fp:
                json.dump(data, fp, indent=2)
        except (OSError, TypeError):
            logging.warning('Unable to save config', exc_info=True)
            return False
        logging.info('Saved config')
        return True
