import enum

from tilestream.utils import autoslots

UINT32_MASK = 0xFFFFFFFF
CHANCE_RESOLUTION = 10000
XORSHIFT_FALLBACK_STATE = 0x9E3779B9


class RandomStream(enum.IntEnum):
    """
    Salts for coord_hash. Each independent random decision hashes with its own
    stream so that two decisions made at the same coordinates never correlate.
    TILE_VARIANT must stay 0: it is the unsalted hash.
    """
    TILE_VARIANT = 0
    ENTRANCE_TRIAL = 1
    ENTRANCE_WALK = 2
    TREE_TRIAL = 3
    TREE_TRUNK = 4
    TREE_CANOPY = 5
    LEAF_VARIANT = 6
    ROCK_DEPTH = 7
    ROCK_SIZE = 8
    ROCK_TRIAL = 9


def _int32(value: int) -> int:
    value &= UINT32_MASK
    return value - 0x100000000 if value & 0x80000000 else value


def coord_hash(x: int, y: int, seed: int, salt: int = 0) -> int:
    h = 17
    h = _int32(h * 31 + x)
    h = _int32(h * 31 + y)
    h = _int32(h * 31 + seed)
    if salt:
        h = _int32(h * 31 + salt)
    h = _int32(h ^ (h << 13))
    h ^= h >> 17 # Arithmetic shift, stays in range
    h = _int32(h ^ (h << 5))
    return -h if h < 0 else h


def chance_roll(hash: int) -> float:
    return (hash % CHANCE_RESOLUTION) / CHANCE_RESOLUTION


def bernoulli(x: int, y: int, seed: int, stream: RandomStream, probability: float) -> bool:
    if probability <= 0:
        return False
    return chance_roll(coord_hash(x, y, seed, stream)) < probability


@autoslots
class XorShiftRandom:
    state: int

    def __init__(self, seed: int) -> None:
        self.state = (seed & UINT32_MASK) or XORSHIFT_FALLBACK_STATE

    def next_uint(self) -> int:
        x = self.state
        x ^= (x << 13) & UINT32_MASK
        x ^= x >> 17
        x ^= (x << 5) & UINT32_MASK
        self.state = x
        return x

    def next_float(self) -> float:
        return self.next_uint() / 4294967296.0

    def randint(self, a: int, b: int) -> int:
        if a > b:
            a, b = b, a
        return a + self.next_uint() % (b - a + 1)

    def __repr__(self) -> str:
        return f'<XorShiftRandom state={self.state:#010x}>'
