import logging
import sys
from typing import Optional, TypeVar

from colorama import Back, Fore, Style

T = TypeVar('T')

LEVEL_STYLES = {
    'DEBUG': Fore.CYAN,
    'WARN': Fore.YELLOW,
    'ERROR': Fore.RED,
    'SEVERE': Back.RED + Fore.WHITE,
}

LOG_FORMAT = '[%(asctime)s] [%(threadName)s/%(levelname)s] [%(module)s:%(lineno)i]: %(message)s'
TIME_FORMAT = '%H:%M:%S'

DEBUG = '--debug' in sys.argv


def autoslots(cls: T) -> T:
    slots = set(getattr(cls, '__slots__', ()))
    slots.update(cls.__annotations__)
    cls.__slots__ = slots
    return cls


class ColoredFormatter(logging.Formatter):
    use_color: bool

    def __init__(self, use_color: bool = True) -> None:
        super().__init__(LOG_FORMAT, TIME_FORMAT)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        style = LEVEL_STYLES.get(record.levelname)
        if self.use_color and style is not None:
            return style + message + Style.RESET_ALL
        return message


def get_opt(opt: str, offset: int = 1) -> str:
    return sys.argv[sys.argv.index(opt) + offset]


def clamp(value: float, low: float, high: float) -> float:
    return low if value < low else high if value > high else value


def lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


def init_logger(log_file: Optional[str] = None, debug: bool = DEBUG) -> None:
    "Logs to stderr in colour and, if log_file is given, to that file without"
    logging.addLevelName(logging.WARN, 'WARN')
    logging.addLevelName(logging.CRITICAL, 'SEVERE')
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    console = logging.StreamHandler()
    console.setFormatter(ColoredFormatter(sys.stderr.isatty()))
    root.addHandler(console)
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, 'w', encoding='utf-8')
        file_handler.setFormatter(ColoredFormatter(False))
        root.addHandler(file_handler)
