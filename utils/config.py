import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

# Url segment that routes resolution to the bundled assets instead of the serving root
INTERNAL_PREFIX = '_hotserve'
INTERNAL_ASSETS_DIR = str(Path(__file__).resolve().parent.parent / 'webapp')

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 7000

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off')


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    root: str = field(default_factory=os.getcwd)
    assets_dir: str = INTERNAL_ASSETS_DIR
    # When False, "/../" segments may resolve outside the serving root
    confine_to_root: bool = True
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the environment.
        A .env file in the working directory is loaded first, real environment
        variables take precedence over it.
        """
        load_dotenv(find_dotenv(usecwd=True))

        port_value = os.getenv("HOTSERVE_PORT", str(DEFAULT_PORT))
        try:
            port = int(port_value)
        except ValueError:
            raise ValueError(f"HOTSERVE_PORT must be an integer, got {port_value!r}")
        if not 0 <= port <= 65535:
            raise ValueError(f"HOTSERVE_PORT out of range: {port}")

        log_level = os.getenv("HOTSERVE_LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"Unknown HOTSERVE_LOG_LEVEL: {log_level}")

        settings = cls(
            host=os.getenv("HOTSERVE_HOST", DEFAULT_HOST),
            port=port,
            root=os.path.abspath(os.getenv("HOTSERVE_ROOT") or os.getcwd()),
            confine_to_root=_parse_bool(
                "HOTSERVE_CONFINE_TO_ROOT", os.getenv("HOTSERVE_CONFINE_TO_ROOT", "true")),
            log_level=log_level,
        )
        logger.debug("Loaded settings: %s", settings)
        return settings
