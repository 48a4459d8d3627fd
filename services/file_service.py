import asyncio
import logging
import os

from utils.errors import ResourceNotFound, from_os_error

logger = logging.getLogger(__name__)


def _read_bytes(path: str) -> bytes:
    with open(path, 'rb') as f:
        return f.read()


async def is_file(path: str) -> bool:
    """Stat `path` off the event loop. Any failure counts as "not a file"."""
    try:
        return await asyncio.to_thread(os.path.isfile, path)
    except ValueError:
        return False


async def read_file(path: str) -> bytes:
    try:
        return await asyncio.to_thread(_read_bytes, path)
    except OSError as e:
        raise from_os_error(e, path) from e
    except ValueError as e:
        # embedded null byte in the decoded url
        raise ResourceNotFound(path, str(e)) from e


async def list_directory(path: str) -> list[str]:
    """Immediate entries of a directory, sorted by name."""
    try:
        entries = await asyncio.to_thread(os.listdir, path)
    except OSError as e:
        raise from_os_error(e, path) from e
    except ValueError as e:
        raise ResourceNotFound(path, str(e)) from e
    return sorted(entries)
