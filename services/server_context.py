from dataclasses import dataclass

from services.live_reload_service import ConnectionPool
from services.watch_service import WatchService
from utils.config import Settings


@dataclass
class ServerContext:
    """Process-wide state, passed explicitly to everything that handles a connection."""
    settings: Settings
    pool: ConnectionPool
    watch_service: WatchService

    @classmethod
    def create(cls, settings: Settings, observer=None) -> "ServerContext":
        pool = ConnectionPool()
        return cls(settings=settings, pool=pool, watch_service=WatchService(pool, observer))
