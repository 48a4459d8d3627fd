import asyncio
import logging

from models.request import Request
from services.live_reload_service import BAD_REQUEST, handshake_response
from services.server_context import ServerContext
from utils.errors import BadUpgradeRequest

logger = logging.getLogger(__name__)


def validate_upgrade(request: Request) -> str:
    """Return the client's Sec-WebSocket-Key, or raise BadUpgradeRequest."""
    upgrade = request.header('upgrade')
    if upgrade != 'websocket':
        raise BadUpgradeRequest(f"Unsupported upgrade: {upgrade!r}")
    key = request.header('sec-websocket-key')
    if not key:
        raise BadUpgradeRequest("Missing Sec-WebSocket-Key")
    return key


async def handle_upgrade(request: Request, reader: asyncio.StreamReader,
                         writer: asyncio.StreamWriter, ctx: ServerContext):
    """
    Accept a live reload connection.

    After the handshake nothing is ever sent on the socket. The connection sits in
    the pool until a watched file changes, at which point it is closed and the
    browser reloads the page.
    """
    try:
        key = validate_upgrade(request)
    except BadUpgradeRequest as e:
        logger.warning("Rejected upgrade request for %s: %s", request.path, e)
        writer.write(BAD_REQUEST)
        await writer.drain()
        writer.close()
        return

    try:
        writer.write(handshake_response(key))
        await writer.drain()
        ctx.pool.add(writer)

        # Drain whatever the client sends until either side closes
        while await reader.read(4096):
            pass
    except ConnectionError as e:
        logger.debug("Live reload connection dropped: %s", e)
    finally:
        ctx.pool.discard(writer)
        if not writer.is_closing():
            writer.close()
