import asyncio
import base64
import hashlib
import logging

logger = logging.getLogger(__name__)

WEBSOCKET_GUID = '258EAFA5-E914-47DA-95CA-C5AB0DC85B11'

BAD_REQUEST = b'HTTP/1.1 400 Bad Request'


def generate_accept_value(key: str) -> str:
    """Sec-WebSocket-Accept value for a client's Sec-WebSocket-Key."""
    digest = hashlib.sha1((key + WEBSOCKET_GUID).encode('latin-1')).digest()
    return base64.b64encode(digest).decode('ascii')


def handshake_response(key: str) -> bytes:
    lines = [
        'HTTP/1.1 101 Web Socket Protocol Handshake',
        'Upgrade: WebSocket',
        'Connection: Upgrade',
        f'Sec-WebSocket-Accept: {generate_accept_value(key)}',
    ]
    return ('\r\n'.join(lines) + '\r\n\r\n').encode('latin-1')


class ConnectionPool:
    """Open live-reload connections. Only ever touched from the event loop thread."""

    def __init__(self):
        self._connections: list[asyncio.StreamWriter] = []
        self.invalidations = 0

    def __len__(self):
        return len(self._connections)

    def __contains__(self, writer):
        return writer in self._connections

    def add(self, writer: asyncio.StreamWriter):
        if writer not in self._connections:
            self._connections.append(writer)
        logger.info("Live reload client connected (%s open)", len(self._connections))

    def discard(self, writer: asyncio.StreamWriter):
        if writer in self._connections:
            self._connections.remove(writer)
            logger.debug("Live reload client went away (%s open)", len(self._connections))

    def invalidate(self) -> int:
        """Close every pooled connection and empty the pool. Returns how many were closed."""
        connections, self._connections = self._connections, []
        self.invalidations += 1
        for writer in connections:
            if not writer.is_closing():
                writer.close()
        logger.info("Closed %s live reload connection(s)", len(connections))
        return len(connections)
