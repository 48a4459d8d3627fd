import asyncio
import logging

from models.request import Request, Response
from utils.errors import MalformedRequest

logger = logging.getLogger(__name__)

# Passed as the stream limit, longer request heads are rejected as malformed
MAX_HEADER_BYTES = 64 * 1024


def parse_request_head(head: bytes) -> Request:
    """Parse the request line and headers of an HTTP/1.x request. The body is ignored."""
    try:
        text = head.decode('iso-8859-1')
    except UnicodeDecodeError as e:
        raise MalformedRequest(f"Undecodable request head: {e}")

    lines = text.split('\r\n')
    parts = lines[0].split(' ')
    if len(parts) != 3 or not parts[2].startswith('HTTP/'):
        raise MalformedRequest(f"Bad request line: {lines[0]!r}")
    method, path, version = parts

    headers = {}
    for line in lines[1:]:
        if not line:
            continue
        name, sep, value = line.partition(':')
        if not sep or not name.strip():
            raise MalformedRequest(f"Bad header line: {line!r}")
        headers[name.strip().lower()] = value.strip()

    return Request(method=method, path=path, version=version, headers=headers)


async def read_request(reader: asyncio.StreamReader) -> Request | None:
    """Read one request head from the stream. Returns None if the peer closed first."""
    try:
        head = await reader.readuntil(b'\r\n\r\n')
    except asyncio.IncompleteReadError as e:
        if not e.partial.strip():
            return None
        raise MalformedRequest("Connection closed mid-request")
    except asyncio.LimitOverrunError:
        raise MalformedRequest("Request head too large")
    return parse_request_head(head[:-4])


def serialize_response(response: Response) -> bytes:
    status_line = f"HTTP/1.1 {response.status} {response.reason}".rstrip()
    headers = dict(response.headers)
    headers['Content-Length'] = str(len(response.body))
    headers['Connection'] = 'close'
    lines = [status_line] + [f"{name}: {value}" for name, value in headers.items()]
    return ('\r\n'.join(lines) + '\r\n\r\n').encode('iso-8859-1') + response.body


async def write_response(writer: asyncio.StreamWriter, response: Response):
    writer.write(serialize_response(response))
    await writer.drain()
