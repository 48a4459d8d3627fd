import html
import logging
from urllib.parse import quote

from models.content_types import DIRECTORY_LISTING_CONTENT_TYPE
from models.request import Request, ResolvedTarget, Response
from services.file_service import list_directory, read_file
from services.server_context import ServerContext
from services.url_resolver import url_pathname
from utils.errors import ResourceError

logger = logging.getLogger(__name__)

LISTING_STYLE = ('<style>a { display: inline-block; padding: 4px; margin: 4px; } '
                 'body { font-family: sans-serif; }</style>')


async def file_content(request: Request, target: ResolvedTarget, ctx: ServerContext) -> Response:
    """Serve a whole file and start watching it for live reload."""
    file_path = target.filesystem_path
    try:
        data = await read_file(file_path)
    except ResourceError as e:
        logger.debug("Could not read %s: %s", file_path, e)
        return not_found()

    response = Response(200, {'Content-Type': target.content_type}, data, served_path=file_path)
    ctx.watch_service.watch(file_path)
    return response


def render_listing(dir_url: str, entries: list[str]) -> str:
    title = html.escape(dir_url)
    parts = [f'<!doctype html><html><head><title>{title}</title></head><body>', LISTING_STYLE]
    for entry in entries:
        href = html.escape(dir_url + quote(entry), quote=True)
        parts.append(f'<a href="{href}">{html.escape(entry)}</a>')
    parts.append('</body></html>')
    return ''.join(parts)


async def dir_content(request: Request, dir_path: str, ctx: ServerContext) -> Response:
    """
    Generate a listing page for a directory.

    Listings are only served at urls ending with "/", anything else is redirected
    there first so that relative links in the page resolve inside the directory.
    """
    try:
        entries = await list_directory(dir_path)
    except ResourceError as e:
        logger.debug("Could not list %s: %s", dir_path, e)
        return not_found()

    dir_url = url_pathname(request.path)
    if not dir_url.endswith('/'):
        return redirect(dir_url + '/')

    body = render_listing(dir_url, entries).encode('utf-8')
    return Response(200, {'Content-Type': DIRECTORY_LISTING_CONTENT_TYPE}, body, served_path=dir_path)


def redirect(to: str) -> Response:
    return Response(302, {'Location': to})


def not_found() -> Response:
    return Response(404, body=b'Not found')


def server_error() -> Response:
    return Response(500, body=b'Server error')
