import asyncio
import logging
import sys

from handlers.request_handler import handle_request
from handlers.upgrade_handler import handle_upgrade
from models.request import Response
from services.server_context import ServerContext
from utils.config import Settings
from utils.errors import MalformedRequest
from utils.http_io import MAX_HEADER_BYTES, read_request, serialize_response, write_response
from utils.request_logger import configure_access_logger, log_request

logger = logging.getLogger(__name__)


async def close_writer(writer: asyncio.StreamWriter):
    writer.close()
    try:
        await writer.wait_closed()
    except ConnectionError:
        pass


async def handle_connection(reader: asyncio.StreamReader, writer: asyncio.StreamWriter, ctx: ServerContext):
    """Serve a single request on a fresh connection."""
    try:
        request = await read_request(reader)
    except MalformedRequest as e:
        logger.warning("Malformed request: %s", e)
        writer.write(serialize_response(Response(400, body=b'Bad request')))
        await close_writer(writer)
        return
    except ConnectionError:
        await close_writer(writer)
        return

    if request is None:
        await close_writer(writer)
        return

    if request.is_upgrade:
        await handle_upgrade(request, reader, writer, ctx)
        return

    response = await handle_request(request, ctx)
    try:
        await write_response(writer, response)
    except ConnectionError as e:
        logger.debug("Client went away before the response was written: %s", e)
    log_request(request, response)
    logger.debug("Response: %s", response.to_dict())
    await close_writer(writer)


async def serve(ctx: ServerContext):
    settings = ctx.settings

    async def on_connection(reader, writer):
        await handle_connection(reader, writer, ctx)

    server = await asyncio.start_server(on_connection, settings.host, settings.port, limit=MAX_HEADER_BYTES)
    print(f"http://localhost:{settings.port}/")
    logger.info("Serving %s on %s:%s", settings.root, settings.host, settings.port)
    async with server:
        await server.serve_forever()


def main():
    settings = Settings.from_env()

    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=settings.log_level
    )
    # watchdog logs every emitter it starts at INFO
    logging.getLogger("watchdog").setLevel(logging.WARNING)
    configure_access_logger()

    ctx = ServerContext.create(settings)
    ctx.watch_service.start()
    try:
        asyncio.run(serve(ctx))
    except KeyboardInterrupt:
        print("\nServer stopped.")
    except OSError as e:
        logger.error("Could not listen on %s:%s: %s", settings.host, settings.port, e)
        sys.exit(1)
    finally:
        ctx.watch_service.stop()


if __name__ == '__main__':
    main()
