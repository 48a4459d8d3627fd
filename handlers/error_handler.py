import logging

from handlers.responders import not_found, server_error
from models.request import Request, Response
from utils.errors import ResourceError, UnsupportedFileType

logger = logging.getLogger(__name__)


def is_not_found_error(error: Exception) -> bool:
    """Filesystem failures of every kind and unsupported types all surface as 404."""
    return isinstance(error, (ResourceError, UnsupportedFileType))


def error_response(request: Request, error: Exception) -> Response:
    """
    Turn an exception raised while handling `request` into a response.
    No error detail ends up in the response body.
    """
    if is_not_found_error(error):
        logger.debug("%s %s: %s", request.method, request.path, error)
        return not_found()

    logger.error("Exception while handling %s %s:", request.method, request.path, exc_info=error)
    return server_error()
