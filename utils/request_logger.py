import logging
import sys

from models.request import Request, Response

ACCESS_LOGGER_NAME = 'hotserve.access'

access_logger = logging.getLogger(ACCESS_LOGGER_NAME)


def configure_access_logger(stream=None):
    """Request traces are written as bare lines, without the application log format."""
    access_logger.handlers.clear()
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter('%(message)s'))
    access_logger.addHandler(handler)
    access_logger.setLevel(logging.INFO)
    access_logger.propagate = False


def format_request(request: Request, response: Response, served_path: str | None = None) -> str:
    served_path = served_path or response.served_path
    outcome = f"=> {served_path}" if served_path else str(response.status)
    return f"{request.method} {request.path}\n{outcome}\n"


def log_request(request: Request, response: Response, served_path: str | None = None):
    access_logger.info(format_request(request, response, served_path))
