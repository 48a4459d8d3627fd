import logging
from dataclasses import dataclass
from enum import Enum

from handlers.error_handler import error_response, is_not_found_error
from handlers.responders import dir_content, file_content, not_found, redirect, server_error
from models.request import Request, ResolvedTarget, Response, TargetKind
from services.file_service import is_file
from services.server_context import ServerContext
from services.url_resolver import directory_target, is_within_root, resolve_target, to_index_redirect_url
from utils.errors import PathOutsideRoot, UnsupportedFileType

logger = logging.getLogger(__name__)


class Outcome(Enum):
    SERVE_FILE = 'serve_file'
    SERVE_DIRECTORY = 'serve_directory'
    REDIRECT_TO = 'redirect_to'
    RESPOND_NOT_FOUND = 'respond_not_found'
    RESPOND_SERVER_ERROR = 'respond_server_error'


@dataclass(frozen=True)
class Decision:
    outcome: Outcome
    target: ResolvedTarget | None = None
    location: str | None = None


def _check_confined(target: ResolvedTarget, request: Request, ctx: ServerContext):
    if ctx.settings.confine_to_root and not is_within_root(target.filesystem_path, request.path, ctx.settings):
        logger.warning("Refusing %s %s: resolves outside the serving root", request.method, request.path)
        raise PathOutsideRoot(target.filesystem_path)


async def classify(request: Request, ctx: ServerContext) -> Decision:
    """Decide what to do with a request without producing any output."""
    target = resolve_target(request.path, ctx.settings)

    if target.kind == TargetKind.FILE:
        if not target.is_supported:
            raise UnsupportedFileType(request.path)
        _check_confined(target, request, ctx)
        return Decision(Outcome.SERVE_FILE, target)

    if await is_file(target.filesystem_path):
        _check_confined(target, request, ctx)
        return Decision(Outcome.REDIRECT_TO, target, to_index_redirect_url(request.path))

    directory = directory_target(request.path, ctx.settings)
    _check_confined(directory, request, ctx)
    return Decision(Outcome.SERVE_DIRECTORY, directory)


async def respond(request: Request, decision: Decision, ctx: ServerContext) -> Response:
    if decision.outcome == Outcome.SERVE_FILE:
        return await file_content(request, decision.target, ctx)
    if decision.outcome == Outcome.SERVE_DIRECTORY:
        return await dir_content(request, decision.target.filesystem_path, ctx)
    if decision.outcome == Outcome.REDIRECT_TO:
        return redirect(decision.location)
    if decision.outcome == Outcome.RESPOND_NOT_FOUND:
        return not_found()
    return server_error()


async def dispatch(request: Request, ctx: ServerContext) -> Decision:
    """Classify a request, folding errors into their terminal outcome."""
    try:
        return await classify(request, ctx)
    except Exception as e:
        if is_not_found_error(e):
            logger.debug("%s %s: %s", request.method, request.path, e)
            return Decision(Outcome.RESPOND_NOT_FOUND)
        logger.error("Exception while classifying %s %s:", request.method, request.path, exc_info=e)
        return Decision(Outcome.RESPOND_SERVER_ERROR)


async def handle_request(request: Request, ctx: ServerContext) -> Response:
    decision = await dispatch(request, ctx)
    try:
        return await respond(request, decision, ctx)
    except Exception as e:
        return error_response(request, e)
