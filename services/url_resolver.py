"""
Pure functions that translate a request url into filesystem paths and redirect
targets. Nothing in here touches the filesystem.
"""
import os
import posixpath
from urllib.parse import unquote

from models.content_types import content_type_for, is_supported_extension
from models.request import ResolvedTarget, TargetKind
from utils.config import INTERNAL_PREFIX, Settings

INDEX_FILE = 'index.html'


def url_pathname(url: str) -> str:
    """Path component of a request url, without query string or fragment."""
    pathname = url.split('?', 1)[0].split('#', 1)[0]
    return pathname or '/'


def get_file_extension(url: str) -> str:
    return posixpath.splitext(url_pathname(url))[1]


def has_file_extension(url: str) -> bool:
    return len(get_file_extension(url)) > 0


def is_supported_file_type(url: str) -> bool:
    return has_file_extension(url) and is_supported_extension(get_file_extension(url))


def base_directory(url: str, settings: Settings) -> str:
    if INTERNAL_PREFIX in url_pathname(url):
        return settings.assets_dir
    return settings.root


def to_filesystem_path(url: str, settings: Settings) -> str:
    # ".." segments are left in place, see is_within_root
    relative = unquote(url_pathname(url)).lstrip('/')
    return os.path.join(base_directory(url, settings), relative)


def to_index_candidate_path(url: str, settings: Settings) -> str:
    return os.path.join(to_filesystem_path(url, settings), INDEX_FILE)


def to_index_redirect_url(url: str) -> str:
    pathname = url_pathname(url)
    if pathname.endswith('/'):
        return pathname + INDEX_FILE
    return pathname + '/' + INDEX_FILE


def is_within_root(path: str, url: str, settings: Settings) -> bool:
    """True if `path` stays inside the base directory `url` was resolved against."""
    base = os.path.normpath(os.path.abspath(base_directory(url, settings)))
    resolved = os.path.normpath(os.path.abspath(path))
    return os.path.commonpath([base, resolved]) == base


def resolve_target(url: str, settings: Settings) -> ResolvedTarget:
    """
    Classify a request url.

    Urls with an extension resolve to a File target (content_type is None when the
    extension is unsupported). Everything else is a directory whose index file has
    to be probed before deciding between a redirect and a listing.
    """
    if has_file_extension(url):
        path = to_filesystem_path(url, settings)
        return ResolvedTarget(TargetKind.FILE, path, content_type_for(url_pathname(url)))
    return ResolvedTarget(TargetKind.DIRECTORY_INDEX_CANDIDATE, to_index_candidate_path(url, settings))


def directory_target(url: str, settings: Settings) -> ResolvedTarget:
    return ResolvedTarget(TargetKind.DIRECTORY, to_filesystem_path(url, settings))
