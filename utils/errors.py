import errno


class HotserveError(Exception):
    """Base class for errors raised while serving a request."""


class ResourceError(HotserveError):
    """A filesystem operation on a served resource failed."""

    def __init__(self, path: str, message: str = ''):
        self.path = path
        super().__init__(message or f"{self.__class__.__name__}: {path}")


class ResourceNotFound(ResourceError):
    pass


class ResourcePermissionDenied(ResourceError):
    pass


class ResourceReadError(ResourceError):
    pass


class UnsupportedFileType(HotserveError):
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Unsupported file type: {url}")


class PathOutsideRoot(ResourceError):
    """The resolved path escapes the directory it was resolved against."""


class BadUpgradeRequest(HotserveError):
    pass


class MalformedRequest(HotserveError):
    pass


def from_os_error(error: OSError, path: str) -> ResourceError:
    """Map an OSError raised for `path` to the matching ResourceError kind."""
    if isinstance(error, (FileNotFoundError, NotADirectoryError, IsADirectoryError)):
        return ResourceNotFound(path, str(error))
    if isinstance(error, PermissionError) or error.errno in (errno.EACCES, errno.EPERM):
        return ResourcePermissionDenied(path, str(error))
    return ResourceReadError(path, str(error))
