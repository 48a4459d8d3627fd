import posixpath

# Extensions not listed here are served as "not found"
CONTENT_TYPES = {
    '.html': 'text/html; charset=utf-8',
    '.js': 'text/javascript',
    '.css': 'text/css',
    '.json': 'application/json',
    '.png': 'image/png',
    '.jpg': 'image/jpg',
    '.gif': 'image/gif',
    '.ico': 'image/x-icon',
}

DIRECTORY_LISTING_CONTENT_TYPE = CONTENT_TYPES['.html']


def is_supported_extension(extension: str) -> bool:
    return extension in CONTENT_TYPES


def content_type_for(path: str) -> str | None:
    """Content type for a url path, None if the type is unsupported."""
    return CONTENT_TYPES.get(posixpath.splitext(path)[1])
