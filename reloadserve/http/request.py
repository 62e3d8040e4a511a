"""
Request line parsing.
"""

METHOD_PREFIX = "GET"
VERSION_SUFFIX = "HTTP/1.1"


def parse_request_path(line: str) -> str:
    """
    Extract the requested path from an HTTP request line.

    Parsing is deliberately permissive: only a leading "GET", a trailing
    "HTTP/1.1", surrounding whitespace and leading slashes are removed.
    Other methods and query strings pass through as part of the path.

    >>> parse_request_path("GET /css/site.css HTTP/1.1")
    'css/site.css'
    """
    while line.startswith(METHOD_PREFIX):
        line = line[len(METHOD_PREFIX):]
    while line.endswith(VERSION_SUFFIX):
        line = line[:-len(VERSION_SUFFIX)]
    return line.strip().lstrip("/")
