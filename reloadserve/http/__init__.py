"""HTTP request handling module."""

from reloadserve.http.mime import MIME_TYPES, get_mime_type
from reloadserve.http.request import parse_request_path
from reloadserve.http.responder import Response, SUBSCRIBE_PATH, RELOAD_SCRIPT, resolve, not_found
from reloadserve.http.handler import ConnectionOutcome, handle_connection

__all__ = [
    "MIME_TYPES",
    "get_mime_type",
    "parse_request_path",
    "Response",
    "SUBSCRIBE_PATH",
    "RELOAD_SCRIPT",
    "resolve",
    "not_found",
    "ConnectionOutcome",
    "handle_connection",
]
