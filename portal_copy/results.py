"""Interpreting the results of a FileChooser request
"""
import os
from urllib.parse import unquote_to_bytes, urlsplit

from . import variants
from .errors import CardinalityError, MissingKeyError, UriParseError


def parse_file_chooser_results(results: dict) -> str:
    """Get the chosen local path from the results of a SaveFile response

    *results* maps names to ``(signature, value)`` variants. It must have
    ``uris`` holding exactly one ``file://`` URI; the percent-decoded path
    of that URI is returned.
    """
    try:
        uris_variant = results['uris']
    except KeyError:
        raise MissingKeyError('uris') from None

    uris = variants.unwrap(uris_variant, 'as', name='uris')
    if len(uris) != 1:
        raise CardinalityError('uris', 1, len(uris))

    return file_uri_to_path(uris[0])


def file_uri_to_path(uri: str) -> str:
    try:
        parts = urlsplit(uri)
    except ValueError as e:
        raise UriParseError(uri, str(e)) from e

    if parts.scheme != 'file':
        raise UriParseError(uri, "not a file: URI")
    if parts.netloc not in ('', 'localhost'):
        raise UriParseError(uri, "file is on another host")

    # Local file names are bytes; keep undecodable ones via surrogateescape
    path = os.fsdecode(unquote_to_bytes(parts.path))
    if not path.startswith('/'):
        raise UriParseError(uri, "path is not absolute")
    return path
