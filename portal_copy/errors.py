"""Exceptions raised while asking the portal for a destination and copying
"""


class PortalCopyError(Exception):
    """Base class for all errors raised by portal_copy"""


class BusConnectionError(PortalCopyError):
    """No session bus could be reached"""


class TransportError(PortalCopyError):
    """A method call to the portal could not be dispatched, or was rejected"""


class ProtocolError(PortalCopyError):
    """A message arrived that is not the response we were waiting for"""


class DecodeError(PortalCopyError):
    """A message body or variant didn't have the expected shape"""


class MissingKeyError(DecodeError):
    def __init__(self, key):
        self.key = key
        super().__init__("No {!r} in results".format(key))


class CardinalityError(DecodeError):
    def __init__(self, key, expected, got):
        self.key = key
        self.expected = expected
        self.got = got
        super().__init__("Expected {} value(s) for {!r}, got {}".format(
            expected, key, got))


class UriParseError(DecodeError):
    def __init__(self, uri, reason):
        self.uri = uri
        super().__init__("Cannot use URI {!r}: {}".format(uri, reason))


class ResponseTimeout(PortalCopyError):
    """No response signal arrived within the given timeout"""


class CopyError(PortalCopyError):
    def __init__(self, src, dest, error: OSError):
        self.src = src
        self.dest = dest
        self.error = error
        super().__init__("Copying {} to {} failed: {}".format(src, dest, error))
