"""Copy a file to a location chosen in the desktop portal's Save dialog.
"""
from .errors import (
    PortalCopyError, BusConnectionError, TransportError, ProtocolError,
    DecodeError, MissingKeyError, CardinalityError, UriParseError,
    ResponseTimeout, CopyError,
)
from .portal import DesktopPortal, FileChooser
from .request import PendingRequest, PortalResponse, ResponseCode
from .results import parse_file_chooser_results

__version__ = '0.1.0'
