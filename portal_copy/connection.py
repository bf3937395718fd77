"""Opening the D-Bus connection used to talk to the portal
"""
import logging

from jeepney import AuthenticationError
from jeepney.io.blocking import open_dbus_connection, DBusConnection

from .errors import BusConnectionError

log = logging.getLogger(__name__)


def connect(bus='SESSION') -> DBusConnection:
    """Connect and authenticate to a message bus, normally the session bus

    Raises BusConnectionError if the bus address is unknown or unusable, or
    if connecting or authenticating fails.
    """
    try:
        conn = open_dbus_connection(bus=bus)
    except KeyError as e:
        # No DBUS_SESSION_BUS_ADDRESS in the environment
        raise BusConnectionError(
            "No {} bus address found ({} not set)".format(bus.lower(), e)
        ) from e
    except (ValueError, OSError, AuthenticationError) as e:
        raise BusConnectionError(
            "Cannot connect to the {} bus: {}".format(bus.lower(), e)
        ) from e

    log.debug("Connected to %s bus as %s", bus.lower(), conn.unique_name)
    return conn
