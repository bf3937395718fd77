"""Asking the desktop portal for a Save File dialog
"""
import logging

from jeepney import DBusErrorResponse, MessageGenerator, new_method_call
from jeepney.io.blocking import Proxy

from . import variants
from .errors import TransportError
from .request import PendingRequest, new_token, request_path

log = logging.getLogger(__name__)

PORTAL_BUS_NAME = 'org.freedesktop.portal.Desktop'
PORTAL_OBJECT_PATH = '/org/freedesktop/portal/desktop'
DIALOG_TITLE = 'Choose Location'


class FileChooser(MessageGenerator):
    """Messages for the org.freedesktop.portal.FileChooser interface

    https://flatpak.github.io/xdg-desktop-portal/docs/doc-org.freedesktop.portal.FileChooser.html
    """
    interface = 'org.freedesktop.portal.FileChooser'

    def __init__(self, object_path=PORTAL_OBJECT_PATH,
                 bus_name=PORTAL_BUS_NAME):
        super().__init__(object_path=object_path, bus_name=bus_name)

    def SaveFile(self, parent_window, title, options):
        return new_method_call(self, 'SaveFile', 'ssa{sv}',
                               (parent_window, title, options))


def save_file_options(folder, name, token=None):
    """Build the options dict for FileChooser.SaveFile

    *folder* goes in as a NUL-terminated byte string, as the portal requires.
    """
    if not folder:
        raise ValueError("folder must not be empty")
    if not name:
        raise ValueError("name must not be empty")

    options = {
        'current_name': variants.string(name),
        'current_folder': variants.byte_string(folder),
    }
    if token is not None:
        options['handle_token'] = variants.string(token)
    return options


class DesktopPortal:
    """The file chooser of the desktop portal, reached over *connection*

    :param ~jeepney.io.blocking.DBusConnection connection: An open bus
        connection, normally to the session bus.
    """
    def __init__(self, connection):
        self._connection = connection
        self.file_chooser = FileChooser()
        self._proxy = Proxy(self.file_chooser, connection)

    def __repr__(self):
        return "DesktopPortal({!r})".format(self._connection)

    def request_save_file(self, folder, name, *, token=None) -> PendingRequest:
        """Show a Save File dialog suggesting *name* in *folder*

        This returns as soon as the portal has accepted the request, before
        the user has made a choice. Call ``.wait()`` on the returned
        :class:`~.PendingRequest` to get their answer, and close it when done.

        Raises TransportError if the call fails.
        """
        if token is None:
            token = new_token()
        options = save_file_options(folder, name, token)

        pending = PendingRequest(
            self._connection, request_path(self._connection.unique_name, token)
        )
        try:
            log.debug("Calling %s.SaveFile (folder=%r, name=%r)",
                      self.file_chooser.interface, folder, name)
            handle, = self._proxy.SaveFile('', DIALOG_TITLE, options)
            pending.retarget(handle)
        except (DBusErrorResponse, TimeoutError) as e:
            pending.close()
            raise TransportError("SaveFile call failed: {}".format(e)) from e
        except BaseException:
            pending.close()
            raise

        return pending
