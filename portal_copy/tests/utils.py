from collections import deque
import os

from jeepney import (
    DBusAddress, HeaderFields, new_error, new_method_return, new_signal,
)
from jeepney.io.common import FilterHandle, MessageFilters

from portal_copy.portal import PORTAL_BUS_NAME
from portal_copy.request import REQUEST_INTERFACE, request_path

have_session_bus = bool(os.environ.get('DBUS_SESSION_BUS_ADDRESS'))


def request_signal(handle, member='Response', signature='ua{sv}', body=()):
    emitter = DBusAddress(handle, bus_name=PORTAL_BUS_NAME,
                          interface=REQUEST_INTERFACE)
    return new_signal(emitter, member, signature, body)


def response_signal(handle, response, results):
    return request_signal(handle, body=(response, results))


class FakeConnection:
    """Stands in for jeepney.io.blocking.DBusConnection

    Method calls get replies straight away. Signals queued in ``incoming``
    are delivered, through the filters, while waiting in
    ``recv_until_filtered``. Each entry in ``responses`` becomes a Response
    signal from the request handle once SaveFile has been called.
    """
    def __init__(self, unique_name=':1.42', responses=()):
        self.unique_name = unique_name
        self.responses = list(responses)
        self.incoming = deque()
        self.sent = []
        self.match_rules = []
        self.handle = None
        self.handle_override = None
        self.save_file_error = None
        self.closed = False
        self._filters = MessageFilters()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def active_filters(self):
        return len(self._filters.filters)

    def calls(self, member):
        return [m for m in self.sent
                if m.header.fields[HeaderFields.member] == member]

    def filter(self, rule, *, queue=None, bufsize=1):
        if queue is None:
            queue = deque(maxlen=bufsize)
        return FilterHandle(self._filters, rule, queue)

    def send_and_get_reply(self, message, *, timeout=None):
        self.sent.append(message)
        member = message.header.fields[HeaderFields.member]
        if member == 'AddMatch':
            self.match_rules.append(message.body[0])
            return new_method_return(message)
        elif member == 'RemoveMatch':
            self.match_rules.remove(message.body[0])
            return new_method_return(message)
        elif member == 'SaveFile':
            if self.save_file_error:
                return new_error(message, self.save_file_error, 's',
                                 ('SaveFile refused',))
            token = message.body[2]['handle_token'][1]
            self.handle = (self.handle_override
                           or request_path(self.unique_name, token))
            for response, results in self.responses:
                self.incoming.append(
                    response_signal(self.handle, response, results))
            return new_method_return(message, 'o', (self.handle,))
        raise AssertionError("Unexpected method call: {}".format(member))

    def recv_until_filtered(self, queue, *, timeout=None):
        while len(queue) == 0:
            if not self.incoming:
                raise TimeoutError
            msg = self.incoming.popleft()
            for handle in self._filters.matches(msg):
                handle.queue.append(msg)
        return queue.popleft()

    def close(self):
        self.closed = True
