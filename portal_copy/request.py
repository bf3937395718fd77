"""Waiting for the response to a portal request

Portal methods like ``FileChooser.SaveFile`` return a request handle (an
object path) straight away. The user's answer comes later, as a ``Response``
signal emitted from that object path. To avoid missing a quick answer, we
subscribe to the expected path *before* making the call: the portal derives
it from our unique bus name and the ``handle_token`` option we send.

https://flatpak.github.io/xdg-desktop-portal/docs/doc-org.freedesktop.portal.Request.html
"""
from collections import namedtuple
from enum import IntEnum
import logging
import secrets

from jeepney import DBusErrorResponse, HeaderFields, MatchRule, MessageType
from jeepney import message_bus
from jeepney.io.blocking import Proxy

from .errors import DecodeError, ProtocolError, ResponseTimeout, TransportError

log = logging.getLogger(__name__)

REQUEST_INTERFACE = 'org.freedesktop.portal.Request'
REQUEST_PATH_PREFIX = '/org/freedesktop/portal/desktop/request/'
RESPONSE_SIGNATURE = 'ua{sv}'
TOKEN_PREFIX = 'portal_copy_'


class ResponseCode(IntEnum):
    success = 0
    cancelled = 1  # The user cancelled the interaction
    other = 2  # The interaction was ended some other way


class PortalResponse(namedtuple('PortalResponse', ['response', 'results'])):
    """The decoded body of a ``Request.Response`` signal

    *response* is the response code (0 for success), *results* a dict
    mapping names to ``(signature, value)`` variants.
    """
    __slots__ = ()

    @property
    def cancelled(self):
        return self.response != ResponseCode.success

    def describe(self):
        try:
            return ResponseCode(self.response).name
        except ValueError:
            return 'unknown ({})'.format(self.response)


def new_token():
    """Make a fresh handle_token for a portal request"""
    return TOKEN_PREFIX + secrets.token_hex(8)


def request_path(unique_name: str, token: str) -> str:
    """The object path the portal will use for a request with this token

    e.g. ``:1.42`` & ``tok`` -> ``/org/freedesktop/portal/desktop/request/1_42/tok``
    """
    sender = unique_name.lstrip(':').replace('.', '_')
    return REQUEST_PATH_PREFIX + sender + '/' + token


def response_rule(handle: str) -> MatchRule:
    """Match signals from the request object at *handle*

    The member is left out, so that anything else emitted from the request
    object reaches :func:`decode_response` and is rejected there.
    """
    return MatchRule(type='signal', interface=REQUEST_INTERFACE, path=handle)


def decode_response(msg) -> PortalResponse:
    """Check that *msg* is a ``Request.Response`` signal and unpack it

    Raises ProtocolError for any other message, and DecodeError if the body
    is not ``(uint32, dict of variants)``.
    """
    hdr = msg.header
    interface = hdr.fields.get(HeaderFields.interface)
    member = hdr.fields.get(HeaderFields.member)
    if (hdr.message_type is not MessageType.signal
            or interface != REQUEST_INTERFACE or member != 'Response'):
        raise ProtocolError("unexpected response: {} {}.{}".format(
            hdr.message_type.name, interface, member))

    signature = hdr.fields.get(HeaderFields.signature, '')
    if signature != RESPONSE_SIGNATURE or len(msg.body) != 2:
        raise DecodeError("Response signal has signature {!r}, expected {!r}"
                          .format(signature, RESPONSE_SIGNATURE))

    response, results = msg.body
    return PortalResponse(response, results)


class PendingRequest:
    """A portal request we're waiting to hear back about

    Creating this subscribes to signals from *handle*, both with the message
    bus (a match rule) and on the connection (a filter). Use it as a context
    manager, or call :meth:`close`, to unsubscribe.

    :param ~jeepney.io.blocking.DBusConnection connection: The connection
        the request is (or will be) made on.
    :param str handle: The request object path.
    """
    def __init__(self, connection, handle):
        self._connection = connection
        self._bus = Proxy(message_bus, connection)
        self.handle = handle
        self._rule, self._filter = self._subscribe(handle)

    def __repr__(self):
        return "PendingRequest({!r})".format(self.handle)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _subscribe(self, handle):
        rule = response_rule(handle)
        filter_handle = self._connection.filter(rule)
        try:
            self._bus.AddMatch(rule)
        except DBusErrorResponse as e:
            filter_handle.close()
            raise TransportError(
                "Could not subscribe to {}: {}".format(handle, e)) from e
        log.debug("Subscribed to responses from %s", handle)
        return rule, filter_handle

    def _unsubscribe(self, rule, filter_handle):
        filter_handle.close()
        try:
            self._bus.RemoveMatch(rule)
        except DBusErrorResponse as e:
            log.debug("Removing match rule %r failed: %s", rule.serialise(), e)

    def retarget(self, handle):
        """Follow a request handle that differs from the one we predicted

        Older xdg-desktop-portal versions ignore ``handle_token`` and
        pick their own path. A response that arrived for the predicted path
        meanwhile can't belong to this request, so it's discarded.
        """
        if handle == self.handle:
            return
        log.warning("Portal returned request handle %s, expected %s",
                    handle, self.handle)
        old = (self._rule, self._filter)
        self._rule, self._filter = self._subscribe(handle)
        self.handle = handle
        self._unsubscribe(*old)

    def wait(self, timeout=None) -> PortalResponse:
        """Block until the response signal arrives, and decode it

        With *timeout* None (the default), this waits as long as it takes:
        a person is choosing a file. Otherwise it raises ResponseTimeout after
        *timeout* seconds.
        """
        try:
            msg = self._connection.recv_until_filtered(
                self._filter.queue, timeout=timeout
            )
        except TimeoutError:
            raise ResponseTimeout("No response from the portal for {} after {} s"
                                  .format(self.handle, timeout)) from None

        resp = decode_response(msg)
        log.debug("Response for %s: %s", self.handle, resp.describe())
        return resp

    def close(self):
        """Stop listening for the response"""
        if self._filter is not None:
            self._unsubscribe(self._rule, self._filter)
            self._filter = None
