import pytest

from portal_copy.connection import connect
from portal_copy.errors import BusConnectionError
from .utils import have_session_bus


def test_no_address(monkeypatch):
    monkeypatch.delenv('DBUS_SESSION_BUS_ADDRESS', raising=False)
    with pytest.raises(BusConnectionError, match='DBUS_SESSION_BUS_ADDRESS'):
        connect()


def test_nothing_listening(monkeypatch, tmp_path):
    sock_path = tmp_path / 'no-bus'
    monkeypatch.setenv('DBUS_SESSION_BUS_ADDRESS', 'unix:path={}'.format(sock_path))
    with pytest.raises(BusConnectionError, match='Cannot connect'):
        connect()


@pytest.mark.skipif(not have_session_bus, reason="Tests require DBus session bus")
def test_connect():
    with connect() as conn:
        assert conn.unique_name.startswith(':')
