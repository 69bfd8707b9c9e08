import time

import pytest

from app import create_app, socketio
from conftest import TestConfig


class ExpiryConfig(TestConfig):
    ENABLE_SCHEDULER_IN_TESTS = True
    ROOM_IDLE_TIMEOUT_SEC = 0.2


@pytest.fixture()
def expiry_app():
    application = create_app(ExpiryConfig)
    yield application
    application.extensions['rooms'].store.clear()


def test_waiting_room_expires(expiry_app):
    host = socketio.test_client(expiry_app, namespace='/')
    host.emit('createSession', namespace='/')
    code = [e['args'][0] for e in host.get_received('/') if e['name'] == 'roomCreated'][0]['roomCode']

    deadline = time.time() + 3.0
    expired = []
    while time.time() < deadline and not expired:
        expired = [e['args'][0] for e in host.get_received('/') if e['name'] == 'roomExpired']
        if not expired:
            time.sleep(0.05)
    assert expired and expired[0]['roomCode'] == code
    assert expiry_app.extensions['rooms'].room_count() == 0
    host.disconnect(namespace='/')


def test_joined_room_does_not_expire(expiry_app):
    host = socketio.test_client(expiry_app, namespace='/')
    guest = socketio.test_client(expiry_app, namespace='/')
    host.emit('createSession', namespace='/')
    code = [e['args'][0] for e in host.get_received('/') if e['name'] == 'roomCreated'][0]['roomCode']
    guest.emit('joinSession', {'roomCode': code}, namespace='/')

    time.sleep(0.5)
    assert not any(e['name'] == 'roomExpired' for e in host.get_received('/'))
    assert expiry_app.extensions['rooms'].room_count() == 1
    host.disconnect(namespace='/')
    guest.disconnect(namespace='/')
