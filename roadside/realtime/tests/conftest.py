import pytest

from roadside.realtime.relay import EventRelay


class FakeServer:
    """Collects emits as ``(sid, event, payload)`` tuples."""

    def __init__(self):
        self.emitted = []
        self.failing = set()

    async def emit(self, event, data=None, to=None):
        if to in self.failing:
            msg = f"transport to {to} closed"
            raise ConnectionError(msg)
        self.emitted.append((to, event, data))

    def events(self, name):
        return [(sid, payload) for sid, event, payload in self.emitted if event == name]


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def relay(server):
    return EventRelay(server)


@pytest.fixture
def online(relay):
    """Register ``sid`` as an authenticated connection of ``account``."""

    def _attach(sid, account):
        relay.connect(sid)
        relay.registry.authenticate(sid, account.pk)

    return _attach
