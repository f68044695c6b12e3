import os
import tempfile

# must be set before swiftlink.core.db creates its engine
_DB_DIR = tempfile.mkdtemp(prefix="swiftlink-test-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ.setdefault("SWIFTLINK_SECRET", "test-secret")

import pytest  # noqa: E402

from swiftlink.core.db import Base, SessionLocal, create_all, engine  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_db():
    create_all()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


class FakeConnection:
    """Stands in for RelayConnection: records emits, keeps handlers."""

    def __init__(self):
        self.connected = False
        self.emitted = []
        self.handlers = {}

    async def open(self, auth=None):
        self.connected = True

    async def close(self):
        self.connected = False

    async def emit(self, event, data=None):
        self.emitted.append((event, data))

    def on(self, event, handler):
        self.handlers[event] = handler

    def off(self, event):
        self.handlers.pop(event, None)


class FakeSocketServer:
    """Stands in for socketio.AsyncServer."""

    def __init__(self):
        self.handlers = {}
        self.emitted = []
        self.entered = []
        self.left = []

    def on(self, event, handler=None, namespace=None):
        self.handlers[event] = handler

    async def enter_room(self, sid, room, namespace=None):
        self.entered.append((sid, room))

    async def leave_room(self, sid, room, namespace=None):
        self.left.append((sid, room))

    async def emit(self, event, data=None, to=None, room=None, skip_sid=None, namespace=None):
        self.emitted.append({"event": event, "data": data, "to": to or room, "skip": skip_sid})

    def events(self, name):
        return [e for e in self.emitted if e["event"] == name]


@pytest.fixture
def fake_connection():
    return FakeConnection()


@pytest.fixture
def fake_sio():
    return FakeSocketServer()
