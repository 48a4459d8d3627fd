import pytest

from models.request import Request
from services.server_context import ServerContext
from utils.config import Settings


class FakeObserver:
    """Stands in for a watchdog Observer, recording scheduled watches."""

    def __init__(self):
        self.scheduled = []
        self.started = False
        self.stopped = False

    def schedule(self, handler, path, recursive=False):
        self.scheduled.append((handler, path, recursive))

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def join(self, timeout=None):
        pass


class FakeWriter:
    """Minimal asyncio.StreamWriter double that records what was written."""

    def __init__(self):
        self.buffer = b''
        self.closed = False

    def write(self, data):
        self.buffer += data

    async def drain(self):
        pass

    def close(self):
        self.closed = True

    def is_closing(self):
        return self.closed

    async def wait_closed(self):
        pass


@pytest.fixture
def site(tmp_path):
    (tmp_path / 'app.js').write_bytes(b'console.log("hi");\n')
    (tmp_path / 'style.css').write_text('body {}')
    (tmp_path / 'script.py').write_text('print("no")')
    (tmp_path / 'assets').mkdir()
    (tmp_path / 'assets' / 'logo.png').write_bytes(b'\x89PNG')
    (tmp_path / 'docs').mkdir()
    (tmp_path / 'docs' / 'index.html').write_text('<h1>docs</h1>')
    return tmp_path


@pytest.fixture
def settings(site):
    return Settings(root=str(site))


@pytest.fixture
def observer():
    return FakeObserver()


@pytest.fixture
def ctx(settings, observer):
    return ServerContext.create(settings, observer=observer)


@pytest.fixture
def make_request():
    def _make(path, method='GET', headers=None):
        return Request(method=method, path=path, headers={k.lower(): v for k, v in (headers or {}).items()})
    return _make
