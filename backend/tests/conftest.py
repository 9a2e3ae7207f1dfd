"""Test fixtures — in-memory storage backend, browser session and API client."""

import random

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tierfinder.api.deps import get_session
from tierfinder.main import create_app
from tierfinder.schemas.sources import SourceCategory, StorageSource
from tierfinder.services.memory_backend import MemoryNativeClipboard, MemoryStorageBackend
from tierfinder.services.progress import SimulatedProgressSource
from tierfinder.services.session import BrowserSession
from tierfinder.services.transfers import TransferPolicy


@pytest.fixture
def backend():
    """Three sources; s1 root lists /dest, /docs, /a.txt, /b.txt, /c.txt."""
    b = MemoryStorageBackend()
    b.add_source(StorageSource(id="s1", name="Local Disk", category=SourceCategory.LOCAL))
    b.add_source(StorageSource(id="s2", name="Cloud Bucket", category=SourceCategory.CLOUD))
    b.add_source(StorageSource(id="nas", name="Team Share", category=SourceCategory.NETWORK))

    b.add_file("s1", "/a.txt", 100)
    b.add_file("s1", "/b.txt", 200)
    b.add_file("s1", "/c.txt", 300)
    b.add_directory("s1", "/dest")
    b.add_file("s1", "/docs/report.txt", 1024)
    b.add_directory("s1", "/docs/sub")
    b.add_directory("s2", "/inbox")
    return b


@pytest.fixture
def native_clipboard():
    return MemoryNativeClipboard()


@pytest.fixture
def progress_source():
    """Instant, deterministic progress ticks."""
    return SimulatedProgressSource(tick_seconds=0, max_step=40, rng=random.Random(7))


@pytest_asyncio.fixture
async def session(backend, native_clipboard, progress_source):
    """Session with sources loaded but no source selected."""
    s = BrowserSession(
        backend, native_clipboard, progress_source,
        policy=TransferPolicy(), history_limit=50,
    )
    await s.load_sources()
    yield s
    await s.close()


@pytest_asyncio.fixture
async def client(session: BrowserSession):
    """Async test client bound to the test session."""
    app = create_app()
    app.state.session = session
    app.dependency_overrides[get_session] = lambda: session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
