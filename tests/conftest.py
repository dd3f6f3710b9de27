"""
NextVOD Test Configuration

Shared fixtures and configuration for all tests.
"""

import os
from typing import AsyncGenerator, Callable

import httpx
import pytest

from nextvod.config import DatabaseConfig, FillerConfig, NextVodConfig, StitcherConfig
from nextvod.main import create_app
from nextvod.playout import AdBreakPlanner, PlaylistAdvancer
from nextvod.store.sql import SQLChannelStore
from nextvod.streaming import StitchClient

from tests.fixtures.factories import ChannelFactory, FakeChannelStore

FILLER_URL = "https://ads.example.com/filler/index.m3u8"
STITCHER_BASE = "http://stitcher.test"


# ============ Configuration Fixtures ============


@pytest.fixture
def filler_config() -> FillerConfig:
    return FillerConfig(url=FILLER_URL, duration_sec=54)


@pytest.fixture
def stitcher_config() -> StitcherConfig:
    return StitcherConfig(base_url=STITCHER_BASE, path="/stitch/", timeout=2.0)


@pytest.fixture
def planner(filler_config: FillerConfig) -> AdBreakPlanner:
    return AdBreakPlanner(filler_config)


# ============ Stitcher Fixtures ============


def stitched_ok(request: httpx.Request) -> httpx.Response:
    """Stitcher that accepts every request."""
    return httpx.Response(200, json={"uri": "/stitch/master.m3u8?payload=abc"})


@pytest.fixture
def make_stitch_client(stitcher_config: StitcherConfig) -> Callable[..., StitchClient]:
    """Build stitch clients on top of a mock transport handler."""

    def factory(handler=stitched_ok, config: StitcherConfig | None = None) -> StitchClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return StitchClient(config or stitcher_config, http_client=http_client)

    return factory


@pytest.fixture
def stitch_client(make_stitch_client) -> StitchClient:
    return make_stitch_client()


# ============ Store Fixtures ============


@pytest.fixture
def fake_store() -> FakeChannelStore:
    return FakeChannelStore()


@pytest.fixture
async def sql_store() -> AsyncGenerator[SQLChannelStore, None]:
    """SQL store on a fresh in-memory SQLite database."""
    store = await SQLChannelStore.connect(DatabaseConfig(url="sqlite://"))
    try:
        yield store
    finally:
        await store.close()


@pytest.fixture
def advancer(fake_store, planner, stitch_client) -> PlaylistAdvancer:
    return PlaylistAdvancer(fake_store, planner, stitch_client, max_attempts=3)


# ============ API Fixtures ============


@pytest.fixture
def app(fake_store, advancer):
    """FastAPI application wired to the fake store."""
    app = create_app(NextVodConfig())
    app.state.store = fake_store
    app.state.advancer = advancer
    return app


@pytest.fixture
async def async_client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create an async test client."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ============ Sample Data Fixtures ============


@pytest.fixture
def sample_channel():
    return ChannelFactory.create(channel_id="retro-tv", asset_count=3)


# ============ Environment Fixtures ============


_ENV_VARS = ("PORT", "DB_PASSWORD", "FILLER_URL", "FILLER_URL_DURATION_SEC")


@pytest.fixture(autouse=True)
def clean_environment():
    """Clean environment variables for each test."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("NEXTVOD_") or key in _ENV_VARS:
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)
