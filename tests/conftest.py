import httpx
import pytest
from fastapi import FastAPI

from fake_github import create_fake_github
from github_explorer.client import GitHubClient
from github_explorer.config import Settings
from github_explorer.store import GitHubStore

FAKE_API_URL = "https://api.github.test"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(api_url=FAKE_API_URL, _env_file=None)


@pytest.fixture
def fake_github() -> FastAPI:
    return create_fake_github()


@pytest.fixture
def requests_seen(fake_github: FastAPI) -> list[str]:
    return fake_github.state.requests


@pytest.fixture
async def github(settings: Settings, fake_github: FastAPI):
    async with GitHubClient(settings, transport=httpx.ASGITransport(app=fake_github)) as client:
        yield client


@pytest.fixture
def store(github: GitHubClient) -> GitHubStore:
    return GitHubStore(github)
