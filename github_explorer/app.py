"""
GitHub Explorer

A small JSON service over GitHubStore. It looks up GitHub users, searches
repositories, loads profiles and keeps in-memory lists of saved users and
repositories. Saved lists live as long as the process.

Fetch endpoints always answer 200 with the resulting view state. A failed
GitHub call shows up as {"status": "error", "message": ...} in that state.

The app is built by create_app so tests can pass a transport that replaces
GitHub; the module-level app uses the real network.

Endpoints:
- GET    /api                              - Service info
- GET    /api/state                        - Whole store
- POST   /api/users/search                 - Look up a user by login
- POST   /api/profiles/{login}             - Load user, repositories, followers, following
- POST   /api/repositories/search          - Search repositories
- POST   /api/repositories/{id}/select     - Select a shown repository
- GET    /api/saved                        - Saved users and repositories
- POST   /api/saved/users/{id}             - Save a shown user
- DELETE /api/saved/users/{id}             - Remove a saved user
- POST   /api/saved/repositories/{id}      - Save a shown repository
- DELETE /api/saved/repositories/{id}      - Remove a saved repository
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel

from .client import GitHubClient
from .config import Settings
from .store import GitHubStore

logger = logging.getLogger(__name__)


class UserQuery(BaseModel):
    username: str


class RepositoryQuery(BaseModel):
    query: str


def create_app(settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    """Build the service. transport replaces the network, tests use it to fake GitHub."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with GitHubClient(settings, transport=transport) as client:
            app.state.store = GitHubStore(client)
            logger.info(f"Using GitHub API at {settings.api_url}")
            yield

    app = FastAPI(
        title=settings.app_name,
        description="Search GitHub users and repositories and keep a list of favourites",
        lifespan=lifespan,
    )
    register_routes(app)
    return app


def get_store(request: Request) -> GitHubStore:
    return request.app.state.store


def saved_lists(store: GitHubStore) -> dict:
    return {
        "users": [user.model_dump(mode="json") for user in store.saved_users],
        "repositories": [repo.model_dump(mode="json") for repo in store.saved_repositories],
    }


def register_routes(app: FastAPI) -> None:
    @app.get("/api")
    def api_info():
        """Health check and info endpoint."""
        return {
            "service": app.title,
            "description": "In-memory GitHub browser",
            "endpoints": {
                "state": "/api/state",
                "user_search": "/api/users/search",
                "profile": "/api/profiles/{login}",
                "repository_search": "/api/repositories/search",
                "saved": "/api/saved",
            },
        }

    @app.get("/api/state")
    async def state(store: GitHubStore = Depends(get_store)):
        return store.snapshot()

    @app.post("/api/users/search")
    async def search_user(body: UserQuery, store: GitHubStore = Depends(get_store)):
        """Look up one user by login."""
        await store.fetch_user(body.username)
        return store.user_state.model_dump(mode="json")

    @app.post("/api/profiles/{login}")
    async def load_profile(login: str, store: GitHubStore = Depends(get_store)):
        """Load a profile; each section reports its own state."""
        await store.load_profile(login)
        return {
            "profile": store.profile_state.model_dump(mode="json"),
            "repositories": store.user_repositories_state.model_dump(mode="json"),
            "followers": store.followers_state.model_dump(mode="json"),
            "following": store.following_state.model_dump(mode="json"),
        }

    @app.post("/api/repositories/search")
    async def search_repositories(body: RepositoryQuery, store: GitHubStore = Depends(get_store)):
        await store.search_repositories(body.query)
        return store.repository_search_state.model_dump(mode="json")

    @app.post("/api/repositories/{repository_id}/select")
    async def select_repository(repository_id: int, store: GitHubStore = Depends(get_store)):
        repository = store.find_repository(repository_id)
        if repository is None:
            raise HTTPException(status_code=404, detail="Repository not found")
        store.select_repository(repository)
        return repository.model_dump(mode="json")

    @app.get("/api/saved")
    async def saved(store: GitHubStore = Depends(get_store)):
        return saved_lists(store)

    @app.post("/api/saved/users/{user_id}")
    async def save_user(user_id: int, store: GitHubStore = Depends(get_store)):
        user = store.find_user(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        store.save_user(user)
        return saved_lists(store)

    @app.delete("/api/saved/users/{user_id}")
    async def remove_saved_user(user_id: int, store: GitHubStore = Depends(get_store)):
        store.remove_saved_user(user_id)
        return saved_lists(store)

    @app.post("/api/saved/repositories/{repository_id}")
    async def save_repository(repository_id: int, store: GitHubStore = Depends(get_store)):
        repository = store.find_repository(repository_id)
        if repository is None:
            raise HTTPException(status_code=404, detail="Repository not found")
        store.save_repository(repository)
        return saved_lists(store)

    @app.delete("/api/saved/repositories/{repository_id}")
    async def remove_saved_repository(repository_id: int, store: GitHubStore = Depends(get_store)):
        store.remove_saved_repository(repository_id)
        return saved_lists(store)


app = create_app()
