import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from .client import GitHubClient
from .errors import GitHubError
from .models import Repository, User
from .state import Failed, Idle, Loaded, Loading, ViewState

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[str, Any], None]


class GitHubStore:
    """
    Owned application state for browsing GitHub.

    Each fetch operation writes a result field and a matching ``*_state``
    field. Every assignment goes through ``_set`` so subscribers see each
    change. Failures never escape as exceptions, they end up in the state.
    A listener that raises is logged and skipped.

    Responses are tagged with a per-field generation. A response that comes
    back after a newer request for the same field has started is dropped.
    """

    def __init__(self, client: GitHubClient):
        self.client = client

        self.current_user: User | None = None
        self.user_state: ViewState = Idle()
        self.profile_state: ViewState = Idle()

        self.searched_repositories: list[Repository] = []
        self.repository_search_state: ViewState = Idle()
        self.user_repositories: list[Repository] = []
        self.user_repositories_state: ViewState = Idle()
        self.selected_repository: Repository | None = None

        self.followers: list[User] = []
        self.followers_state: ViewState = Idle()
        self.following: list[User] = []
        self.following_state: ViewState = Idle()

        self.saved_users: list[User] = []
        self.saved_repositories: list[Repository] = []

        self._listeners: list[Listener] = []
        self._generations: dict[str, int] = {}

    # ----- subscriptions -----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener(field, value) after every change. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, field: str, value: Any) -> None:
        setattr(self, field, value)
        for listener in list(self._listeners):
            try:
                listener(field, value)
            except Exception:
                logger.exception(f"Listener failed on {field}")

    # ----- fetch operations -----

    async def fetch_user(self, username: str) -> User | None:
        return await self._run(
            "current_user", "user_state", self.client.get_user(username), Loaded[User], empty=None
        )

    async def search_repositories(self, query: str) -> list[Repository] | None:
        async def search() -> list[Repository]:
            response = await self.client.search_repositories(query)
            return response.items[: self.client.settings.search_per_page]

        return await self._run(
            "searched_repositories", "repository_search_state", search(), Loaded[list[Repository]], empty=[]
        )

    async def fetch_user_repositories(self, username: str) -> list[Repository] | None:
        return await self._run(
            "user_repositories",
            "user_repositories_state",
            self.client.get_user_repositories(username),
            Loaded[list[Repository]],
            empty=[],
        )

    async def fetch_followers(self, username: str) -> list[User] | None:
        return await self._run(
            "followers", "followers_state", self.client.get_followers(username), Loaded[list[User]], empty=[]
        )

    async def fetch_following(self, username: str) -> list[User] | None:
        return await self._run(
            "following", "following_state", self.client.get_following(username), Loaded[list[User]], empty=[]
        )

    async def load_profile(self, username: str) -> ViewState:
        """
        Load a user and then its repositories, followers and following.

        The three dependent fetches run concurrently and the profile only
        counts as loaded once all of them are done. A failure in one of them
        stays in that section's state.
        """
        generation = self._begin("profile_state")
        # the profile owns the user lookup, a later fetch_user takes user_state over
        user_generation = self._begin("user_state")
        self._set("profile_state", Loading())
        self._set("user_state", Loading())
        self._set("current_user", None)
        try:
            user = await self.client.get_user(username)
        except GitHubError as e:
            failure = Failed(message=e.message)
            if self._is_current("user_state", user_generation):
                self._set("user_state", failure)
            if self._is_current("profile_state", generation):
                self._set("profile_state", failure)
            return self.profile_state

        if not self._is_current("profile_state", generation):
            logger.debug(f"Dropped stale profile for {username!r}")
            return self.profile_state
        if self._is_current("user_state", user_generation):
            self._set("current_user", user)
            self._set("user_state", Loaded[User](value=user))

        logger.info(f"Loading profile sections for {user.login}")
        await asyncio.gather(
            self.fetch_user_repositories(user.login),
            self.fetch_followers(user.login),
            self.fetch_following(user.login),
        )

        if self._is_current("profile_state", generation):
            self._set("profile_state", Loaded[User](value=user))
        else:
            logger.debug(f"Dropped stale profile for {user.login}")
        return self.profile_state

    async def _run(
        self,
        result_field: str,
        state_field: str,
        request: Awaitable[T],
        loaded: Callable[..., ViewState],
        empty: Any,
    ) -> T | None:
        generation = self._begin(state_field)
        self._set(state_field, Loading())
        self._set(result_field, empty)
        try:
            value = await request
        except GitHubError as e:
            if self._is_current(state_field, generation):
                self._set(state_field, Failed(message=e.message))
            return None

        if not self._is_current(state_field, generation):
            logger.debug(f"Dropped stale response for {state_field}")
            return None
        self._set(result_field, value)
        self._set(state_field, loaded(value=value))
        return value

    def _begin(self, field: str) -> int:
        generation = self._generations.get(field, 0) + 1
        self._generations[field] = generation
        return generation

    def _is_current(self, field: str, generation: int) -> bool:
        return self._generations.get(field) == generation

    # ----- saved lists -----

    def save_user(self, user: User) -> None:
        if not self.is_user_saved(user.id):
            self._set("saved_users", [*self.saved_users, user])

    def save_current_user(self) -> None:
        if self.current_user is not None:
            self.save_user(self.current_user)

    def remove_saved_user(self, user_id: int) -> None:
        remaining = [user for user in self.saved_users if user.id != user_id]
        if len(remaining) != len(self.saved_users):
            self._set("saved_users", remaining)

    def is_user_saved(self, user_id: int) -> bool:
        return any(user.id == user_id for user in self.saved_users)

    def save_repository(self, repository: Repository) -> None:
        if not self.is_repository_saved(repository.id):
            self._set("saved_repositories", [*self.saved_repositories, repository])

    def remove_saved_repository(self, repository_id: int) -> None:
        remaining = [repo for repo in self.saved_repositories if repo.id != repository_id]
        if len(remaining) != len(self.saved_repositories):
            self._set("saved_repositories", remaining)

    def is_repository_saved(self, repository_id: int) -> bool:
        return any(repo.id == repository_id for repo in self.saved_repositories)

    # ----- lookups -----

    def select_repository(self, repository: Repository | None) -> None:
        self._set("selected_repository", repository)

    def find_user(self, user_id: int) -> User | None:
        """Find a user among the ones currently shown."""
        shown = [self.current_user, *self.followers, *self.following, *self.saved_users]
        return next((user for user in shown if user is not None and user.id == user_id), None)

    def find_repository(self, repository_id: int) -> Repository | None:
        """Find a repository among the ones currently shown."""
        shown = [*self.searched_repositories, *self.user_repositories, *self.saved_repositories]
        return next((repo for repo in shown if repo.id == repository_id), None)

    def snapshot(self) -> dict[str, Any]:
        """Whole store as JSON-ready data."""

        def dump(value: Any) -> Any:
            if isinstance(value, list):
                return [item.model_dump(mode="json") for item in value]
            if value is None:
                return None
            return value.model_dump(mode="json")

        fields = [
            "current_user",
            "user_state",
            "profile_state",
            "searched_repositories",
            "repository_search_state",
            "user_repositories",
            "user_repositories_state",
            "selected_repository",
            "followers",
            "followers_state",
            "following",
            "following_state",
            "saved_users",
            "saved_repositories",
        ]
        return {field: dump(getattr(self, field)) for field in fields}
