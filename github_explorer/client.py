import logging
from typing import TypeVar
from urllib.parse import quote, urlencode

import httpx
from pydantic import TypeAdapter, ValidationError

from .config import Settings
from .errors import (
    DecodeError,
    EmptyInputError,
    InvalidRequestError,
    NotFoundError,
    RateLimitError,
    RequestFailedError,
)
from .models import Repository, RepositorySearchResponse, User

logger = logging.getLogger(__name__)

T = TypeVar("T")

EMPTY_USERNAME = "Please enter a GitHub username."
EMPTY_QUERY = "Please enter a search query."
INVALID_USERNAME = "Invalid username."
INVALID_QUERY = "Invalid search query."
USER_NOT_FOUND = "User not found."
RATE_LIMITED = "Rate limit exceeded. Please try again later."
SEARCH_FAILED = "Failed to search repositories."

USER_FAILED = "Failed to load user. Please try again."
REPOSITORIES_FAILED = "Failed to load repositories. Please try again."
FOLLOWERS_FAILED = "Failed to load followers. Please try again."
FOLLOWING_FAILED = "Failed to load following. Please try again."
SEARCH_RETRY = "Failed to search repositories. Please try again."

USER = TypeAdapter(User)
USERS = TypeAdapter(list[User])
REPOSITORIES = TypeAdapter(list[Repository])
SEARCH = TypeAdapter(RepositorySearchResponse)


def require_text(value: str, empty_message: str) -> str:
    """Trim value and raise EmptyInputError when nothing is left."""
    trimmed = (value or "").strip()
    if not trimmed:
        raise EmptyInputError(empty_message)
    return trimmed


def user_path(login: str, resource: str = "") -> str:
    """Build /users/{login}[/resource] with the login encoded as one path segment."""
    path = f"/users/{quote(login, safe='')}"
    if resource:
        path = f"{path}/{resource}"
    return path


def with_query(path: str, params: dict[str, str | int]) -> str:
    """Append percent-encoded query params to path."""
    return f"{path}?{urlencode(params, quote_via=quote)}"


class GitHubClient:
    """
    Unauthenticated client for the GitHub REST API.

    One coroutine per resource. Each one performs a single GET, maps the
    status code to an error from github_explorer.errors and decodes the body
    into records. Nothing is retried.
    """

    def __init__(self, settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings or Settings()
        self.http = httpx.AsyncClient(
            base_url=self.settings.api_url,
            headers={
                "Accept": "application/vnd.github+json",
                "User-Agent": self.settings.user_agent,
            },
            timeout=self.settings.request_timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def get_user(self, login: str) -> User:
        login = require_text(login, EMPTY_USERNAME)
        response = await self._get(
            user_path(login),
            invalid_message=INVALID_USERNAME,
            not_found_message=USER_NOT_FOUND,
            failure_message=USER_FAILED,
        )
        return self._decode(response, USER, USER_FAILED)

    async def get_user_repositories(self, login: str) -> list[Repository]:
        login = require_text(login, INVALID_USERNAME)
        path = with_query(
            user_path(login, "repos"),
            {"sort": "updated", "per_page": self.settings.repositories_per_page},
        )
        response = await self._get(
            path,
            invalid_message=INVALID_USERNAME,
            not_found_message=USER_NOT_FOUND,
            failure_message=REPOSITORIES_FAILED,
        )
        return self._decode(response, REPOSITORIES, REPOSITORIES_FAILED)

    async def get_followers(self, login: str) -> list[User]:
        return await self._get_users(login, "followers", FOLLOWERS_FAILED)

    async def get_following(self, login: str) -> list[User]:
        return await self._get_users(login, "following", FOLLOWING_FAILED)

    async def search_repositories(self, query: str) -> RepositorySearchResponse:
        query = require_text(query, EMPTY_QUERY)
        path = with_query(
            "/search/repositories",
            {"q": query, "sort": "stars", "order": "desc", "per_page": self.settings.search_per_page},
        )
        # 404 on search is not about a user, it falls through to SEARCH_FAILED
        response = await self._get(
            path,
            invalid_message=INVALID_QUERY,
            not_found_message=None,
            failure_message=SEARCH_RETRY,
            status_message=SEARCH_FAILED,
        )
        return self._decode(response, SEARCH, SEARCH_RETRY)

    async def _get_users(self, login: str, resource: str, failure_message: str) -> list[User]:
        login = require_text(login, INVALID_USERNAME)
        path = with_query(user_path(login, resource), {"per_page": self.settings.followers_per_page})
        response = await self._get(
            path,
            invalid_message=INVALID_USERNAME,
            not_found_message=USER_NOT_FOUND,
            failure_message=failure_message,
        )
        return self._decode(response, USERS, failure_message)

    async def _get(
        self,
        path: str,
        *,
        invalid_message: str,
        not_found_message: str | None,
        failure_message: str,
        status_message: str | None = None,
    ) -> httpx.Response:
        """
        Perform one GET and turn failure statuses into errors.

        Raises:
            InvalidRequestError: the URL was rejected before sending
            NotFoundError: 404, when not_found_message is given
            RateLimitError: 403
            RequestFailedError: any other non-2xx status or a transport error
        """
        logger.debug(f"GET {path}")
        try:
            response = await self.http.get(path)
        except httpx.InvalidURL as e:
            logger.warning(f"Rejected URL {path}: {e}")
            raise InvalidRequestError(invalid_message) from e
        except httpx.HTTPError as e:
            logger.warning(f"Request to {path} failed: {e}")
            raise RequestFailedError(failure_message) from e

        if response.status_code == 404 and not_found_message:
            logger.warning(f"GET {path} -> 404")
            raise NotFoundError(not_found_message)
        if response.status_code == 403:
            logger.warning(f"GET {path} -> 403, rate limit exceeded")
            raise RateLimitError(RATE_LIMITED)
        if not response.is_success:
            logger.warning(f"GET {path} -> {response.status_code}")
            raise RequestFailedError(status_message or failure_message)
        return response

    def _decode(self, response: httpx.Response, adapter: TypeAdapter[T], failure_message: str) -> T:
        try:
            return adapter.validate_json(response.content)
        except ValidationError as e:
            logger.warning(f"Could not decode {response.request.url}: {e.error_count()} errors")
            raise DecodeError(failure_message) from e
