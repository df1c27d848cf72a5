"""Errors raised by the GitHub client.

Every error carries a short message meant to be shown to the user as is.
"""


class GitHubError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmptyInputError(GitHubError):
    """The username or query was empty after trimming."""


class InvalidRequestError(GitHubError):
    """The request URL could not be built."""


class NotFoundError(GitHubError):
    """GitHub answered 404."""


class RateLimitError(GitHubError):
    """GitHub answered 403, the unauthenticated quota is used up."""


class RequestFailedError(GitHubError):
    """Any other non-2xx answer or a transport failure."""


class DecodeError(GitHubError):
    """The response body did not match the expected records."""
