"""
View states shared by every fetch operation.

A state is one of:
- Idle      -> nothing requested yet
- Loading   -> a request is in flight
- Loaded    -> the request finished, ``value`` holds the result
- Failed    -> the request failed, ``message`` is shown to the user
"""

from typing import Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class Idle(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["idle"] = "idle"


class Loading(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["loading"] = "loading"


class Loaded(BaseModel, Generic[T]):
    model_config = ConfigDict(frozen=True)

    status: Literal["loaded"] = "loaded"
    value: T


class Failed(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["error"] = "error"
    message: str


ViewState = Union[Idle, Loading, Loaded, Failed]


def is_loading(state: ViewState) -> bool:
    return isinstance(state, Loading)


def error_message(state: ViewState) -> str | None:
    """Return the user-facing message of a failed state, None otherwise."""
    if isinstance(state, Failed):
        return state.message
    return None
