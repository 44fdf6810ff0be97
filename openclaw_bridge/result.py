"""Result type used where a failure is an expected value rather than an exception.

Mirrors Rust's / F#'s Result:

    match _parse_json_safely(text):
        case Ok(value):
            ...
        case Error(reason):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar


_T = TypeVar("_T")
_E = TypeVar("_E")


@dataclass(frozen=True)
class Ok(Generic[_T]):  # noqa: UP046
    value: _T

    def __repr__(self):
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Error(Generic[_E]):  # noqa: UP046
    """Failure value."""

    value: _E

    def __repr__(self):
        return f"Error({self.value!r})"


Result = Ok[_T] | Error[_E]
