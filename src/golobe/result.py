"""Success/failure result type returned at every data-access boundary."""

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from golobe.errors import GolobeError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    ok: Literal[True] = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: GolobeError
    ok: Literal[False] = False

    def unwrap(self) -> None:
        """Raise the carried error."""
        raise self.error


Result = Success[T] | Failure
