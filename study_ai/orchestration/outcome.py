from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from .errors import AIError

T = TypeVar('T')


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    ok = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: AIError
    ok = False

    def unwrap(self) -> Any:
        raise self.error


Outcome = Union[Success, Failure]
