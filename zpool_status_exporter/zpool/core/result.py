from typing import Generic, TypeVar, Callable, Any, cast
from dataclasses import dataclass

T = TypeVar('T')
E = TypeVar('E', bound=Exception)
U = TypeVar('U')


class _Missing:
    """Marker for the unset side of a Result"""

    def __repr__(self) -> str:
        return "<missing>"


_MISSING: Any = _Missing()


@dataclass(frozen=True)
class Result(Generic[T, E]):
    """Result type for explicit error handling without exceptions

    A success may carry any value, including ``None`` or an empty list
    (a host without pools parses to ``[]``).
    """
    _value: Any = _MISSING
    _error: Any = _MISSING

    def __post_init__(self):
        if (self._value is _MISSING) == (self._error is _MISSING):
            raise ValueError("Result must have exactly one of value or error")

    @classmethod
    def success(cls, value: T) -> 'Result[T, E]':
        """Create a successful result"""
        return cls(_value=value)

    @classmethod
    def failure(cls, error: E) -> 'Result[T, E]':
        """Create a failed result"""
        return cls(_error=error)

    @property
    def is_success(self) -> bool:
        return self._error is _MISSING

    @property
    def is_failure(self) -> bool:
        return self._error is not _MISSING

    @property
    def value(self) -> T:
        """Get the success value (raises ValueError if result is failure)"""
        if self.is_failure:
            raise ValueError("Cannot get value from failed result")
        return cast(T, self._value)

    @property
    def error(self) -> E:
        """Get the error (raises ValueError if result is success)"""
        if self.is_success:
            raise ValueError("Cannot get error from successful result")
        return cast(E, self._error)

    def map(self, func: Callable[[T], U]) -> 'Result[U, E]':
        """Transform the success value while preserving failure"""
        if self.is_success:
            return Result.success(func(cast(T, self._value)))
        return Result.failure(cast(E, self._error))

    def __str__(self) -> str:
        if self.is_success:
            return f"Success({self._value})"
        return f"Failure({self._error})"

    def __repr__(self) -> str:
        return self.__str__()
