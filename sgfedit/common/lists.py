"""List editing primitives, result aggregation and loop combinators.

These are small, dependency-free helpers used throughout the core: the parser
aggregates per-tree outcomes with :func:`and_results`, and the editor drives its
navigation loops with :func:`while_true` and :func:`while_some`.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Any, NamedTuple, TypeVar

T = TypeVar("T")
E = TypeVar("E")
S = TypeVar("S")
R = TypeVar("R")


def list_replace(old: T, new: T, items: Iterable[T]) -> list[T]:
    """Returns a copy of ``items`` with every occurrence of ``old`` replaced by ``new``."""
    return [new if item == old else item for item in items]


def list_update(fn: Callable[[T], T], index: int, items: Sequence[T]) -> list[T]:
    """Returns a copy of ``items`` with ``fn`` applied to the element at ``index``.

    Raises:
        IndexError: If ``index`` does not name an element (negative indices included).
    """
    if index < 0 or index >= len(items):
        raise IndexError(f"Cannot update index {index} of list {list(items)!r}.")
    result = list(items)
    result[index] = fn(result[index])
    return result


def list_insert_at(index: int, item: T, items: Sequence[T]) -> list[T]:
    """Inserts ``item`` before position ``index``, clamping the index to the ends of the list."""
    index = max(0, min(index, len(items)))
    return [*items[:index], item, *items[index:]]


def list_delete_at(index: int, items: Sequence[T]) -> list[T]:
    """Removes the element at ``index``. Out-of-range indices leave the list unchanged."""
    if index < 0 or index >= len(items):
        return list(items)
    return [*items[:index], *items[index + 1 :]]


class Aggregate(NamedTuple):
    """Outcome of :func:`and_results`: ``ok`` is False when any failure was present."""

    ok: bool
    values: list[Any]


def and_results(results: Iterable[tuple[bool, Any]]) -> Aggregate:
    """Aggregates ``(ok, value)`` pairs.

    If any pair failed, returns every failure value (in order) and ``ok=False``;
    otherwise returns every success value and ``ok=True``. Nothing is dropped, so
    callers can report all problems at once rather than stopping at the first.
    """
    failures: list[Any] = []
    successes: list[Any] = []
    for ok, value in results:
        (successes if ok else failures).append(value)
    if failures:
        return Aggregate(False, failures)
    return Aggregate(True, successes)


def cond(fallback: T, cases: Iterable[tuple[bool, T]]) -> T:
    """Returns the value of the first case whose test is true, else ``fallback``."""
    for test, value in cases:
        if test:
            return value
    return fallback


def while_true(test: Callable[[], bool], body: Callable[[], Any]) -> None:
    """Runs ``body`` for as long as ``test()`` returns true."""
    while test():
        body()


def while_some(test: Callable[[], T | None], body: Callable[[T], Any]) -> None:
    """Runs ``body(value)`` for as long as ``test()`` returns a value that is not None."""
    while (value := test()) is not None:
        body(value)


def do_while(initial: S, body: Callable[[S], tuple[bool, Any]]) -> Any:
    """Runs ``body`` at least once, threading state through it.

    ``body`` returns ``(True, next_state)`` to continue or ``(False, result)`` to
    stop; the final result is returned.
    """
    state: Any = initial
    while True:
        again, state = body(state)
        if not again:
            return state
