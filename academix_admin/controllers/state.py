"""
Observable state container for controllers.

State is an immutable snapshot. Controllers replace it wholesale; observers
registered with `subscribe()` are called with each new snapshot. Updates made
inside `batch()` are delivered as one notification when the outermost batch
exits, so observers never see a half-applied change.
"""

from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, Iterator, List, Optional, Tuple, TypeVar

from academix_admin.logging_config import get_logger


logger = get_logger("state")

S = TypeVar("S")
T = TypeVar("T")


@dataclass(frozen=True)
class ListSnapshot(Generic[T]):
    """What a list controller exposes to observers"""
    items: Tuple[T, ...] = ()
    is_loading: bool = False
    is_loading_more: bool = False
    is_saving: bool = False
    error: str = ""
    page: int = 1
    total_items: int = 0
    total_pages: int = 1
    has_more: bool = False
    filters: Optional[Any] = None

    @property
    def has_error(self) -> bool:
        return bool(self.error)


@dataclass(frozen=True)
class AuthSnapshot:
    is_authenticated: bool = False
    is_loading: bool = False
    error: str = ""
    user_id: Optional[str] = None
    role: Optional[str] = None


@dataclass(frozen=True)
class DashboardSnapshot:
    stats: Optional[Any] = None
    activities: Tuple[Any, ...] = ()
    auth_logs: Tuple[Any, ...] = ()
    auth_log_total: int = 0
    is_loading: bool = False
    error: str = ""


class ObservableState(Generic[S]):
    """
    Holds one snapshot and notifies subscribers on change.

    Usage:
        state = ObservableState(ListSnapshot())
        unsubscribe = state.subscribe(lambda snap: print(len(snap.items)))
        with state.batch():
            state.update(is_loading=False)
            state.update(items=(book,))
        unsubscribe()
    """

    def __init__(self, initial: S):
        self._value = initial
        self._subscribers: List[Callable[[S], None]] = []
        self._batch_depth = 0
        self._dirty = False

    @property
    def value(self) -> S:
        return self._value

    def set(self, value: S) -> None:
        if value == self._value:
            return
        self._value = value
        if self._batch_depth:
            self._dirty = True
        else:
            self._notify()

    def update(self, **changes: Any) -> S:
        """Replace fields of the current snapshot"""
        self.set(replace(self._value, **changes))
        return self._value

    def subscribe(self, callback: Callable[[S], None]) -> Callable[[], None]:
        """Register `callback`; returns a function that unregisters it"""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @contextmanager
    def batch(self) -> Iterator[None]:
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._dirty = False
                self._notify()

    def _notify(self) -> None:
        snapshot = self._value
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as e:
                # Observer failures are logged and skipped
                logger.log_error_with_context(e, context="state subscriber")
