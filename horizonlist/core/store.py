from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import Callable, List


@dataclass(frozen=True)
class ProjectListState:
    items: List[str] = field(default_factory=list)
    is_fetched: bool = False


class StateStore:
    """Owns one ProjectListState; every update notifies subscribers."""

    def __init__(self, initial: ProjectListState | None = None) -> None:
        self._state = initial or ProjectListState()
        self._subscribers: List[Callable[[ProjectListState], None]] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> ProjectListState:
        return self._state

    def update(self, **changes) -> ProjectListState:
        with self._lock:
            self._state = replace(self._state, **changes)
            state = self._state
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(state)
        return state

    def subscribe(self, callback: Callable[[ProjectListState], None]) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe
