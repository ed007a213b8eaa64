"""
Store - Minimal action store with middleware support

Holds state produced by a reducer, notifies subscribers on every dispatch
and lets middleware wrap the dispatch function.
"""

from functools import reduce
from threading import Lock
from typing import Any, Callable, Dict, List, Mapping, Optional

Reducer = Callable[[Any, Dict[str, Any]], Any]
Listener = Callable[[], None]


class Store:
    """
    In-memory store.

    ``dispatch`` runs the reducer and then the subscribers; it returns the
    action. Middleware added with ``apply_middleware`` can return something
    else (e.g. an awaitable for API actions).
    """

    def __init__(self, reducer: Reducer, initial_state: Any = None):
        """
        Initialize store.

        Args:
            reducer: Function (state, action) -> new state
            initial_state: State before the first action
        """
        self._reducer = reducer
        self._state = initial_state
        self._listeners: List[Listener] = []
        self._lock = Lock()
        self._dispatch = self._base_dispatch

    def get_state(self) -> Any:
        """Return the current state"""
        return self._state

    def dispatch(self, action: Any) -> Any:
        """Dispatch an action through the middleware chain"""
        return self._dispatch(action)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called after every reduced action.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def apply_middleware(self, *middlewares: Callable) -> "Store":
        """
        Wrap dispatch with middlewares; the first one sees actions first.

        Each middleware has the shape ``store -> next -> action -> result``
        and receives this store, so its ``dispatch`` re-enters the full chain.
        """
        chain = [middleware(self) for middleware in middlewares]
        self._dispatch = reduce(
            lambda next_dispatch, wrap: wrap(next_dispatch),
            reversed(chain),
            self._base_dispatch
        )
        return self

    def _base_dispatch(self, action: Any) -> Any:
        if not isinstance(action, Mapping) or "type" not in action:
            raise ValueError(f"Actions reaching the reducer need a 'type' key: {action!r}")

        with self._lock:
            self._state = self._reducer(self._state, action)
            listeners = list(self._listeners)

        for listener in listeners:
            listener()

        return action


def recording_reducer(state: Optional[List[Dict[str, Any]]], action: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Reducer whose state is the list of every action received"""
    return [*(state or []), action]


def create_store(
    reducer: Reducer,
    initial_state: Any = None,
    middlewares: Optional[List[Callable]] = None
) -> Store:
    """Create a store and apply the given middlewares"""
    store = Store(reducer, initial_state)
    if middlewares:
        store.apply_middleware(*middlewares)
    return store
