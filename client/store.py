"""
Centralized client state container.

A `Store` holds the whole client state. The only way to change it is to
`dispatch` an `Action`; the root reducer computes the next state and every
subscriber is notified. Views read state through `get_state` or subscribe to
re-render on changes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None


Reducer = Callable[[Any, Action], Any]
Listener = Callable[[Any], None]


class Store:
    """Holds state and applies actions through a reducer"""

    def __init__(self, reducer: Reducer, initial_state: Any = None):
        self._reducer = reducer
        self._state = reducer(initial_state, Action("@@INIT"))
        self._listeners: List[Listener] = []

    def get_state(self) -> Any:
        return self._state

    def dispatch(self, action: Action) -> Action:
        logger.debug(f"Dispatching {action.type}")
        self._state = self._reducer(self._state, action)
        for listener in list(self._listeners):
            listener(self._state)
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


def combine_reducers(state_class: Callable[..., Any], **reducers: Reducer) -> Reducer:
    """Build a root reducer where each reducer owns one named field of state_class"""

    def root(state: Any, action: Action) -> Any:
        return state_class(
            **{
                name: reducer(getattr(state, name, None), action)
                for name, reducer in reducers.items()
            }
        )

    return root
