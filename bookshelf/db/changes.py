"""Table-level change notification for live queries."""

from collections import defaultdict
from collections.abc import Callable, Iterable

import structlog

logger = structlog.get_logger(__name__)

ChangeCallback = Callable[[frozenset[str]], None]


class ChangeFeed:
    """Fan out committed table changes to subscribers.

    A subscriber registers for a set of table names and is called once per
    commit that touched any of them, with the full set of touched tables.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[ChangeCallback]] = defaultdict(list)

    def subscribe(self, tables: Iterable[str], callback: ChangeCallback) -> Callable[[], None]:
        """Register ``callback``; returns a function that unregisters it."""
        names = frozenset(tables)
        for name in names:
            self._subscribers[name].append(callback)

        def unsubscribe() -> None:
            for name in names:
                callbacks = self._subscribers.get(name, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe

    def subscriber_count(self, table: str) -> int:
        return len(self._subscribers.get(table, []))

    def publish(self, tables: Iterable[str]) -> None:
        touched = frozenset(tables)
        notified: list[ChangeCallback] = []
        for name in touched:
            for callback in list(self._subscribers.get(name, [])):
                if any(callback is seen for seen in notified):
                    continue
                notified.append(callback)
                callback(touched)

        if notified:
            logger.debug("Published table changes", tables=sorted(touched), subscribers=len(notified))
