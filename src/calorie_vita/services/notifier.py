"""Publish/subscribe notification of saved goals."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from calorie_vita.domain.goals import GoalsChanged

GoalsListener = Callable[[GoalsChanged], None]

_logger = logging.getLogger(__name__)


@dataclass
class GoalsNotifier:
    """Delivers goal changes to subscribed listeners."""

    _listeners: list[GoalsListener] = field(default_factory=list)

    def subscribe(self, listener: GoalsListener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: GoalsChanged) -> None:
        """Send an event to every listener; a failing listener does not stop the rest."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                _logger.exception(
                    "Goals listener failed", extra={"user_id": str(event.user_id)}
                )

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
