"""Change notifications from the view coordinator to the views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal

import structlog

from src.organogram.models import ViewMode

LOGGER = structlog.get_logger(__name__)

NavigatorEventKind = Literal[
    "view_switched",
    "member_selected",
    "selection_cleared",
    "node_toggled",
    "expanded_all",
    "collapsed_all",
]


@dataclass(frozen=True, slots=True)
class NavigatorEvent:
    kind: NavigatorEventKind
    view: ViewMode
    selected_member_id: str | None
    node_id: str | None = None


Subscriber = Callable[[NavigatorEvent], None]
UnsubscribeCallback = Callable[[], None]


class EventHub:
    """Synchronous fan-out of coordinator state changes to the views."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def __len__(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Subscriber) -> UnsubscribeCallback:
        """Register a subscriber and return a callable that removes it."""
        self._subscribers.append(callback)
        LOGGER.debug("organogram.events.subscribe", listeners=len(self._subscribers))

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
            LOGGER.debug("organogram.events.unsubscribe", listeners=len(self._subscribers))

        return _unsubscribe

    def publish(self, event: NavigatorEvent) -> None:
        """Deliver to every subscriber; a failing view never breaks the others."""
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as exc:
                LOGGER.warning(
                    "organogram.events.callback_error",
                    error=str(exc),
                    kind=event.kind,
                )


__all__ = [
    "EventHub",
    "NavigatorEvent",
    "NavigatorEventKind",
    "Subscriber",
    "UnsubscribeCallback",
]
