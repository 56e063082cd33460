from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable

logger = logging.getLogger(__name__)

# Inbound
EXPLORER_MOVED = "explorer-moved"
EDGE_UNLOCKED = "edge-unlocked"
EDGE_STATE_CHANGED = "edge-state-changed"
GATE_CHANGED = "gate-changed"
NODE_BLOCKED = "node-blocked"
NODE_REPAIRED = "node-repaired"
ROUND_RESET = "round-reset"
PAUSE = "pause"
RESUME = "resume"
RESOLVE_ENCOUNTER = "resolve-encounter"

# Outbound
PURSUER_POSITION_CHANGED = "pursuer-position-changed"
PURSUER_HACKING_STARTED = "pursuer-hacking-started"
PURSUER_HACKING_COMPLETED = "pursuer-hacking-completed"
PURSUER_CAUGHT_EXPLORER = "pursuer-caught-explorer"
VISIBILITY_CHANGED = "visibility-changed"
ROUND_STARTED = "round-started"


@dataclass
class Event:
    kind: str
    payload: dict = field(default_factory=dict)

    def __getitem__(self, key):
        return self.payload[key]


@dataclass
class Subscription:
    handler: Callable[[Event], None]
    kinds: frozenset | None = None


class EventBus:
    """Synchronous dispatch in registration order, no batching."""

    def __init__(self):
        self.subscriptions: list[Subscription] = []

    def subscribe(self, handler: Callable[[Event], None], *kinds: str) -> Subscription:
        sub = Subscription(handler=handler, kinds=frozenset(kinds) if kinds else None)
        self.subscriptions.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        if sub in self.subscriptions:
            self.subscriptions.remove(sub)

    def clear(self) -> None:
        self.subscriptions.clear()

    def emit(self, kind: str, **payload) -> Event:
        event = Event(kind=kind, payload=payload)
        logger.debug("emit %s %s", kind, payload)
        for sub in list(self.subscriptions):
            if sub.kinds is not None and kind not in sub.kinds:
                continue
            sub.handler(event)
        return event


class EventRecorder:
    """Subscriber that keeps every event it sees, for viewers and tests."""

    def __init__(self, bus: EventBus, *kinds: str):
        self.events: list[Event] = []
        self.subscription = bus.subscribe(self.events.append, *kinds)

    def of_kind(self, kind: str) -> list[Event]:
        return [ev for ev in self.events if ev.kind == kind]

    def clear(self) -> None:
        self.events.clear()
