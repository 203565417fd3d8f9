"""
Brand mention events and emitters

Events are addressed to a per-brand room (``brand-<name>``) so a realtime
layer can fan them out to subscribed clients.
"""

import logging
import threading
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from analytics.spike import SpikeResult

logger = logging.getLogger(__name__)

NEW_MENTIONS = "new-mentions"
SPIKE_ALERT = "spike-alert"


def room_for(brand_name: str) -> str:
    return f"brand-{brand_name}"


@dataclass
class NewMentionsEvent:
    """Fresh mentions were stored for a brand."""

    brand_id: int
    brand_name: str
    count: int
    mentions: List[Dict[str, Any]] = field(default_factory=list)
    spike: Optional[SpikeResult] = None

    name = NEW_MENTIONS

    @property
    def room(self) -> str:
        return room_for(self.brand_name)

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "brand_id": self.brand_id,
            "brand_name": self.brand_name,
            "count": self.count,
            "mentions": list(self.mentions),
        }
        if self.spike is not None:
            payload["spike"] = self.spike.to_dict()
        return payload


@dataclass
class SpikeAlertEvent:
    """Mention volume for a brand jumped past the spike threshold."""

    brand_id: int
    brand_name: str
    type: str
    increase: float
    message: str

    name = SPIKE_ALERT

    @property
    def room(self) -> str:
        return room_for(self.brand_name)

    @classmethod
    def for_mentions(cls, brand_id: int, brand_name: str, spike: SpikeResult) -> "SpikeAlertEvent":
        return cls(
            brand_id=brand_id,
            brand_name=brand_name,
            type="mentions",
            increase=spike.percentage,
            message=f"Mentions increased by {spike.percentage}%",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "brand_id": self.brand_id,
            "brand_name": self.brand_name,
            "type": self.type,
            "increase": self.increase,
            "message": self.message,
        }


class EventEmitter(metaclass=ABCMeta):
    """Delivers events to the room they are addressed to."""

    @abstractmethod
    def emit(self, event) -> None:
        pass


class LoggingEventEmitter(EventEmitter):
    """Default emitter: records every event in the application log."""

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def emit(self, event) -> None:
        self.logger.info(f"[{event.room}] {event.name}: {event.to_dict()}")


class RecordingEventEmitter(EventEmitter):
    """Keeps emitted events in memory for in-process consumers and tests."""

    def __init__(self):
        self._lock = threading.Lock()
        self.events: List[Tuple[str, Any]] = []

    def emit(self, event) -> None:
        with self._lock:
            self.events.append((event.room, event))

    def of_type(self, name: str) -> List[Any]:
        with self._lock:
            return [event for _, event in self.events if event.name == name]

    def clear(self) -> None:
        with self._lock:
            self.events.clear()
