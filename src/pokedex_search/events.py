"""
Event system for Pokédex Search
Keeps the API client free of presentation code: the client emits, the CLI listens
"""

from typing import Dict, List, Callable, Any, Optional
from dataclasses import dataclass
from enum import Enum
import asyncio
from datetime import datetime
from abc import ABC, abstractmethod


class BaseEvent(ABC):
    """Base class for all client events"""

    def __init__(self):
        self.timestamp = datetime.now()

    @property
    @abstractmethod
    def event_type(self) -> str:
        """Return the event type identifier"""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to the dictionary handed to listeners"""
        data = {}
        for key, value in self.__dict__.items():
            if key != 'timestamp' and not key.startswith('_'):
                data[key] = value
        return data


@dataclass
class SearchEvent:
    """Envelope for an emitted event"""
    event_type: str
    timestamp: datetime
    data: Dict[str, Any]


# Search Events

class CardSearchStartedEvent(BaseEvent):
    def __init__(self, query_string: str):
        super().__init__()
        self.query_string = query_string

    @property
    def event_type(self) -> str:
        return "card_search_started"


class CacheHitEvent(BaseEvent):
    def __init__(self, query_string: str, count: int):
        super().__init__()
        self.query_string = query_string
        self.count = count

    @property
    def event_type(self) -> str:
        return "cache_hit"


class CardsFetchedEvent(BaseEvent):
    def __init__(self, query_string: str, count: int, cached: bool):
        super().__init__()
        self.query_string = query_string
        self.count = count
        self.cached = cached

    @property
    def event_type(self) -> str:
        return "cards_fetched"


class CacheResetEvent(BaseEvent):
    def __init__(self, cleared_queries: int):
        super().__init__()
        self.cleared_queries = cleared_queries

    @property
    def event_type(self) -> str:
        return "cache_reset"


# Types Events

class TypesFetchedEvent(BaseEvent):
    def __init__(self, base_url: str, count: int):
        super().__init__()
        self.base_url = base_url
        self.count = count

    @property
    def event_type(self) -> str:
        return "types_fetched"


# Error Events

class ErrorOccurredEvent(BaseEvent):
    def __init__(self, error_type: str, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.error_type = error_type
        self.message = message
        self.context = context

    @property
    def event_type(self) -> str:
        return "error_occurred"


class SearchEventType(str, Enum):
    """Types of events the client can emit"""
    CARD_SEARCH_STARTED = "card_search_started"
    CACHE_HIT = "cache_hit"
    CARDS_FETCHED = "cards_fetched"
    CACHE_RESET = "cache_reset"
    TYPES_FETCHED = "types_fetched"
    ERROR_OCCURRED = "error_occurred"


def _type_key(event_type) -> str:
    if isinstance(event_type, Enum):
        return event_type.value
    return str(event_type)


class SearchEventEmitter:
    """Event emitter for search progress and status updates"""

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {}

    def on(self, event_type: str, callback: Callable[[Dict[str, Any]], None]):
        """Register an event listener"""
        event_type = _type_key(event_type)
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        self._listeners[event_type].append(callback)

    def off(self, event_type: str, callback: Callable):
        """Remove an event listener"""
        event_type = _type_key(event_type)
        if event_type in self._listeners:
            self._listeners[event_type] = [
                cb for cb in self._listeners[event_type] if cb != callback
            ]

    def _envelope(self, event_or_type, data: Optional[Dict[str, Any]]) -> SearchEvent:
        if isinstance(event_or_type, BaseEvent):
            return SearchEvent(
                event_type=event_or_type.event_type,
                timestamp=event_or_type.timestamp,
                data=event_or_type.to_dict()
            )
        return SearchEvent(
            event_type=_type_key(event_or_type),
            timestamp=datetime.now(),
            data=data if data is not None else {}
        )

    def emit(self, event_or_type, data: Optional[Dict[str, Any]] = None):
        """
        Emit an event to all registered listeners

        Args:
            event_or_type: Either a BaseEvent instance or a SearchEventType/string
            data: Optional data dict, used when emitting by type
        """
        event = self._envelope(event_or_type, data)

        for callback in list(self._listeners.get(event.event_type, [])):
            try:
                callback(event.data)
            except Exception as e:
                # A broken listener must not break the search
                print(f"Event listener error: {e}")

    async def emit_async(self, event_or_type, data: Optional[Dict[str, Any]] = None):
        """
        Emit an event asynchronously, awaiting coroutine listeners

        Args:
            event_or_type: Either a BaseEvent instance or a SearchEventType/string
            data: Optional data dict, used when emitting by type
        """
        event = self._envelope(event_or_type, data)

        for callback in list(self._listeners.get(event.event_type, [])):
            try:
                if asyncio.iscoroutinefunction(callback):
                    await callback(event.data)
                else:
                    callback(event.data)
            except Exception as e:
                print(f"Event listener error: {e}")

    def clear_listeners(self, event_type: Optional[str] = None):
        """Clear all listeners for a specific event type, or all listeners"""
        if event_type:
            self._listeners[_type_key(event_type)] = []
        else:
            self._listeners.clear()
