"""
Events manager
Lets services publish named events ("dispatch:before_exception",
"db:before_query", ...) to attached listeners
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

Listener = Callable[["Event", Any, Any], Optional[bool]]


@dataclass
class Event:
    """An event being fired"""
    type: str
    name: str
    source: Any = None
    data: Any = None

    @property
    def full_name(self) -> str:
        return f"{self.type}:{self.name}"


class EventsManager:
    """
    Listener registry

    Listeners attached to a type ("db") receive every event of that type;
    listeners attached to a full name ("db:after_query") only that event.
    A listener returning False stops the chain.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}

    def attach(self, event_type: str, listener: Listener) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def detach_all(self, event_type: Optional[str] = None) -> None:
        if event_type is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event_type, None)

    def has_listeners(self, event_type: str) -> bool:
        return bool(self._listeners.get(event_type))

    def get_listeners(self, event_type: str) -> List[Listener]:
        return list(self._listeners.get(event_type, []))

    def fire(self, event_name: str, source: Any = None, data: Any = None) -> bool:
        """
        Fire "<type>:<name>"

        Returns:
            False if a listener stopped the chain, True otherwise
        """
        event_type, _, name = event_name.partition(":")
        if not name:
            raise ValueError(f"Event name must look like 'type:name', got '{event_name}'")

        listeners = self.get_listeners(event_type)
        listeners.extend(self.get_listeners(event_name))
        event = Event(event_type, name, source, data)
        for listener in listeners:
            if listener(event, source, data) is False:
                return False
        return True
