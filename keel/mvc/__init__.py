"""
Dispatch layer collaborators: dispatcher, router, view, events, controllers and models
"""
from .behaviors import TimestampBehavior
from .controller import ActionResult, Controller
from .cookies import Cookies
from .dispatcher import DispatchResult, DispatchState, Dispatcher, attach_error_policy
from .events import Event, EventsManager
from .model import BaseModel
from .router import Route, RouteMatch, Router
from .url import UrlResolver
from .view import View

__all__ = [
    "ActionResult",
    "BaseModel",
    "Controller",
    "Cookies",
    "DispatchResult",
    "DispatchState",
    "Dispatcher",
    "Event",
    "EventsManager",
    "Route",
    "RouteMatch",
    "Router",
    "TimestampBehavior",
    "UrlResolver",
    "View",
    "attach_error_policy",
]
