"""
Dispatcher
Runs a controller action and, when it fails, forwards once to the error
handler chosen by the error dispatch policy
"""
import inspect
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Union

from ..core.error_policy import ErrorDispatchPolicy, ForwardTarget
from ..core.errors import ActionNotFoundError, HandlerNotFoundError, InvalidParamsError
from ..core.loader import NamespaceLoader
from ..utils.logger import get_logger
from .events import EventsManager

logger = get_logger(__name__)

_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")


class DispatchState(Enum):
    """
    DISPATCHING: running the requested target
    FORWARDING: the request failed and a forward target was set; terminal
    for this attempt
    """
    DISPATCHING = "dispatching"
    FORWARDING = "forwarding"


@dataclass
class DispatchResult:
    """Outcome of one dispatch cycle"""
    target: ForwardTarget
    value: Any
    forwarded: bool = False
    error: Optional[BaseException] = None


def camelize(name: str) -> str:
    """'user-profile' / 'user_profile' -> 'UserProfile'"""
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[-_]", name) if part)


class Dispatcher:
    """
    Resolves `<Handler>Controller.<action>_action` through the namespace
    loader and calls it with the target params.

    On an exception the dispatcher fires "dispatch:before_exception". A
    listener may call forward(); the forwarded target then runs once,
    outside any guard, so a failure in the error handler propagates.
    """

    def __init__(
        self,
        loader: NamespaceLoader,
        container: Any = None,
        events_manager: Optional[EventsManager] = None,
        default_namespace: str = "controllers",
        default_handler: str = "index",
        default_action: str = "index"
    ):
        self.loader = loader
        self.container = container
        self._events_manager = events_manager
        self.default_namespace = default_namespace
        self.default_handler = default_handler
        self.default_action = default_action

        self.state = DispatchState.DISPATCHING
        self.active_target: Optional[ForwardTarget] = None
        self.last_error: Optional[BaseException] = None
        self._pending: Optional[ForwardTarget] = None

    def get_events_manager(self) -> Optional[EventsManager]:
        return self._events_manager

    def set_events_manager(self, events_manager: EventsManager) -> None:
        self._events_manager = events_manager

    def forward(self, target: Union[ForwardTarget, Mapping[str, Any]]) -> None:
        """Switch to FORWARDING with the given target"""
        if not isinstance(target, ForwardTarget):
            target = ForwardTarget(
                namespace=target.get("namespace", self.default_namespace),
                handler=target.get("controller", self.default_handler),
                action=target.get("action", self.default_action),
                params=tuple(target.get("params", ()))
            )
        self._pending = target
        self.state = DispatchState.FORWARDING

    def dispatch(
        self,
        handler: Optional[str] = None,
        action: Optional[str] = None,
        params: Optional[Sequence[Any]] = None,
        namespace: Optional[str] = None
    ) -> DispatchResult:
        """
        Dispatch one request target

        Returns:
            DispatchResult for the requested target, or for the forward target
            if the request failed and a listener forwarded it

        Raises:
            The original error if no listener forwarded it, or any error
            raised by the forwarded handler
        """
        target = ForwardTarget(
            namespace=namespace or self.default_namespace,
            handler=handler or self.default_handler,
            action=action or self.default_action,
            params=tuple(params or ())
        )
        self.state = DispatchState.DISPATCHING
        self._pending = None
        self.last_error = None

        try:
            value = self._execute(target)
        except Exception as e:
            if self._events_manager is not None:
                self._events_manager.fire("dispatch:before_exception", self, e)
            if self._pending is None:
                raise
            error = e
        else:
            return DispatchResult(target, value)

        forward = self._pending
        self._pending = None
        self.last_error = error
        logger.error(
            f"Dispatch of {target.handler}/{target.action} failed, forwarding to "
            f"{forward.handler}/{forward.action}",
            exc_info=error
        )
        value = self._execute(forward)
        return DispatchResult(forward, value, forwarded=True, error=error)

    def _execute(self, target: ForwardTarget) -> Any:
        if not _NAME_RE.match(target.handler):
            raise HandlerNotFoundError(target.namespace, target.handler)

        class_name = f"{camelize(target.handler)}Controller"
        handler_class = self.loader.get_class(
            target.namespace,
            class_name,
            module_hint=target.handler.replace("-", "_")
        )
        if handler_class is None:
            raise HandlerNotFoundError(target.namespace, target.handler)

        method_name = f"{target.action.replace('-', '_')}_action"
        if not _NAME_RE.match(target.action) or not callable(getattr(handler_class, method_name, None)):
            raise ActionNotFoundError(class_name, target.action)

        self.active_target = target
        controller = handler_class(container=self.container, dispatcher=self)
        method = getattr(controller, method_name)
        try:
            inspect.signature(method).bind(*target.params)
        except TypeError as e:
            raise InvalidParamsError(class_name, target.action, str(e)) from None
        return method(*target.params)


def attach_error_policy(events_manager: EventsManager, policy: ErrorDispatchPolicy):
    """
    Listen for dispatch exceptions and forward them according to the policy

    Returns:
        The attached listener
    """
    def before_exception(event, dispatcher, error):
        dispatcher.forward(policy.classify_and_route(error))
        return False

    events_manager.attach("dispatch:before_exception", before_exception)
    return before_exception
