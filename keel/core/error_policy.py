"""
Error dispatch policy

Declarative table mapping error categories to a forward target. The
dispatcher consults it when request handling raises, then re-enters
dispatch at the returned target.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .errors import ActionNotFoundError, DispatchError, HandlerNotFoundError


class ErrorCategory(Enum):
    """Closed set of error categories understood by the policy"""
    HANDLER_NOT_FOUND = "handler_not_found"
    ACTION_NOT_FOUND = "action_not_found"
    OTHER = "other"


def classify(error: BaseException) -> ErrorCategory:
    """
    Put an error into one of the policy categories

    Known dispatcher error types are matched first, then other DispatchErrors
    by their code. Everything else is OTHER, even when it has a `code`
    attribute of its own.
    """
    if isinstance(error, HandlerNotFoundError):
        return ErrorCategory.HANDLER_NOT_FOUND
    if isinstance(error, ActionNotFoundError):
        return ErrorCategory.ACTION_NOT_FOUND
    if not isinstance(error, DispatchError):
        return ErrorCategory.OTHER

    code = error.code
    if code == DispatchError.EXCEPTION_HANDLER_NOT_FOUND:
        return ErrorCategory.HANDLER_NOT_FOUND
    if code == DispatchError.EXCEPTION_ACTION_NOT_FOUND:
        return ErrorCategory.ACTION_NOT_FOUND
    return ErrorCategory.OTHER


@dataclass(frozen=True)
class ForwardTarget:
    """Where dispatch re-enters after an error"""
    namespace: str
    handler: str
    action: str
    params: Tuple[Any, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "namespace": self.namespace,
            "controller": self.handler,
            "action": self.action,
            "params": list(self.params),
        }


@dataclass(frozen=True)
class ErrorRoute:
    """
    One rule of the policy

    pass_error appends the original error to params so the target can
    render diagnostics.
    """
    category: ErrorCategory
    namespace: str
    handler: str
    action: str
    params: Tuple[Any, ...] = field(default=())
    pass_error: bool = False

    def target_for(self, error: BaseException) -> ForwardTarget:
        params = tuple(self.params)
        if self.pass_error:
            params = params + (error,)
        return ForwardTarget(self.namespace, self.handler, self.action, params)


class ErrorDispatchPolicy:
    """
    Ordered, total rule table

    Rules are evaluated in the given order; the table must end with exactly
    one OTHER rule, so every error matches something.
    """

    def __init__(self, routes: Sequence[ErrorRoute]):
        routes = list(routes)
        catch_alls = [r for r in routes if r.category is ErrorCategory.OTHER]
        if len(catch_alls) != 1:
            raise ValueError("Error policy needs exactly one catch-all (OTHER) route")
        if routes[-1].category is not ErrorCategory.OTHER:
            raise ValueError("The catch-all (OTHER) route must be last")
        self._routes: List[ErrorRoute] = routes

    @property
    def routes(self) -> List[ErrorRoute]:
        return list(self._routes)

    def route_for(self, category: ErrorCategory) -> ErrorRoute:
        for route in self._routes:
            if route.category is category or route.category is ErrorCategory.OTHER:
                return route
        # unreachable: the catch-all is always last
        return self._routes[-1]

    def classify_and_route(self, error: BaseException) -> ForwardTarget:
        """Classify an error and return the target dispatch should forward to"""
        return self.route_for(classify(error)).target_for(error)


def default_error_policy(namespace: str = "controllers", handler: str = "error") -> ErrorDispatchPolicy:
    """
    Not-found errors go to show404; everything else goes to show500 with
    params (response_mode, error).
    """
    return ErrorDispatchPolicy([
        ErrorRoute(ErrorCategory.HANDLER_NOT_FOUND, namespace, handler, "show404"),
        ErrorRoute(ErrorCategory.ACTION_NOT_FOUND, namespace, handler, "show404"),
        ErrorRoute(ErrorCategory.OTHER, namespace, handler, "show500", params=(None,), pass_error=True),
    ])


def policy_from_config(config: Optional[Any], namespace: str = "controllers") -> ErrorDispatchPolicy:
    """
    Build the default policy, letting config override the error handler

    Reads `dispatcher.error_handler` ({"namespace": ..., "controller": ...}).
    """
    if config is None:
        return default_error_policy(namespace)
    overrides = config.get("dispatcher", {}).get("error_handler", {}) if hasattr(config, "get") else {}
    return default_error_policy(
        namespace=overrides.get("namespace", namespace),
        handler=overrides.get("controller", "error")
    )
