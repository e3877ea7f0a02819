"""
Exception taxonomy for Keel

Bootstrap-time errors (config, initializer and eager resolution failures)
are fatal for the entry point. Dispatch errors are classified by the
error dispatch policy and turned into a forward.
"""
from typing import Optional


class KeelError(Exception):
    """Base class for every error raised by Keel"""
    pass


# ============================================================================
# Configuration
# ============================================================================

class ConfigError(KeelError):
    """Base class for configuration errors"""
    pass


class ConfigLoadError(ConfigError):
    """A config source could not be read or parsed into a tree"""

    def __init__(self, path: str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot load config '{self.path}': {reason}")


class ConfigMergeError(ConfigError):
    """Base and override disagree on the kind of node at the same path"""

    def __init__(self, path: str, base_kind: str, override_kind: str):
        self.path = path
        self.base_kind = base_kind
        self.override_kind = override_kind
        super().__init__(
            f"Cannot merge config at '{path}': base is {base_kind}, override is {override_kind}"
        )


# ============================================================================
# Service container
# ============================================================================

class ServiceNotFoundError(KeelError, KeyError):
    """Resolution of a name that was never registered"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Service '{self.name}' is not registered"


class ServiceInitError(KeelError):
    """A service factory raised while building its instance"""

    def __init__(self, name: str, cause: BaseException):
        self.name = name
        self.cause = cause
        super().__init__(f"Service '{name}' failed to initialize: {type(cause).__name__}: {cause}")


class NoDefaultContainerError(KeelError):
    """The process-wide default container was requested before any bootstrap published one"""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "No default container has been set; run a bootstrap first")


# ============================================================================
# Bootstrap
# ============================================================================

class BootstrapError(KeelError):
    """Base class for bootstrap sequencing errors"""
    pass


class UnknownInitializerError(BootstrapError):
    """A service name in the bootstrap list has no initializer"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No initializer registered for service '{name}'")


# ============================================================================
# Dispatch
# ============================================================================

class DispatchError(KeelError):
    """Base class for errors raised by the dispatcher itself"""

    EXCEPTION_HANDLER_NOT_FOUND = 2
    EXCEPTION_INVALID_PARAMS = 4
    EXCEPTION_ACTION_NOT_FOUND = 5

    code: Optional[int] = None


class HandlerNotFoundError(DispatchError):
    """The requested controller does not exist in the namespace"""

    code = DispatchError.EXCEPTION_HANDLER_NOT_FOUND

    def __init__(self, namespace: str, handler: str):
        self.namespace = namespace
        self.handler = handler
        super().__init__(f"Handler '{handler}' was not found in namespace '{namespace}'")


class ActionNotFoundError(DispatchError):
    """The controller exists but has no such action"""

    code = DispatchError.EXCEPTION_ACTION_NOT_FOUND

    def __init__(self, handler: str, action: str):
        self.handler = handler
        self.action = action
        super().__init__(f"Action '{action}' was not found on handler '{handler}'")


class InvalidParamsError(DispatchError):
    """The action does not accept the params it was dispatched with"""

    code = DispatchError.EXCEPTION_INVALID_PARAMS

    def __init__(self, handler: str, action: str, reason: str):
        self.handler = handler
        self.action = action
        super().__init__(f"Invalid params for action '{action}' on handler '{handler}': {reason}")
