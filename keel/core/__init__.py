"""
Core service container and bootstrap module
Provides layered configuration, lazy service resolution, ordered service
initialization and the error dispatch policy
"""
from .config import Config
from .config_store import ConfigNode
from .container import (
    Lifetime,
    ServiceContainer,
    clear_default,
    get_default,
    get_default_container,
    set_default,
)
from .errors import (
    ConfigLoadError,
    ConfigMergeError,
    InvalidParamsError,
    KeelError,
    NoDefaultContainerError,
    ServiceInitError,
    ServiceNotFoundError,
)
from .factory import CONTAINER, ServiceFactory
from .bootstrap import Bootstrap, CliBootstrap, WebBootstrap, get_container
from .error_policy import ErrorCategory, ErrorDispatchPolicy, ErrorRoute, ForwardTarget

__all__ = [
    "Bootstrap",
    "CONTAINER",
    "CliBootstrap",
    "Config",
    "ConfigLoadError",
    "ConfigMergeError",
    "ConfigNode",
    "ErrorCategory",
    "ErrorDispatchPolicy",
    "ErrorRoute",
    "ForwardTarget",
    "InvalidParamsError",
    "KeelError",
    "Lifetime",
    "NoDefaultContainerError",
    "ServiceContainer",
    "ServiceFactory",
    "ServiceInitError",
    "ServiceNotFoundError",
    "WebBootstrap",
    "clear_default",
    "get_container",
    "get_default",
    "get_default_container",
    "set_default",
]
