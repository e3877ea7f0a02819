"""
Bootstrap module for Keel
Builds the service container: config, namespace loader, then each listed
service's initializer in order, and finally publishes the container as the
process-wide default.
"""
import threading
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Tuple

from .config import Config
from .config_store import ConfigNode, load, merge
from .container import ServiceContainer, clear_default, set_default
from .errors import UnknownInitializerError
from .initializers import INITIALIZERS, Initializer
from .loader import NamespaceLoader
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Services rebuilt for every HTTP request (see ServiceContainer.scoped)
REQUEST_SCOPED: Tuple[str, ...] = ("cookies", "session", "auth", "dispatcher")


class Bootstrap:
    """
    Bootstrap sequencer

    Example:
        container = Bootstrap(["util", "cache"]).run()
        container.resolve("cache")

    Subclasses fix the service list for an entry point.
    """

    services: Sequence[str] = ()

    def __init__(
        self,
        services: Optional[Sequence[str]] = None,
        *,
        config_path: Optional[str] = None,
        local_config_path: Optional[str] = None,
        initializers: Optional[Mapping[str, Initializer]] = None,
        publish: bool = True
    ):
        """
        Args:
            services: Service names to initialize, in order (defaults to the class list)
            config_path: Base config JSON (defaults to Config.CONFIG_PATH)
            local_config_path: Local override JSON (defaults to Config.LOCAL_CONFIG_PATH)
            initializers: Extra or replacement initializers, merged over the static table
            publish: Publish the finished container as the process-wide default
        """
        self.services = list(services) if services is not None else list(self.services)
        self.config_path = config_path or Config.CONFIG_PATH
        self.local_config_path = local_config_path or Config.LOCAL_CONFIG_PATH
        self.initializers: Dict[str, Initializer] = dict(INITIALIZERS)
        if initializers:
            self.initializers.update(initializers)
        self.publish = publish
        self.container: Optional[ServiceContainer] = None

    def run(self, service_names: Optional[Sequence[str]] = None) -> ServiceContainer:
        """
        Bootstrap the application

        Any error aborts the run and propagates unchanged; the partially
        built container is never published.

        Returns:
            The populated container
        """
        names = list(service_names) if service_names is not None else list(self.services)
        logger.debug(f"Bootstrapping services: {', '.join(names) or '(none)'}")

        container = ServiceContainer()
        self.init_config(container)
        self.init_loader(container)

        for name in names:
            initializer = self.initializers.get(name)
            if initializer is None:
                raise UnknownInitializerError(name)
            initializer(container)
            logger.debug(f"Initialized service '{name}'")

        if self.publish:
            set_default(container)
        self.container = container
        logger.info(f"Bootstrap complete with {len(container)} services")
        return container

    def init_config(self, container: ServiceContainer) -> ConfigNode:
        """Load and merge the config files, register them as `config`"""
        config = load(self.config_path, self.local_config_path)
        # paths.app_path defaults to the directory above etc/
        defaults = {"paths": {"app_path": str(Path(self.config_path).resolve().parent.parent)}}
        config = merge(defaults, config)
        container.register_instance("config", config)
        return config

    def init_loader(self, container: ServiceContainer) -> NamespaceLoader:
        """Register application namespaces, register the loader as `loader`"""
        config = container.resolve("config")
        loader = NamespaceLoader(config.path("loader.namespaces", {}))
        loader.register()
        container.register_instance("loader", loader)
        return loader


class WebBootstrap(Bootstrap):
    """Services for the HTTP front controller"""
    services = (
        "events_manager",
        "router",
        "view",
        "dispatcher",
        "url",
        "cookies",
        "session",
        "profiler",
        "db",
        "behaviors",
        "data_cache",
        "util",
        "auth",
        "cache",
        "validate",
    )


class CliBootstrap(Bootstrap):
    """Services for command line tasks"""
    services = (
        "events_manager",
        "profiler",
        "db",
        "behaviors",
        "data_cache",
        "util",
        "cache",
        "validate",
    )


# Cache containers by service list to avoid rebuilding expensive services
_container_cache: Dict[Tuple[str, ...], ServiceContainer] = {}
_container_lock = threading.Lock()


def get_container(
    services: Optional[Sequence[str]] = None,
    *,
    force: bool = False,
    bootstrap_class=WebBootstrap
) -> ServiceContainer:
    """
    Build or retrieve a cached, published container

    Args:
        services: Service names (defaults to bootstrap_class.services)
        force: Rebuild even if cached
        bootstrap_class: Bootstrap subclass providing defaults

    Returns:
        ServiceContainer, also published as the process-wide default
    """
    names = tuple(services) if services is not None else tuple(bootstrap_class.services)

    with _container_lock:
        if not force and names in _container_cache:
            logger.debug(f"Returning cached container for {names}")
            container = _container_cache[names]
            set_default(container)
            return container

        container = bootstrap_class(names).run()
        _container_cache[names] = container
        logger.info(f"Container built and cached for {len(names)} services")
        return container


def clear_cache():
    """Clear the container cache and the default container"""
    with _container_lock:
        _container_cache.clear()
    clear_default()
    logger.debug("Container cache cleared")
