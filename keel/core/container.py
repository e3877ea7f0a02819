"""
Service Container
Maps service names to lazily built instances
"""
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from .errors import NoDefaultContainerError, ServiceInitError, ServiceNotFoundError
from .factory import ServiceFactory
from ..utils.logger import get_logger

logger = get_logger(__name__)


class Lifetime(Enum):
    """
    How long a resolved instance lives

    SHARED: built on first resolution, then cached for the container's lifetime
    TRANSIENT: built on every resolution
    """
    SHARED = "shared"
    TRANSIENT = "transient"


@dataclass
class ServiceEntry:
    """A single registration in the container"""
    name: str
    factory: Optional[Callable[[], Any]] = None
    lifetime: Lifetime = Lifetime.SHARED
    instance: Any = None
    resolved: bool = False
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def fresh(self) -> "ServiceEntry":
        """Copy of this entry with an empty cache (pre-built instances are kept)"""
        if self.factory is None:
            return self
        return ServiceEntry(name=self.name, factory=self.factory, lifetime=self.lifetime)


class ServiceContainer:
    """
    Registry of named services

    Entries hold either a ready-made instance or a factory. Shared entries
    invoke their factory at most once per container; transient entries
    invoke it on every resolve.

    Example:
        container = ServiceContainer()
        container.register("profiler", Profiler)
        container.resolve("profiler") is container.resolve("profiler")  # True
    """

    def __init__(self):
        self._entries: Dict[str, ServiceEntry] = {}
        self._registry_lock = threading.RLock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        factory: Callable[[], Any],
        lifetime: Lifetime = Lifetime.SHARED
    ) -> None:
        """
        Insert or replace the entry for a name

        Replacing an entry drops the container's cached instance for that name.
        Instances already handed out to callers are not affected.

        Args:
            name: Service name
            factory: Zero-argument callable producing the instance
            lifetime: Lifetime.SHARED or Lifetime.TRANSIENT
        """
        if not callable(factory):
            raise TypeError(f"Factory for service '{name}' must be callable")
        lifetime = Lifetime(lifetime)
        with self._registry_lock:
            if name in self._entries:
                logger.debug(f"Replacing service '{name}'")
            self._entries[name] = ServiceEntry(name=name, factory=factory, lifetime=lifetime)

    def register_instance(self, name: str, instance: Any) -> None:
        """Store a ready-made value; resolve(name) always returns it"""
        with self._registry_lock:
            self._entries[name] = ServiceEntry(
                name=name,
                instance=instance,
                lifetime=Lifetime.SHARED,
                resolved=True
            )

    def remove(self, name: str) -> None:
        """Drop a registration"""
        with self._registry_lock:
            if name not in self._entries:
                raise ServiceNotFoundError(name)
            del self._entries[name]

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, name: str) -> Any:
        """
        Resolve a name to an instance

        Raises:
            ServiceNotFoundError: no entry for this name
            ServiceInitError: the factory raised while building the instance
        """
        entry = self._entries.get(name)
        if entry is None:
            raise ServiceNotFoundError(name)

        if entry.lifetime is Lifetime.TRANSIENT:
            return self._build(entry)

        if entry.resolved:
            return entry.instance

        # Double-checked locking: another thread may have built it meanwhile
        with entry._lock:
            if not entry.resolved:
                entry.instance = self._build(entry)
                entry.resolved = True
                logger.debug(f"Service '{name}' initialized")
        return entry.instance

    def _build(self, entry: ServiceEntry) -> Any:
        try:
            if isinstance(entry.factory, ServiceFactory):
                return entry.factory.create(self)
            return entry.factory()
        except ServiceInitError:
            # Already names the innermost failing service
            raise
        except Exception as e:
            raise ServiceInitError(entry.name, e) from e

    def __getitem__(self, name: str) -> Any:
        return self.resolve(name)

    def get(self, name: str) -> Any:
        """Alias for resolve()"""
        return self.resolve(name)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def has(self, name: str) -> bool:
        return name in self._entries

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> List[str]:
        """Registered names in registration order"""
        return list(self._entries)

    def entry(self, name: str) -> ServiceEntry:
        try:
            return self._entries[name]
        except KeyError:
            raise ServiceNotFoundError(name) from None

    def is_resolved(self, name: str) -> bool:
        """True if a shared entry holds a cached instance"""
        return self.entry(name).resolved

    # ------------------------------------------------------------------
    # Scoping
    # ------------------------------------------------------------------

    def scoped(self, names: Iterable[str]) -> "ServiceContainer":
        """
        Build a request-scope view of this container

        Every entry is shared with this container (same cache, same lock)
        except the named ones, which start with an empty cache in the scope.
        Registrations made on the scope do not reach the parent.
        """
        reset = set(names)
        scope = ServiceContainer()
        with self._registry_lock:
            for name, entry in self._entries.items():
                scope._entries[name] = entry.fresh() if name in reset else entry
        return scope

    def __repr__(self) -> str:
        return f"ServiceContainer(services={self.names()})"

    # Static aliases for the process-wide default
    @staticmethod
    def set_default(container: "ServiceContainer") -> None:
        set_default(container)

    @staticmethod
    def get_default() -> "ServiceContainer":
        return get_default()


# ============================================================================
# Process-wide default container
# ============================================================================

_default_container: Optional[ServiceContainer] = None
_default_lock = threading.Lock()


def set_default(container: ServiceContainer) -> None:
    """Publish a container as the process-wide default (single reference swap)"""
    global _default_container
    if not isinstance(container, ServiceContainer):
        raise TypeError("Default container must be a ServiceContainer")
    with _default_lock:
        _default_container = container
    logger.debug("Default container published")


def get_default() -> ServiceContainer:
    """
    Return the process-wide default container

    Raises:
        NoDefaultContainerError: no bootstrap has published one yet
    """
    container = _default_container
    if container is None:
        raise NoDefaultContainerError()
    return container


def clear_default() -> None:
    """Forget the default container (tests, forced rebuilds)"""
    global _default_container
    with _default_lock:
        _default_container = None


# Name used by code outside the bootstrap call chain
get_default_container = get_default
