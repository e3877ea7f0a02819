"""
Factory records for the service container

A ServiceFactory is the inspectable form of "a closure over config and
other services": the callable that builds the instance plus the named
values it was given at registration time.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional


class _ContainerRef:
    """Placeholder for the container performing the resolution"""

    def __repr__(self) -> str:
        return "<resolving container>"


# Use as a dependency value to receive the resolving container at build time.
# Request scopes resolve with themselves, not with the container that
# registered the factory.
CONTAINER = _ContainerRef()


@dataclass(frozen=True)
class ServiceFactory:
    """
    Zero-argument producer of a service instance

    Example:
        factory = ServiceFactory(UrlResolver, {"base_uri": "/", "static_base_uri": "/static/"})
        factory()  # UrlResolver(base_uri="/", static_base_uri="/static/")
    """
    build: Callable[..., Any]
    deps: Dict[str, Any] = field(default_factory=dict)

    def create(self, container: Optional[Any] = None) -> Any:
        """Build the instance, substituting CONTAINER placeholders"""
        kwargs = {}
        for key, value in self.deps.items():
            if value is CONTAINER:
                if container is None:
                    raise ValueError(f"Factory {self.name} needs a container for '{key}'")
                value = container
            kwargs[key] = value
        return self.build(**kwargs)

    def __call__(self) -> Any:
        return self.create()

    @property
    def needs_container(self) -> bool:
        return any(value is CONTAINER for value in self.deps.values())

    @property
    def name(self) -> str:
        return getattr(self.build, "__qualname__", repr(self.build))

    def __repr__(self) -> str:
        return f"ServiceFactory({self.name}, deps={sorted(self.deps)})"
