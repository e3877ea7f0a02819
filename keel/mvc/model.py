"""
Model base class
Gives models access to services by name
"""
from typing import Any, Dict, List, Optional

from ..core.container import ServiceContainer, get_default


class BaseModel:
    """
    Base for application models

    Instances resolve services through their own container when they have
    one, otherwise through the process-wide default. Class-level helpers
    always use the default.
    """

    # Service names of behaviors applied by touch(), e.g. ["behavior_timestamp"]
    behaviors: List[str] = []

    def __init__(self, container: Optional[ServiceContainer] = None, **fields: Any):
        self._container = container
        self.__dict__.update(fields)

    def get_di(self) -> ServiceContainer:
        return self._container if self._container is not None else get_default()

    def get_service(self, service: str) -> Any:
        return self.get_di().resolve(service)

    @classmethod
    def get_static_service(cls, service: str) -> Any:
        return get_default().resolve(service)

    @classmethod
    def get_static_di(cls) -> ServiceContainer:
        return get_default()

    def touch(self) -> "BaseModel":
        """Apply every configured behavior to this model"""
        for name in self.behaviors:
            self.get_service(name).apply(self)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in self.__dict__.items() if not key.startswith("_")}
