"""
Controller base class
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ..core.container import ServiceContainer, get_default


@dataclass
class ActionResult:
    """What an action returns when it needs more than a plain body"""
    body: Any
    status_code: int = 200
    media_type: str = "text/html"
    headers: Dict[str, str] = field(default_factory=dict)


class Controller:
    """
    Base for dispatchable controllers

    Actions are methods named `<action>_action`. The dispatcher passes the
    request-scope container in; controllers built outside a dispatch fall
    back to the process-wide default container.
    """

    def __init__(self, container: Optional[ServiceContainer] = None, dispatcher: Any = None):
        self.container = container
        self.dispatcher = dispatcher
        self.initialize()

    def initialize(self) -> None:
        """Hook run after construction"""
        pass

    def get_di(self) -> ServiceContainer:
        return self.container if self.container is not None else get_default()

    def get_service(self, name: str) -> Any:
        return self.get_di().resolve(name)

    @property
    def view(self):
        return self.get_service("view")

    def render(
        self,
        template: str,
        params: Optional[Mapping[str, Any]] = None,
        status_code: int = 200
    ) -> ActionResult:
        return ActionResult(self.view.render(template, params), status_code=status_code)
