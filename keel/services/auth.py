"""
Authentication state kept in the session
"""
from typing import Optional

from ..core.container import ServiceContainer

AUTH_KEY = "auth_user_id"


class Auth:
    """Login/logout on top of the `session` service"""

    def __init__(self, container: ServiceContainer):
        self.container = container

    @property
    def session(self):
        return self.container.resolve("session")

    def login(self, user_id: str) -> None:
        self.session.set(AUTH_KEY, user_id)

    def logout(self) -> None:
        self.session.remove(AUTH_KEY)

    @property
    def user_id(self) -> Optional[str]:
        return self.session.get(AUTH_KEY)

    def is_logged_in(self) -> bool:
        return self.user_id is not None
