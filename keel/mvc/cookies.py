"""
Response cookie bag
"""
from dataclasses import dataclass
from typing import Dict, Iterator, Optional


@dataclass
class Cookie:
    name: str
    value: str
    max_age: Optional[int] = None
    path: str = "/"
    secure: bool = False
    httponly: bool = True


class Cookies:
    """Collects cookies to be written on the response"""

    def __init__(self, use_encryption: bool = False):
        self.use_encryption = use_encryption
        self._cookies: Dict[str, Cookie] = {}
        self._deleted: set = set()

    def set(self, name: str, value: str, max_age: Optional[int] = None, **options) -> None:
        if self.use_encryption:
            raise NotImplementedError("Cookie encryption is not supported")
        self._cookies[name] = Cookie(name, value, max_age, **options)
        self._deleted.discard(name)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        cookie = self._cookies.get(name)
        return cookie.value if cookie else default

    def has(self, name: str) -> bool:
        return name in self._cookies

    def delete(self, name: str) -> None:
        self._cookies.pop(name, None)
        self._deleted.add(name)

    def items(self) -> Iterator[Cookie]:
        return iter(list(self._cookies.values()))

    @property
    def deleted(self) -> set:
        return set(self._deleted)
