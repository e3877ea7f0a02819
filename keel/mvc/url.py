"""
URL resolver
"""


class UrlResolver:
    """Builds application and static asset URLs from configured base URIs"""

    def __init__(self, base_uri: str = "/", static_base_uri: str = "/"):
        self.base_uri = base_uri
        self.static_base_uri = static_base_uri

    @staticmethod
    def _join(base: str, path: str) -> str:
        return base.rstrip("/") + "/" + path.lstrip("/")

    def get(self, path: str = "") -> str:
        return self._join(self.base_uri, path)

    def get_static(self, path: str = "") -> str:
        return self._join(self.static_base_uri, path)
