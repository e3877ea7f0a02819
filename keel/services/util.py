"""
General purpose helpers exposed as the `util` service
"""
import re
import secrets
import string
import unicodedata


class Util:
    """String helpers shared by controllers and views"""

    def slugify(self, text: str, separator: str = "-") -> str:
        normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
        slug = re.sub(r"[^a-zA-Z0-9]+", separator, normalized).strip(separator)
        return slug.lower()

    def truncate(self, text: str, length: int, suffix: str = "...") -> str:
        if len(text) <= length:
            return text
        return text[:max(length - len(suffix), 0)].rstrip() + suffix

    def random_string(self, length: int = 16, alphabet: str = string.ascii_letters + string.digits) -> str:
        return "".join(secrets.choice(alphabet) for _ in range(length))
