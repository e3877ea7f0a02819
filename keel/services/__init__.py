"""
Application services
"""
from .auth import Auth
from .cache import Cache
from .session import Session
from .util import Util
from .validate import Validate

__all__ = ["Auth", "Cache", "Session", "Util", "Validate"]
