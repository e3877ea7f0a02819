"""
Application controllers (namespace "controllers")
"""
from .error import ErrorController
from .index import IndexController

__all__ = ["ErrorController", "IndexController"]
