"""
Namespace loader
Maps logical namespaces (controllers, models, lib, ...) to Python packages
"""
import importlib
import importlib.util
from typing import Any, Dict, Mapping, Optional

from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_NAMESPACES: Dict[str, str] = {
    "controllers": "keel.controllers",
    "models": "keel.mvc",
    "lib": "keel.services",
    "storage": "keel.storage",
}


class NamespaceLoader:
    """
    Resolves classes by logical namespace and name

    A class `IndexController` in namespace `controllers` is looked up in the
    submodule `<package>.index` first, then on the package itself.
    """

    def __init__(self, namespaces: Optional[Mapping[str, str]] = None):
        self._namespaces: Dict[str, str] = dict(DEFAULT_NAMESPACES)
        if namespaces:
            self._namespaces.update(namespaces)
        self._registered = False

    @property
    def namespaces(self) -> Dict[str, str]:
        return dict(self._namespaces)

    @property
    def registered(self) -> bool:
        return self._registered

    def register_namespaces(self, namespaces: Mapping[str, str]) -> "NamespaceLoader":
        self._namespaces.update(namespaces)
        return self

    def register(self) -> "NamespaceLoader":
        """Check every namespace points at an importable package and activate the loader"""
        for namespace, package in self._namespaces.items():
            try:
                spec = importlib.util.find_spec(package)
            except ModuleNotFoundError:
                spec = None
            if spec is None:
                raise ImportError(f"Namespace '{namespace}' points at missing package '{package}'")
            logger.debug(f"Namespace {namespace} -> {package}")
        self._registered = True
        return self

    def package_for(self, namespace: str) -> Optional[str]:
        return self._namespaces.get(namespace)

    def get_class(self, namespace: str, class_name: str, module_hint: Optional[str] = None) -> Optional[Any]:
        """
        Find a class in a namespace

        Args:
            namespace: Logical namespace, e.g. "controllers"
            class_name: Class name, e.g. "IndexController"
            module_hint: Submodule to try first, e.g. "index"

        Returns:
            The class, or None if the namespace or class does not exist
        """
        if not self._registered:
            raise RuntimeError("NamespaceLoader.register() must run before classes are loaded")

        package = self._namespaces.get(namespace)
        if package is None:
            return None

        candidates = [f"{package}.{module_hint}"] if module_hint else []
        candidates.append(package)
        for module_name in candidates:
            try:
                module = importlib.import_module(module_name)
            except ModuleNotFoundError as e:
                # Only swallow the miss of the candidate itself, not broken imports inside it
                if e.name is not None and module_name.startswith(e.name):
                    continue
                raise
            cls = getattr(module, class_name, None)
            if isinstance(cls, type):
                return cls
        return None
