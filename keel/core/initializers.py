"""
Service initializers
Static table mapping a service name to the function that registers it

Each initializer receives the container being bootstrapped. Values read
with container.resolve() inside an initializer are resolved eagerly, so the
service providing them must appear earlier in the bootstrap list. Values
resolved inside a factory are deferred to first use.
"""
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .container import Lifetime, ServiceContainer
from .factory import CONTAINER, ServiceFactory
from ..utils.logger import get_logger

logger = get_logger(__name__)

Initializer = Callable[[ServiceContainer], None]

# Registry mapping service name -> initializer
INITIALIZERS: Dict[str, Initializer] = {}


def initializer(name: str):
    """
    Register a function as the initializer for a service name

    Args:
        name: Service name as it appears in bootstrap lists (e.g., "db")
    """
    def decorator(func: Initializer) -> Initializer:
        INITIALIZERS[name] = func
        return func
    return decorator


def get_initializer(name: str) -> Optional[Initializer]:
    return INITIALIZERS.get(name)


def app_path(config, relative: str) -> str:
    """Resolve a configured path against paths.app_path"""
    path = Path(relative)
    if path.is_absolute():
        return str(path)
    return str(Path(config.path("paths.app_path", ".")) / path)


def make_store(adapter: str, directory: str, prefix: str = "", lifetime: int = 0):
    """Build the key/value backend named by a config adapter value"""
    from ..storage.local_json import JsonFileStore
    from ..storage.memory import MemoryStore

    if adapter == "memory":
        return MemoryStore(lifetime=lifetime)
    if adapter in ("file", "files"):
        return JsonFileStore(directory, prefix=prefix, lifetime=lifetime)
    raise ValueError(f"Unsupported storage adapter '{adapter}'")


# ============================================================================
# Dispatch layer
# ============================================================================

@initializer("events_manager")
def init_events_manager(container: ServiceContainer) -> None:
    from ..mvc.events import EventsManager

    container.register("events_manager", ServiceFactory(EventsManager))


def _build_router(config) -> Any:
    from ..mvc.router import Router

    return Router(
        routes=config.get("routes", ()),
        default_handler=config.path("dispatcher.default_controller", "index"),
        default_action=config.path("dispatcher.default_action", "index")
    )


@initializer("router")
def init_router(container: ServiceContainer) -> None:
    config = container.resolve("config")
    container.register("router", ServiceFactory(_build_router, {"config": config}))


@initializer("view")
def init_view(container: ServiceContainer) -> None:
    from ..mvc.view import View

    config = container.resolve("config")
    container.register("view", ServiceFactory(View, {
        "views_dir": app_path(config, config.path("paths.views_dir", "views")),
    }))


def _build_dispatcher(loader, events_manager, config, container) -> Any:
    from ..mvc.dispatcher import Dispatcher

    return Dispatcher(
        loader,
        container=container,
        events_manager=events_manager,
        default_namespace=config.path("dispatcher.default_namespace", "controllers"),
        default_handler=config.path("dispatcher.default_controller", "index"),
        default_action=config.path("dispatcher.default_action", "index")
    )


@initializer("dispatcher")
def init_dispatcher(container: ServiceContainer) -> None:
    from .error_policy import policy_from_config
    from ..mvc.dispatcher import attach_error_policy

    events_manager = container.resolve("events_manager")
    loader = container.resolve("loader")
    config = container.resolve("config")

    # Attached once here; dispatchers are rebuilt per request scope
    policy = policy_from_config(config, config.path("dispatcher.default_namespace", "controllers"))
    attach_error_policy(events_manager, policy)

    container.register("dispatcher", ServiceFactory(_build_dispatcher, {
        "loader": loader,
        "events_manager": events_manager,
        "config": config,
        "container": CONTAINER,
    }))


@initializer("url")
def init_url(container: ServiceContainer) -> None:
    from ..mvc.url import UrlResolver

    config = container.resolve("config")
    container.register("url", ServiceFactory(UrlResolver, {
        "base_uri": config.path("paths.base_uri", "/"),
        "static_base_uri": config.path("paths.asset_uri", "/"),
    }))


@initializer("cookies")
def init_cookies(container: ServiceContainer) -> None:
    from ..mvc.cookies import Cookies

    config = container.resolve("config")
    container.register("cookies", ServiceFactory(Cookies, {
        "use_encryption": bool(config.path("cookies.use_encryption", False)),
    }))


# ============================================================================
# Session
# ============================================================================

def _build_session_store(config) -> Any:
    return make_store(
        config.path("session.adapter", "memory"),
        app_path(config, config.path("session.dir", "sessions")),
        prefix="sess_",
        lifetime=int(config.path("session.lifetime", 0))
    )


def _build_session(config, container) -> Any:
    from ..services.session import Session

    return Session(
        container.resolve("session_store"),
        name=config.path("session.name", "keel_session"),
        lifetime=int(config.path("session.lifetime", 0))
    )


@initializer("session")
def init_session(container: ServiceContainer) -> None:
    config = container.resolve("config")
    container.register("session_store", ServiceFactory(_build_session_store, {"config": config}))
    container.register("session", ServiceFactory(_build_session, {
        "config": config,
        "container": CONTAINER,
    }))


# ============================================================================
# Database
# ============================================================================

@initializer("profiler")
def init_profiler(container: ServiceContainer) -> None:
    from ..storage.database import Profiler

    config = container.resolve("config")
    max_profiles = config.path("profiling.max_profiles", 1000)
    container.register("profiler", ServiceFactory(Profiler, {"max_profiles": max_profiles}))


def _build_db(config, profiler) -> Any:
    from ..mvc.events import EventsManager
    from ..storage.database import SQLiteAdapter, attach_profiler

    adapter = config.path("database.adapter", "sqlite")
    if adapter == "supabase":
        from ..storage.supabase import SupabaseAdapter
        return SupabaseAdapter(
            config.path("database.supabase_url"),
            config.path("database.supabase_key")
        )
    if adapter != "sqlite":
        raise ValueError(f"Unsupported database adapter '{adapter}'")

    dbname = config.path("database.dbname", ":memory:")
    if dbname != ":memory:":
        dbname = app_path(config, dbname)
    db = SQLiteAdapter(dbname)

    if config.path("profiling.query", False):
        events_manager = EventsManager()
        attach_profiler(events_manager, profiler)
        db.set_events_manager(events_manager)
    return db


@initializer("db")
def init_db(container: ServiceContainer) -> None:
    config = container.resolve("config")
    profiler = container.resolve("profiler")
    container.register("db", ServiceFactory(_build_db, {"config": config, "profiler": profiler}))


@initializer("behaviors")
def init_behaviors(container: ServiceContainer) -> None:
    from ..mvc.behaviors import TimestampBehavior

    container.register("behavior_timestamp", ServiceFactory(TimestampBehavior), Lifetime.TRANSIENT)


# ============================================================================
# Cache
# ============================================================================

def _build_cache_store(config) -> Any:
    return make_store(
        config.path("cache.adapter", "memory"),
        app_path(config, config.path("cache.dir", "cache")),
        prefix=config.path("cache.prefix", ""),
        lifetime=int(config.path("cache.lifetime", 3600))
    )


@initializer("data_cache")
def init_data_cache(container: ServiceContainer) -> None:
    config = container.resolve("config")
    container.register("data_cache", ServiceFactory(_build_cache_store, {"config": config}))


def _build_cache(config, container) -> Any:
    from ..services.cache import Cache

    backend = None if container.has("data_cache") else _build_cache_store(config)
    return Cache(container, backend=backend, prefix=config.path("cache.key_prefix", ""))


@initializer("cache")
def init_cache(container: ServiceContainer) -> None:
    config = container.resolve("config")
    container.register("cache", ServiceFactory(_build_cache, {
        "config": config,
        "container": CONTAINER,
    }))


# ============================================================================
# Application services
# ============================================================================

@initializer("util")
def init_util(container: ServiceContainer) -> None:
    from ..services.util import Util

    container.register("util", ServiceFactory(Util))


@initializer("auth")
def init_auth(container: ServiceContainer) -> None:
    from ..services.auth import Auth

    container.register("auth", ServiceFactory(Auth, {"container": CONTAINER}))


@initializer("validate")
def init_validate(container: ServiceContainer) -> None:
    from ..services.validate import Validate

    container.register("validate", ServiceFactory(Validate), Lifetime.TRANSIENT)
