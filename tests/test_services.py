"""
Tests for storage backends and application services
"""
import os
import sqlite3
import stat
import threading
import time
from unittest.mock import MagicMock

import pytest

from keel.core.config_store import ConfigNode
from keel.core.container import Lifetime, ServiceContainer, set_default
from keel.core.factory import CONTAINER, ServiceFactory
from keel.mvc.behaviors import TimestampBehavior
from keel.mvc.cookies import Cookies
from keel.mvc.events import EventsManager
from keel.mvc.model import BaseModel
from keel.mvc.url import UrlResolver
from keel.mvc.view import View
from keel.services.auth import Auth
from keel.services.cache import Cache
from keel.services.session import Session
from keel.services.util import Util
from keel.services.validate import Validate
from keel.storage.database import Profiler, SQLiteAdapter, attach_profiler
from keel.storage.local_json import JsonFileStore
from keel.storage.memory import MemoryStore
from keel.storage.supabase import SupabaseAdapter


class TestMemoryStore:

    def test_set_get_delete(self):
        store = MemoryStore()
        store.set("a", {"x": 1})
        assert store.get("a") == {"x": 1}
        assert store.exists("a")
        assert store.delete("a") is True
        assert store.delete("a") is False
        assert store.get("a", "gone") == "gone"

    def test_expiry(self, monkeypatch):
        store = MemoryStore(lifetime=10)
        now = time.time()
        monkeypatch.setattr("keel.storage.memory.time.time", lambda: now)
        store.set("a", 1)
        monkeypatch.setattr("keel.storage.memory.time.time", lambda: now + 11)
        assert store.get("a") is None
        assert store.keys() == []

    def test_zero_lifetime_never_expires(self, monkeypatch):
        store = MemoryStore(lifetime=10)
        now = time.time()
        monkeypatch.setattr("keel.storage.memory.time.time", lambda: now)
        store.set("a", 1, lifetime=0)
        monkeypatch.setattr("keel.storage.memory.time.time", lambda: now + 10_000)
        assert store.get("a") == 1

    def test_clear(self):
        store = MemoryStore()
        store.set("a", 1)
        store.set("b", 2)
        store.clear()
        assert store.keys() == []


class TestJsonFileStore:

    def test_round_trip_and_permissions(self, tmp_path):
        store = JsonFileStore(str(tmp_path / "cache"), prefix="c_")
        store.set("user:1", {"name": "Ada"})

        assert store.get("user:1") == {"name": "Ada"}
        assert store.keys() == ["user:1"]
        files = list((tmp_path / "cache").glob("c_*.json"))
        assert len(files) == 1
        assert stat.S_IMODE(os.stat(files[0]).st_mode) == 0o600

    def test_expired_entry_is_removed(self, tmp_path, monkeypatch):
        store = JsonFileStore(str(tmp_path), lifetime=5)
        now = time.time()
        monkeypatch.setattr("keel.storage.local_json.time.time", lambda: now)
        store.set("k", "v")
        monkeypatch.setattr("keel.storage.local_json.time.time", lambda: now + 6)
        assert store.get("k") is None
        assert not list(tmp_path.glob("*.json"))

    def test_corrupt_file_reads_as_missing(self, tmp_path):
        store = JsonFileStore(str(tmp_path))
        store.set("k", "v")
        next(tmp_path.glob("*.json")).write_text("{broken")
        assert store.get("k", "default") == "default"

    def test_prefixes_share_a_directory(self, tmp_path):
        first = JsonFileStore(str(tmp_path), prefix="a_")
        second = JsonFileStore(str(tmp_path), prefix="b_")
        first.set("k", 1)
        assert second.keys() == []
        assert second.get("k") is None

    def test_concurrent_writers_same_key(self, tmp_path):
        store = JsonFileStore(str(tmp_path))
        errors = []

        def writer(n):
            try:
                for i in range(100):
                    store.set("shared", {"writer": n, "i": i})
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert store.get("shared")["i"] == 99
        assert not list(tmp_path.glob("*.tmp"))

    def test_unserializable_value_leaves_no_temp_file(self, tmp_path):
        store = JsonFileStore(str(tmp_path))
        with pytest.raises(TypeError):
            store.set("k", object())
        assert list(tmp_path.iterdir()) == []
        assert store.get("k") is None


class TestSession:

    def test_starts_on_first_use(self):
        session = Session(MemoryStore())
        assert not session.started
        session.set("k", "v")
        assert session.started
        assert session.get("k") == "v"

    def test_resume_by_id(self):
        store = MemoryStore()
        first = Session(store)
        first.set("user", "u1")

        second = Session(store)
        assert second.start(first.session_id) == first.session_id
        assert second.get("user") == "u1"

    def test_unknown_id_opens_new_session(self):
        session = Session(MemoryStore())
        session_id = session.start("does-not-exist")
        assert session_id != "does-not-exist"
        assert not session.has("user")

    def test_remove_and_destroy(self):
        store = MemoryStore()
        session = Session(store, name="s")
        session.set("a", 1)
        session.remove("a")
        assert not session.has("a")

        session_id = session.session_id
        session.destroy()
        assert not session.started
        assert store.get(f"s:{session_id}") is None

    def test_remove_key_holding_none_is_saved(self, tmp_path):
        store = JsonFileStore(str(tmp_path))
        session = Session(store)
        session.set("flash", None)
        session.remove("flash")

        resumed = Session(store)
        resumed.start(session.session_id)
        assert not resumed.has("flash")


class TestAuth:

    def make_container(self):
        container = ServiceContainer()
        container.register_instance("session", Session(MemoryStore()))
        container.register("auth", ServiceFactory(Auth, {"container": CONTAINER}))
        return container

    def test_login_logout(self):
        auth = self.make_container().resolve("auth")
        assert not auth.is_logged_in()

        auth.login("u1")
        assert auth.user_id == "u1"
        assert auth.is_logged_in()

        auth.logout()
        assert auth.user_id is None


class TestCache:

    def test_prefers_data_cache_service(self):
        container = ServiceContainer()
        store = MemoryStore()
        container.register_instance("data_cache", store)
        cache = Cache(container, prefix="p_")

        cache.save("k", "v")
        assert store.get("p_k") == "v"
        assert cache.exists("k")
        assert cache.delete("k")
        assert not cache.exists("k")

    def test_own_backend(self):
        cache = Cache(ServiceContainer(), backend=MemoryStore())
        cache.save("k", "v")
        assert cache.get("k") == "v"

    def test_no_backend(self):
        with pytest.raises(RuntimeError):
            Cache(ServiceContainer()).get("k")

    def test_remember_computes_once(self):
        cache = Cache(ServiceContainer(), backend=MemoryStore())
        calls = []

        def produce():
            calls.append(1)
            return None

        assert cache.remember("k", produce) is None
        assert cache.remember("k", produce) is None
        assert len(calls) == 1


class TestValidate:

    def test_rules(self):
        validate = Validate()
        messages = validate.check(
            {"email": "not-an-email", "name": "", "bio": "x" * 20},
            {
                "email": ["required", "email"],
                "name": ["required", "min_length:2"],
                "bio": ["max_length:10"],
                "nickname": ["min_length:3"],
            }
        )
        assert messages == {
            "email": ["email must be a valid email address"],
            "name": ["name is required", "name must be at least 2 characters"],
            "bio": ["bio must be at most 10 characters"],
        }
        assert not validate.is_valid()

    def test_valid_input(self):
        validate = Validate()
        assert validate.check({"email": "ada@example.com"}, {"email": ["required", "email"]}) == {}
        assert validate.is_valid()

    def test_unknown_rule(self):
        with pytest.raises(ValueError):
            Validate().check({"a": "x"}, {"a": ["uppercase"]})


class TestUtil:

    def test_slugify(self):
        assert Util().slugify("Héllo, World!") == "hello-world"

    def test_truncate(self):
        util = Util()
        assert util.truncate("short", 10) == "short"
        assert util.truncate("a long sentence here", 10) == "a long..."

    def test_random_string(self):
        value = Util().random_string(12)
        assert len(value) == 12
        assert value.isalnum()


class TestDatabase:

    def test_query_rows_as_dicts(self):
        db = SQLiteAdapter()
        db.execute("CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT)")
        assert db.execute("INSERT INTO items (name) VALUES (?)", ("pen",)) == 1
        assert db.query("SELECT id, name FROM items") == [{"id": 1, "name": "pen"}]
        assert db.get_sql_statement() == "SELECT id, name FROM items"
        db.close()

    def test_profiler_records_statements(self):
        events = EventsManager()
        profiler = Profiler()
        attach_profiler(events, profiler)
        db = SQLiteAdapter(events_manager=events)

        db.execute("CREATE TABLE t (x INTEGER)")
        db.query("SELECT x FROM t")

        assert len(profiler.get_profiles()) == 2
        assert profiler.get_last_profile().sql == "SELECT x FROM t"
        assert profiler.get_total_elapsed() >= 0
        profiler.reset()
        assert profiler.get_profiles() == []

    def test_failed_statement_is_still_profiled(self):
        events = EventsManager()
        profiler = Profiler()
        attach_profiler(events, profiler)
        db = SQLiteAdapter(events_manager=events)

        with pytest.raises(sqlite3.OperationalError):
            db.query("SELECT * FROM missing_table")
        assert profiler.get_last_profile().sql == "SELECT * FROM missing_table"

    def test_profiler_keeps_most_recent(self):
        events = EventsManager()
        profiler = Profiler(max_profiles=3)
        attach_profiler(events, profiler)
        db = SQLiteAdapter(events_manager=events)

        for n in range(10):
            db.query(f"SELECT {n}")

        assert [p.sql for p in profiler.get_profiles()] == ["SELECT 7", "SELECT 8", "SELECT 9"]
        assert profiler.get_last_profile().sql == "SELECT 9"


class TestViewAndUrl:

    def test_render(self, tmp_path):
        (tmp_path / "hello.html").write_text("Hello $name, $unknown")
        view = View(tmp_path)
        assert view.exists("hello")
        assert view.render("hello", {"name": "Ada"}) == "Hello Ada, $unknown"

    def test_missing_template(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            View(tmp_path).render("nope")

    def test_template_outside_views_dir(self, tmp_path):
        views = tmp_path / "views"
        views.mkdir()
        (tmp_path / "secret.html").write_text("secret")
        view = View(views)
        assert not view.exists("../secret")
        with pytest.raises(ValueError):
            view.render("../secret")

    def test_url(self):
        url = UrlResolver("/app/", "/static/")
        assert url.get("users/1") == "/app/users/1"
        assert url.get_static("/css/site.css") == "/static/css/site.css"


class TestCookies:

    def test_set_get_delete(self):
        cookies = Cookies()
        cookies.set("a", "1", max_age=60)
        assert cookies.has("a")
        assert cookies.get("a") == "1"
        cookies.delete("a")
        assert not cookies.has("a")
        assert cookies.deleted == {"a"}

    def test_encryption_not_supported(self):
        with pytest.raises(NotImplementedError):
            Cookies(use_encryption=True).set("a", "1")


class Article(BaseModel):
    behaviors = ["behavior_timestamp"]


class TestModel:

    def make_container(self):
        container = ServiceContainer()
        container.register_instance("config", ConfigNode({"app": {"name": "m"}}))
        container.register("behavior_timestamp", TimestampBehavior, Lifetime.TRANSIENT)
        return container

    def test_instance_container(self):
        container = self.make_container()
        article = Article(container, title="Hi")
        assert article.get_service("config").app.name == "m"
        assert article.get_di() is container

    def test_default_container(self):
        container = self.make_container()
        set_default(container)
        assert Article(title="Hi").get_di() is container
        assert Article.get_static_di() is container
        assert Article.get_static_service("config").app.name == "m"

    def test_touch_applies_behaviors(self):
        article = Article(self.make_container(), title="Hi").touch()
        created = article.created_at
        assert created is not None
        assert article.updated_at is not None

        article.touch()
        assert article.created_at == created

    def test_to_dict_skips_private_fields(self):
        article = Article(self.make_container(), title="Hi").touch()
        assert set(article.to_dict()) == {"title", "created_at", "updated_at"}


class TestSupabaseAdapter:

    @pytest.fixture
    def client(self, monkeypatch):
        client = MagicMock()
        monkeypatch.setattr("keel.storage.supabase.SUPABASE_AVAILABLE", True)
        monkeypatch.setattr("keel.storage.supabase.create_client", lambda url, key: client, raising=False)
        return client

    def test_requires_credentials(self, client):
        with pytest.raises(ValueError):
            SupabaseAdapter("", "")

    def test_select_with_filters(self, client):
        query = client.table.return_value.select.return_value
        query.eq.return_value.limit.return_value.execute.return_value.data = [{"id": 1}]

        adapter = SupabaseAdapter("https://example.supabase.co", "key")
        assert adapter.select("items", {"id": 1}, limit=1) == [{"id": 1}]
        client.table.assert_called_with("items")
        query.eq.assert_called_once_with("id", 1)

    def test_insert_returns_row(self, client):
        client.table.return_value.insert.return_value.execute.return_value.data = [{"id": 2}]
        adapter = SupabaseAdapter("https://example.supabase.co", "key")
        assert adapter.insert("items", {"name": "pen"}) == {"id": 2}
