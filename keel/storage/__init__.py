"""
Storage module for Keel
"""
from .base import KeyValueStore
from .database import Profiler, SQLiteAdapter, attach_profiler
from .local_json import JsonFileStore
from .memory import MemoryStore
from .supabase import SupabaseAdapter

__all__ = [
    'KeyValueStore',
    'JsonFileStore',
    'MemoryStore',
    'Profiler',
    'SQLiteAdapter',
    'SupabaseAdapter',
    'attach_profiler',
]
