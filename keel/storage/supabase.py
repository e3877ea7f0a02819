"""
Supabase database adapter
Remote database for production deployments
"""
from typing import Any, Dict, List, Optional

from ..utils.logger import get_logger

logger = get_logger(__name__)

try:
    from supabase import create_client, Client
    SUPABASE_AVAILABLE = True
except ImportError:
    SUPABASE_AVAILABLE = False
    Client = None


class SupabaseAdapter:
    """Table access through a Supabase client"""

    def __init__(self, supabase_url: str, supabase_key: str):
        """
        Initialize Supabase adapter

        Args:
            supabase_url: Supabase project URL
            supabase_key: Supabase service role key
        """
        if not SUPABASE_AVAILABLE:
            raise ImportError("Supabase package not installed. Install with: pip install supabase")
        if not supabase_url or not supabase_key:
            raise ValueError("Supabase url and key are required")
        self.client: Client = create_client(supabase_url, supabase_key)
        logger.debug(f"Supabase client created for {supabase_url}")

    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        query = self.client.table(table).select("*")
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        if limit is not None:
            query = query.limit(limit)
        result = query.execute()
        return result.data or []

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        result = self.client.table(table).insert(row).execute()
        return result.data[0] if result.data else {}

    def delete(self, table: str, filters: Dict[str, Any]) -> int:
        query = self.client.table(table).delete()
        for column, value in filters.items():
            query = query.eq(column, value)
        result = query.execute()
        return len(result.data or [])
