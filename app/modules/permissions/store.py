import logging
from supabase import Client
from typing import Iterable, List, Optional

from app.core.errors import LookupFailure, PersistFailure, extract_supabase_error
from app.modules.permissions.schemas import PermissionRecord, UserId

logger = logging.getLogger(__name__)

COLUMNS = "user_id, page, can_view, can_create, can_update, can_delete, is_active"
CONFLICT_TARGET = "user_id,page"


class SupabasePermissionStore:
    """Permission rows kept in a Supabase table keyed by (user_id, page)."""

    def __init__(self, supabase: Client, table: str):
        self.supabase = supabase
        self.table = table

    def get(self, user_id: UserId, page: str) -> Optional[PermissionRecord]:
        """Active record for (user_id, page), or None"""
        try:
            result = self.supabase.table(self.table)\
                .select(COLUMNS)\
                .eq("user_id", user_id)\
                .eq("page", page)\
                .eq("is_active", True)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error reading permission {page} for user {user_id}: {e}")
            raise LookupFailure("get", extract_supabase_error(e)) from e
        if not result.data:
            return None
        return PermissionRecord.from_row(result.data[0])

    def list_for_user(self, user_id: UserId) -> List[PermissionRecord]:
        """All active records for a user"""
        try:
            result = self.supabase.table(self.table)\
                .select(COLUMNS)\
                .eq("user_id", user_id)\
                .eq("is_active", True)\
                .execute()
        except Exception as e:
            logger.error(f"Error listing permissions for user {user_id}: {e}")
            raise LookupFailure("list_for_user", extract_supabase_error(e)) from e
        return [PermissionRecord.from_row(row) for row in result.data or []]

    def list_active(self) -> List[PermissionRecord]:
        """Every active record, across users"""
        try:
            result = self.supabase.table(self.table)\
                .select(COLUMNS)\
                .eq("is_active", True)\
                .execute()
        except Exception as e:
            logger.error(f"Error listing permissions: {e}")
            raise LookupFailure("list_active", extract_supabase_error(e)) from e
        return [PermissionRecord.from_row(row) for row in result.data or []]

    def upsert(self, records: Iterable[PermissionRecord]) -> List[PermissionRecord]:
        """Insert or replace full rows; (user_id, page) is the conflict target"""
        rows = [record.to_row() for record in records]
        if not rows:
            return []
        try:
            result = self.supabase.table(self.table)\
                .upsert(rows, on_conflict=CONFLICT_TARGET)\
                .execute()
        except Exception as e:
            logger.error(f"Error upserting {len(rows)} permission rows: {e}")
            raise PersistFailure("upsert", extract_supabase_error(e)) from e
        if result.data:
            return [PermissionRecord.from_row(row) for row in result.data]
        return [PermissionRecord(**row) for row in rows]

    def deactivate(self, user_id: UserId, page: str) -> bool:
        """Soft delete; True when a row was flipped"""
        try:
            result = self.supabase.table(self.table)\
                .update({"is_active": False})\
                .eq("user_id", user_id)\
                .eq("page", page)\
                .execute()
        except Exception as e:
            logger.error(f"Error deactivating permission {page} for user {user_id}: {e}")
            raise PersistFailure("deactivate", extract_supabase_error(e)) from e
        return bool(result.data)
