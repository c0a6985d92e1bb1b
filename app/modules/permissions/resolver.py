"""
Permission resolution.

Every lookup falls back to an allow-all record when there is no acting user,
no active row, or the store cannot be read. Checks must never block page
rendering, so lookup failures are logged and swallowed here and nowhere else.
"""

import logging
from typing import Dict, Optional

from app.core.errors import LookupFailure
from app.modules.permissions.schemas import PermissionRecord, UserId

logger = logging.getLogger(__name__)


class PermissionSnapshot:
    """Materialized active records for one user; answers lookups without I/O."""

    def __init__(self, user_id: Optional[UserId], records: Dict[str, PermissionRecord]):
        self.user_id = user_id
        self.records = records

    def get(self, page: str) -> PermissionRecord:
        record = self.records.get(page)
        if record is None:
            return PermissionRecord.allow_all(self.user_id, page)
        return record

    def __contains__(self, page: str) -> bool:
        return page in self.records


class PermissionResolver:
    def __init__(self, store):
        self.store = store

    def resolve(self, user_id: Optional[UserId], page: str) -> PermissionRecord:
        if user_id is None:
            return PermissionRecord.allow_all(None, page)
        try:
            record = self.store.get(user_id, page)
        except LookupFailure as e:
            logger.warning(f"Permission lookup failed for user {user_id} page {page}, allowing: {e}")
            return PermissionRecord.allow_all(user_id, page)
        if record is None or not record.is_active:
            return PermissionRecord.allow_all(user_id, page)
        return record

    def resolve_all(self, user_id: Optional[UserId]) -> PermissionSnapshot:
        """One batch lookup of every active record for the user."""
        if user_id is None:
            return PermissionSnapshot(None, {})
        try:
            records = self.store.list_for_user(user_id)
        except LookupFailure as e:
            logger.warning(f"Permission batch lookup failed for user {user_id}, allowing all: {e}")
            return PermissionSnapshot(user_id, {})
        return PermissionSnapshot(
            user_id,
            {record.page: record for record in records if record.is_active},
        )


class PermissionSession:
    """Per-session cache of one user's snapshot.

    Loaded on first use; dropped when the session is bound to another user
    or on an explicit refresh.
    """

    def __init__(self, resolver: PermissionResolver, user_id: Optional[UserId] = None):
        self.resolver = resolver
        self.user_id = user_id
        self._snapshot: Optional[PermissionSnapshot] = None

    def bind(self, user_id: Optional[UserId]) -> "PermissionSession":
        if user_id != self.user_id:
            self.user_id = user_id
            self._snapshot = None
        return self

    def refresh(self) -> PermissionSnapshot:
        self._snapshot = self.resolver.resolve_all(self.user_id)
        return self._snapshot

    @property
    def snapshot(self) -> PermissionSnapshot:
        if self._snapshot is None:
            return self.refresh()
        return self._snapshot

    def get(self, page: str) -> PermissionRecord:
        return self.snapshot.get(page)
