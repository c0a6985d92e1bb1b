import logging
from typing import Dict, Iterable, List, Optional

from app.config.page_catalog import CATALOG_KEYS, PAGE_CATALOG, flatten_keys, walk_catalog
from app.core.errors import CatalogError
from app.modules.permissions.resolver import PermissionResolver, PermissionSnapshot
from app.modules.permissions.schemas import (
    Action, MatrixRow, PageFlagsEntry, PermissionMatrixResponse, PermissionRecord, UserId,
)

logger = logging.getLogger(__name__)

PermissionMatrix = Dict[str, PermissionRecord]


class PermissionService:
    """Editor over one target user's grants, one row per catalog key."""

    def __init__(self, store, resolver: Optional[PermissionResolver] = None):
        self.store = store
        self.resolver = resolver or PermissionResolver(store)

    def load_matrix(self, target_user_id: UserId, strict: bool = False) -> PermissionMatrix:
        """Resolved record for every catalog key, allow-all where no row exists.

        With ``strict`` a failed read raises LookupFailure instead of degrading
        to allow-all. Writes must start from the stored state.
        """
        if not strict:
            return self.matrix_from_snapshot(self.resolver.resolve_all(target_user_id))
        records = self.store.list_for_user(target_user_id)
        return self.matrix_from_snapshot(PermissionSnapshot(
            target_user_id,
            {record.page: record for record in records if record.is_active},
        ))

    def matrix_from_snapshot(self, snapshot: PermissionSnapshot) -> PermissionMatrix:
        return {page: snapshot.get(page) for page in flatten_keys()}

    def describe_matrix(self, target_user_id: UserId, matrix: PermissionMatrix) -> PermissionMatrixResponse:
        """Matrix as ordered rows carrying the catalog's nesting, for the editor table"""
        rows = []
        for node, depth, parent in walk_catalog(PAGE_CATALOG):
            record = matrix.get(node.key) or PermissionRecord.allow_all(target_user_id, node.key)
            rows.append(MatrixRow(
                page=node.key,
                label=node.label,
                icon=node.icon.value,
                depth=depth,
                parent=parent,
                **record.flags().model_dump(),
            ))
        return PermissionMatrixResponse(user_id=target_user_id, rows=rows)

    def set_flag(
        self,
        matrix: PermissionMatrix,
        target_user_id: UserId,
        page: str,
        action: Action,
        value: bool,
    ) -> PermissionRecord:
        """Flip one flag in the caller's matrix, then persist the page's full row.

        The matrix keeps the new value even when the write fails; PersistFailure
        propagates so the caller can reload. A page missing from the matrix is
        read from the store, and a LookupFailure there aborts before any write.
        """
        if page not in CATALOG_KEYS:
            raise CatalogError(f"Unknown page key: {page}")
        action = Action(action)
        current = matrix.get(page)
        if current is None:
            current = self.store.get(target_user_id, page) or PermissionRecord.allow_all(target_user_id, page)
        updated = current.model_copy(update={
            "user_id": target_user_id,
            action.value: value,
            "is_active": True,
        })
        matrix[page] = updated
        self.store.upsert([updated])
        logger.info(f"Permission {page}.{action.value}={value} saved for user {target_user_id}")
        return updated

    def save_matrix(self, target_user_id: UserId, entries: Iterable[PageFlagsEntry]) -> List[PermissionRecord]:
        """Bulk replace: one full row per catalog key, allow-all for keys not given"""
        by_page = {}
        for entry in entries:
            if entry.page not in CATALOG_KEYS:
                raise CatalogError(f"Unknown page key: {entry.page}")
            by_page[entry.page] = entry
        records = []
        for page in flatten_keys():
            entry = by_page.get(page)
            flags = entry.model_dump(exclude={"page"}) if entry else {}
            records.append(PermissionRecord(user_id=target_user_id, page=page, is_active=True, **flags))
        saved = self.store.upsert(records)
        logger.info(f"Saved {len(records)} permission rows for user {target_user_id}")
        return saved

    def deactivate(self, target_user_id: UserId, page: str) -> bool:
        """Soft delete the user's row for a page; the page falls back to allow-all"""
        deactivated = self.store.deactivate(target_user_id, page)
        if deactivated:
            logger.info(f"Permission {page} deactivated for user {target_user_id}")
        return deactivated

    def orphaned_records(self, target_user_id: Optional[UserId] = None) -> List[PermissionRecord]:
        """Active rows whose page the catalog no longer declares"""
        if target_user_id is None:
            records = self.store.list_active()
        else:
            records = self.store.list_for_user(target_user_id)
        return [record for record in records if record.page not in CATALOG_KEYS]
