"""
Orphaned Permissions Report
Lists active permission rows whose page key the page catalog no longer
declares. Such rows are harmless (nothing consults them) but clutter the
table after a page is renamed or removed. With --deactivate they are
soft-deleted.
"""

import argparse
import logging
import sys

from app.config import settings
from app.core.errors import PermissionStoreError
from app.database.supabase_client import get_service_supabase
from app.modules.permissions.service import PermissionService
from app.modules.permissions.store import SupabasePermissionStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def report_orphans(service: PermissionService, deactivate: bool = False) -> int:
    """Log orphaned rows, optionally deactivating them; returns how many were found"""
    orphans = service.orphaned_records()
    if not orphans:
        logger.info("No orphaned permission rows")
        return 0

    for record in orphans:
        logger.info(f"Orphaned permission: user={record.user_id} page={record.page}")
        if deactivate:
            service.deactivate(record.user_id, record.page)

    action = "deactivated" if deactivate else "found"
    logger.info(f"{len(orphans)} orphaned permission rows {action}")
    return len(orphans)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Report permission rows for pages missing from the catalog")
    parser.add_argument("--deactivate", action="store_true", help="soft-delete the orphaned rows")
    args = parser.parse_args(argv)

    store = SupabasePermissionStore(get_service_supabase(), settings.permissions_table)
    try:
        report_orphans(PermissionService(store), deactivate=args.deactivate)
    except PermissionStoreError as e:
        logger.error(f"Error during orphan report: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
