"""
Error taxonomy for the permission subsystem.

Lookup failures degrade to allow-all inside the resolver, but propagate from
the editor's strict pre-write read. Persist failures are surfaced to the
caller. Catalog errors are programming or input errors.
"""


class PermissionStoreError(Exception):
    """A Permission Store call failed (network, PostgREST or auth error)."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation}: {detail}")


class LookupFailure(PermissionStoreError):
    """Store unreachable or query error while reading permission rows."""


class PersistFailure(PermissionStoreError):
    """Upsert or deactivation of a permission row did not go through."""


class CatalogError(ValueError):
    """Duplicated key in the page catalog, or a page key the catalog does not declare."""


def extract_supabase_error(error: Exception) -> str:
    """
    Readable details from Supabase Python client errors.
    Handles PostgREST errors (message attribute), errors with args, and plain exceptions.
    """
    message = getattr(error, "message", None)
    if message:
        return str(message)
    if error.args:
        return str(error.args[0])
    return str(error) or error.__class__.__name__
