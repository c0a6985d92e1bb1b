from supabase import create_client, Client
from app.config import settings


class SupabaseClient:
    """Lazily created Supabase clients shared by the whole process.

    The anon client serves requests, where row level security applies to the
    caller. The service-role client exists for the orphan permission report,
    which reads and deactivates rows across every user.
    """
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Falls back to the anon client when no key is set."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    """Service-role client for maintenance scripts that act on all users' permission rows"""
    return SupabaseClient.get_service_client()
