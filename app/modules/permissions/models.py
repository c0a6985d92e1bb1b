# Supabase table: permissoes_usuario (name configurable via PERMISSIONS_TABLE)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in store.py

"""
Expected Supabase table structure:

permissoes_usuario:
- id: bigint (primary key, identity)
- user_id: uuid (foreign key to usuarios.id, not null)
- page: text (not null) - a page catalog key, e.g. "units", "purchases_xml"
- can_view: boolean (not null, default: true)
- can_create: boolean (not null, default: true)
- can_update: boolean (not null, default: true)
- can_delete: boolean (not null, default: true)
- is_active: boolean (not null, default: true) - soft-delete marker
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (user_id, page) - conflict target for upserts

No row for a (user_id, page) pair means every action is allowed.
Rows are never hard-deleted; deactivation sets is_active = false.
Rows whose page is no longer declared in the page catalog are left alone.
"""
